"""Error Taxonomy — tagged service errors and typed storage failures.

Invariants:
    - Services never raise across their boundary: failures come back as ServiceError values
    - Every ServiceError has a code (ErrorCode), a human-readable message and an HTTP status
    - Storage implementations raise StorageError (or DuplicateKeyError for uniqueness
      violations); the service layer catches and translates them
    - INVALID_INPUT is produced by the boundary layer only, never by a service

Design Decisions:
    - Frozen dataclass over exception for results: callers discriminate by the error tag,
      not by except clauses (ADR: errors as data)
    - DuplicateKeyError subclasses StorageError: adapters signal the uniqueness category
      as a type instead of a driver-specific numeric code
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error categories surfaced to the boundary layer."""
    DUPLICATE_KEY = "DUPLICATE_KEY"
    NOT_FOUND = "NOT_FOUND"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    STORAGE_ERROR = "STORAGE_ERROR"
    INVALID_INPUT = "INVALID_INPUT"


_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.DUPLICATE_KEY: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.INVALID_CREDENTIALS: 401,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.STORAGE_ERROR: 500,
}


@dataclass(frozen=True)
class ServiceError:
    """Error half of a tagged result."""
    code: ErrorCode
    message: str

    @property
    def error(self) -> str:
        """The error tag. Present only on failures."""
        return self.message

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self.code]

    def to_response(self) -> dict:
        """Convert to the JSON error body returned by the API."""
        return {"error": self.message, "code": self.code.value}


def is_error(result: Any) -> bool:
    """True when a service result carries the error tag."""
    return isinstance(result, ServiceError)


# ─── Constructors ───────────────────────────────────────────────

def duplicate_key() -> ServiceError:
    return ServiceError(ErrorCode.DUPLICATE_KEY, "Username already exists")


def not_found(resource: str) -> ServiceError:
    return ServiceError(ErrorCode.NOT_FOUND, f"{resource} not found")


def invalid_credentials() -> ServiceError:
    # Same message for unknown user and wrong password
    return ServiceError(
        ErrorCode.INVALID_CREDENTIALS, "Invalid username or password",
    )


def storage_error(exc: BaseException, fallback: str) -> ServiceError:
    """Wrap a storage failure, keeping its message when it has one."""
    return ServiceError(ErrorCode.STORAGE_ERROR, str(exc) or fallback)


def invalid_input(message: str) -> ServiceError:
    return ServiceError(ErrorCode.INVALID_INPUT, message)


# ─── Storage Exceptions ─────────────────────────────────────────

class StorageError(Exception):
    """Storage operation failed. Raised by DocumentCollection implementations."""

    def __init__(self, message: str = "", operation: str = "unknown"):
        super().__init__(message)
        self.message = message
        self.operation = operation


class DuplicateKeyError(StorageError):
    """Write rejected by a uniqueness constraint."""

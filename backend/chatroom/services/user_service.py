"""User Service — account creation, lookup, login, deletion and partial updates.

Invariants:
    - Every operation returns SafeUser or ServiceError, never raises
    - Every success path strips password before building the projection
    - authenticate matches username AND password in one storage filter; a miss on either
      yields the same InvalidCredentials error (no username enumeration)
    - date_joined is set once in create and never patched by update
    - Username uniqueness is arbitrated by storage (DuplicateKeyError), no app-level locks

Design Decisions:
    - Plaintext password equality reproduces the stored-credential behavior; hashing would
      change the storage format and is tracked separately
    - No retries: a failed call is reported once, callers decide
"""

import logging
from datetime import datetime, timezone

from chatroom.core.errors import (
    DuplicateKeyError,
    ServiceError,
    duplicate_key,
    invalid_credentials,
    not_found,
    storage_error,
)
from chatroom.core.repository_protocols import Document, DocumentCollection
from chatroom.schemas.user import SafeUser, UserUpdate

logger = logging.getLogger(__name__)

UserResult = SafeUser | ServiceError

_IMMUTABLE_FIELDS = ("id", "date_joined")


def to_safe_user(document: Document) -> SafeUser:
    """Build the safe projection of a stored user document."""
    safe = {k: v for k, v in document.items() if k != "password"}
    return SafeUser.model_validate(safe)


class UserService:
    """Business logic over the users collection."""

    def __init__(self, users: DocumentCollection):
        self.users = users

    async def create(self, username: str, password: str) -> UserResult:
        document = {
            "username": username,
            "password": password,
            "date_joined": datetime.now(timezone.utc),
        }
        try:
            user = to_safe_user(await self.users.insert_one(document))
        except DuplicateKeyError:
            logger.warning(
                "Signup rejected: username taken", extra={"username": username},
            )
            return duplicate_key()
        except Exception as e:
            return _storage_failure(e, "Failed to save user", "create", username)

        logger.info("User created", extra={"username": username})
        return user

    async def get_by_username(self, username: str) -> UserResult:
        try:
            user = _project(await self.users.find_one({"username": username}))
        except Exception as e:
            return _storage_failure(e, "Failed to retrieve user", "get", username)

        if user is None:
            return not_found("User")
        return user

    async def authenticate(self, username: str, password: str) -> UserResult:
        try:
            user = _project(await self.users.find_one(
                {"username": username, "password": password},
            ))
        except Exception as e:
            return _storage_failure(e, "Login failed", "authenticate", username)

        if user is None:
            logger.warning("Login failed", extra={"username": username})
            return invalid_credentials()
        return user

    async def delete_by_username(self, username: str) -> UserResult:
        try:
            user = _project(await self.users.find_one_and_delete(
                {"username": username},
            ))
        except Exception as e:
            return _storage_failure(e, "Failed to delete user", "delete", username)

        if user is None:
            return not_found("User")
        logger.info("User deleted", extra={"username": username})
        return user

    async def update(
        self, username: str, fields: UserUpdate | dict,
    ) -> UserResult:
        """Apply a partial field set (password reset, rename) to one user."""
        patch = fields.patch() if isinstance(fields, UserUpdate) else dict(fields)
        for key in _IMMUTABLE_FIELDS:
            patch.pop(key, None)

        try:
            user = _project(await self.users.find_one_and_update(
                {"username": username}, patch,
            ))
        except DuplicateKeyError:
            logger.warning(
                "Update rejected: username taken", extra={"username": username},
            )
            return duplicate_key()
        except Exception as e:
            return _storage_failure(e, "Failed to update user", "update", username)

        if user is None:
            return not_found("User")
        logger.info(
            f"User updated ({', '.join(sorted(patch)) or 'no fields'})",
            extra={"username": username},
        )
        return user


def _project(document: Document | None) -> SafeUser | None:
    return to_safe_user(document) if document is not None else None


def _storage_failure(
    exc: Exception, fallback: str, operation: str, username: str,
) -> ServiceError:
    logger.error(
        f"User {operation} failed: {exc}",
        extra={"username": username, "operation": operation,
               "error_code": "STORAGE_ERROR"},
        exc_info=True,
    )
    return storage_error(exc, fallback)

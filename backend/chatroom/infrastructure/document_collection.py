"""SQL Document Collection — DocumentCollection adapter over one SQLAlchemy ORM model.

Invariants:
    - Documents are plain dicts keyed by column attribute names (id, username, ...)
    - Filters are equality matches on known columns; unknown fields raise StorageError
    - Every write commits before returning; failures roll back before raising
    - Unique violations → DuplicateKeyError, any other SQLAlchemyError → StorageError
    - Datetimes read back without tzinfo are treated as UTC (SQLite drops offsets)

Design Decisions:
    - Wraps the request-scoped AsyncSession: one storage interaction per call,
      released when the request dependency closes the session
    - find_one_and_update / find_one_and_delete run select + mutate in one transaction:
      the unique index arbitrates concurrent renames, not application locks
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.core.errors import DuplicateKeyError, StorageError
from chatroom.core.repository_protocols import (
    DESCENDING, Document, SortSpec,
)
from chatroom.db.base import Base

logger = logging.getLogger(__name__)


class SqlDocumentCollection:
    """Find/insert/update/delete-by-filter semantics for a single table."""

    def __init__(self, db: AsyncSession, model: type[Base]):
        self.db = db
        self.model = model
        self.name = model.__tablename__
        self._fields = [attr.key for attr in sa_inspect(model).column_attrs]

    async def insert_one(self, document: Document) -> Document:
        self._check_fields(document, "insert")
        async with self._guard("insert"):
            row = self.model(**document)
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
        return self._to_document(row)

    async def find_one(self, filter: Document) -> Document | None:
        async with self._guard("find"):
            row = await self._select_one(filter)
        return self._to_document(row) if row is not None else None

    async def find_many(
        self, filter: Document, sort: SortSpec | None = None,
    ) -> list[Document]:
        query = select(self.model).where(*self._where(filter, "find"))
        for field, direction in sort or []:
            self._check_fields({field: None}, "sort")
            column = getattr(self.model, field)
            query = query.order_by(
                column.desc() if direction == DESCENDING else column.asc(),
            )
        async with self._guard("find"):
            result = await self.db.execute(query)
            rows = result.scalars().all()
        return [self._to_document(row) for row in rows]

    async def find_one_and_update(
        self, filter: Document, patch: Document,
    ) -> Document | None:
        self._check_fields(patch, "update")
        async with self._guard("update"):
            row = await self._select_one(filter)
            if row is None:
                return None
            for field, value in patch.items():
                setattr(row, field, value)
            await self.db.commit()
            await self.db.refresh(row)
        return self._to_document(row)

    async def find_one_and_delete(self, filter: Document) -> Document | None:
        async with self._guard("delete"):
            row = await self._select_one(filter)
            if row is None:
                return None
            document = self._to_document(row)
            await self.db.delete(row)
            await self.db.commit()
        return document

    # -- helpers ---------------------------------------------------------------

    async def _select_one(self, filter: Document):
        result = await self.db.execute(
            select(self.model).where(*self._where(filter, "find")).limit(1),
        )
        return result.scalar_one_or_none()

    def _where(self, filter: Document, operation: str) -> list:
        self._check_fields(filter, operation)
        return [getattr(self.model, k) == v for k, v in filter.items()]

    def _check_fields(self, document: Document, operation: str) -> None:
        unknown = sorted(set(document) - set(self._fields))
        if unknown:
            raise StorageError(
                f"Unknown field(s) for {self.name}: {', '.join(unknown)}",
                operation,
            )

    def _to_document(self, row) -> Document:
        document = {}
        for field in self._fields:
            value = getattr(row, field)
            if isinstance(value, datetime) and value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            document[field] = value
        return document

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncGenerator[None, None]:
        """Map SQLAlchemy failures to storage errors, rolling back first."""
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            if _is_unique_violation(e):
                logger.warning(
                    f"{self.name} {operation} violated a unique constraint: {e.orig}",
                    extra={"operation": operation},
                )
                raise DuplicateKeyError(
                    f"Duplicate key in {self.name}", operation,
                ) from e
            logger.error(
                f"{self.name} {operation} violated a constraint: {e.orig}",
                extra={"operation": operation},
            )
            raise StorageError(
                "Integrity constraint violated", operation,
            ) from e
        except OperationalError as e:
            await self.db.rollback()
            logger.error(
                f"{self.name} {operation} operational error: {e}",
                extra={"operation": operation},
            )
            raise StorageError(
                "Connection or operational error", operation,
            ) from e
        except DBAPIError as e:
            await self.db.rollback()
            logger.error(
                f"{self.name} {operation} driver error: {e}",
                extra={"operation": operation},
            )
            raise StorageError("Database driver error", operation) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"{self.name} {operation} failed: {e}",
                extra={"operation": operation},
            )
            raise StorageError("Database operation failed", operation) from e


_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True for unique-index violations (asyncpg SQLSTATE or SQLite message)."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == _UNIQUE_VIOLATION
    return "unique constraint" in str(orig).lower()

"""Boundary Protocols — contracts between the service layer and its collaborators.

Invariants:
    - Services depend on DocumentCollection, never on SQLAlchemy directly
    - Filters are equality matches on document fields ({"username": "alice"})
    - Sort specs are (field, direction) pairs, 1 ascending and -1 descending
    - Implementations raise StorageError / DuplicateKeyError (core/errors.py)

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass AsyncMock or any fake
      (ADR: no inheritance hierarchy)
    - MessagePublisher is sync and fire-and-forget: the boundary layer calls it after
      a successful save and never awaits delivery
"""

from typing import Any, Protocol

Document = dict[str, Any]
SortSpec = list[tuple[str, int]]

ASCENDING = 1
DESCENDING = -1


class DocumentCollection(Protocol):
    """Document store contract for one collection — implemented by infrastructure."""
    async def insert_one(self, document: Document) -> Document: ...
    async def find_one(self, filter: Document) -> Document | None: ...
    async def find_many(
        self, filter: Document, sort: SortSpec | None = None,
    ) -> list[Document]: ...
    async def find_one_and_update(
        self, filter: Document, patch: Document,
    ) -> Document | None: ...
    async def find_one_and_delete(self, filter: Document) -> Document | None: ...


class MessagePublisher(Protocol):
    """Notification hook for connected listeners — implemented by infrastructure."""
    def publish(self, event: str, payload: dict) -> None: ...

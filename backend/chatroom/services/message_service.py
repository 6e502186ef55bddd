"""Message Service — persist and list chat messages.

Invariants:
    - save returns the stored ChatMessage (with its assigned id) or a StorageError result
    - save assumes msg_date_time is already set; defaulting happens at the boundary
    - list_all is ordered by msg_date_time ascending regardless of storage ordering
    - list_all degrades any query, projection or ordering failure to []

Design Decisions:
    - Storage is asked for ascending order AND the result is re-sorted in memory:
      stable sort, so equal timestamps keep storage order
    - No update/delete operations: messages are immutable
"""

import logging

from chatroom.core.errors import ServiceError, storage_error
from chatroom.core.repository_protocols import ASCENDING, DocumentCollection
from chatroom.schemas.message import ChatMessage

logger = logging.getLogger(__name__)


class MessageService:
    """Business logic over the messages collection."""

    def __init__(self, messages: DocumentCollection):
        self.messages = messages

    async def save(self, message: ChatMessage) -> ChatMessage | ServiceError:
        document = message.model_dump(exclude={"id"})
        try:
            stored = ChatMessage.model_validate(
                await self.messages.insert_one(document),
            )
        except Exception as e:
            logger.error(
                f"Failed to save message: {e}",
                extra={"operation": "save", "error_code": "STORAGE_ERROR"},
                exc_info=True,
            )
            return storage_error(e, "Failed to save message")

        logger.info("Message saved", extra={"message_id": str(stored.id)})
        return stored

    async def list_all(self) -> list[ChatMessage]:
        try:
            documents = await self.messages.find_many(
                {}, sort=[("msg_date_time", ASCENDING)],
            )
            messages = [ChatMessage.model_validate(d) for d in documents]
            return sorted(messages, key=lambda m: m.msg_date_time)
        except Exception as e:
            logger.error(
                f"Failed to list messages, returning empty feed: {e}",
                extra={"operation": "list"},
            )
            return []

"""Route Dependencies — build services over request-scoped collections.

Invariants:
    - A new collection (and service) per request, bound to that request's AsyncSession
    - Tests swap storage by overriding get_db, and listeners by overriding get_publisher
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.core.repository_protocols import MessagePublisher
from chatroom.infrastructure.database import get_db
from chatroom.infrastructure.document_collection import SqlDocumentCollection
from chatroom.infrastructure.listener_hub import get_listener_hub
from chatroom.models.message import Message as MessageModel
from chatroom.models.user import User as UserModel
from chatroom.services.message_service import MessageService
from chatroom.services.user_service import UserService


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(SqlDocumentCollection(db, UserModel))


def get_message_service(db: AsyncSession = Depends(get_db)) -> MessageService:
    return MessageService(SqlDocumentCollection(db, MessageModel))


def get_publisher() -> MessagePublisher:
    return get_listener_hub()

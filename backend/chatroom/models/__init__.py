"""ORM Models — SQLAlchemy declarative models for users and messages.

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from chatroom.models.user import User  # noqa: F401
from chatroom.models.message import Message  # noqa: F401

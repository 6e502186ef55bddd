"""Message ORM — persists chat messages.

Invariants:
    - Messages are immutable once inserted (no update/delete path exists)
    - msg_from is informational only: no foreign key to users
    - msg_date_time indexed for the ordered feed query
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from chatroom.db.base import Base


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    msg: Mapped[str] = mapped_column(Text, nullable=False)
    msg_from: Mapped[str] = mapped_column(String(100), nullable=False)
    msg_date_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )

"""Listener Hub — in-process fan-out of message events to connected SSE listeners.

Invariants:
    - One bounded asyncio.Queue per subscriber, removed when the subscriber leaves
    - publish() never blocks and never raises for a slow listener: a full queue
      drops that event for that listener only
    - Events are dicts {"type": <event>, "data": <payload>}

Design Decisions:
    - Module-level lazy singleton like the DB manager: single-process uvicorn,
      listeners are lost on restart
    - No replay or acknowledgement: delivery is fire-and-forget
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from chatroom.config import get_settings

logger = logging.getLogger(__name__)


class ListenerHub:
    """Implements MessagePublisher for connected stream subscribers."""

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._queues: set[asyncio.Queue] = set()

    @property
    def listener_count(self) -> int:
        return len(self._queues)

    @asynccontextmanager
    async def subscribe(self) -> AsyncGenerator[asyncio.Queue, None]:
        """Register a listener queue for the lifetime of the context."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._queues.add(queue)
        logger.info(
            "Listener connected", extra={"listeners": len(self._queues)},
        )
        try:
            yield queue
        finally:
            self._queues.discard(queue)
            logger.info(
                "Listener disconnected", extra={"listeners": len(self._queues)},
            )

    def publish(self, event: str, payload: dict) -> None:
        """Push an event to every listener without waiting."""
        envelope = {"type": event, "data": payload}
        for queue in list(self._queues):
            try:
                queue.put_nowait(envelope)
            except asyncio.QueueFull:
                logger.warning(f"Listener queue full, dropped '{event}' event")


_listener_hub: ListenerHub | None = None


def get_listener_hub() -> ListenerHub:
    """FastAPI dependency returning the process-wide hub."""
    global _listener_hub
    if _listener_hub is None:
        _listener_hub = ListenerHub(get_settings().listener_queue_size)
    return _listener_hub

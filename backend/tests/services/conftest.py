"""Service test fixtures — FastAPI test client over the in-memory database.

Invariants:
    - get_db dependency overridden to use the test session factory
    - get_publisher overridden with a recording fake (no real listeners)
"""

import pytest
from httpx import ASGITransport, AsyncClient

from chatroom.api.dependencies import get_publisher
from chatroom.infrastructure.database import get_db
from chatroom.main import app


class RecordingPublisher:
    """MessagePublisher fake that remembers every event."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def publish(self, event: str, payload: dict) -> None:
        self.events.append((event, payload))


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
async def client(test_session_factory, publisher):
    """FastAPI test client with DB and publisher dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_publisher] = lambda: publisher

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()

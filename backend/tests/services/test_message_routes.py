"""Message Routes — defaulted timestamps, feed ordering, and the publish hook.

Invariants:
    - addMessage without msgDateTime stores the time of the call
    - Exactly one messageUpdate event per successful save, none on failure
    - A failing publisher never changes the HTTP response
    - getMessages returns 200 with [] when storage fails
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from chatroom.api.dependencies import get_message_service, get_publisher
from chatroom.core.errors import StorageError
from chatroom.main import app
from chatroom.services.message_service import MessageService


async def _add(client, **message):
    return await client.post(
        "/api/v1/messaging/addMessage", json={"messageToAdd": message},
    )


def _parse(ts: str) -> datetime:
    parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


async def test_add_message_without_timestamp_uses_now(client):
    before = datetime.now(timezone.utc)

    res = await _add(client, msg="Hi", msgFrom="A")

    after = datetime.now(timezone.utc)
    assert res.status_code == 200
    body = res.json()
    assert body["msg"] == "Hi"
    assert body["msgFrom"] == "A"
    assert body["_id"]
    stamped = _parse(body["msgDateTime"])
    assert before - timedelta(seconds=1) <= stamped <= after + timedelta(seconds=1)

    feed = (await client.get("/api/v1/messaging/getMessages")).json()
    assert [m["_id"] for m in feed] == [body["_id"]]


async def test_add_message_keeps_supplied_timestamp(client):
    res = await _add(
        client, msg="Hello", msgFrom="User1", msgDateTime="2024-06-04T10:00:00Z",
    )

    assert res.status_code == 200
    assert _parse(res.json()["msgDateTime"]) == datetime(
        2024, 6, 4, 10, tzinfo=timezone.utc,
    )


async def test_add_message_publishes_one_event(client, publisher):
    res = await _add(client, msg="Hi", msgFrom="A")

    assert publisher.events == [("messageUpdate", {"msg": res.json()})]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"messageToAdd": {}},
        {"messageToAdd": {"msg": "Hi"}},
        {"messageToAdd": {"msgFrom": "A"}},
        {"messageToAdd": {"msg": "   ", "msgFrom": "A"}},
        {"messageToAdd": {"msg": "Hi", "msgFrom": ""}},
        {"messageToAdd": {"msg": 5, "msgFrom": "A"}},
    ],
)
async def test_add_message_rejects_invalid_body(client, publisher, body):
    res = await client.post("/api/v1/messaging/addMessage", json=body)

    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_INPUT"
    assert publisher.events == []


async def test_get_messages_ordered_earliest_first(client):
    await _add(client, msg="Hi", msgFrom="User2", msgDateTime="2024-06-05T00:00:00Z")
    await _add(client, msg="Hello", msgFrom="User1", msgDateTime="2024-06-04T00:00:00Z")

    res = await client.get("/api/v1/messaging/getMessages")

    assert res.status_code == 200
    assert [m["msg"] for m in res.json()] == ["Hello", "Hi"]


async def test_save_failure_returns_500_without_publishing(client, publisher):
    messages = AsyncMock()
    messages.insert_one.side_effect = StorageError("DB failure")
    app.dependency_overrides[get_message_service] = lambda: MessageService(messages)

    res = await _add(client, msg="Hi", msgFrom="A")

    assert res.status_code == 500
    assert res.json() == {"error": "DB failure", "code": "STORAGE_ERROR"}
    assert publisher.events == []


async def test_publish_failure_is_not_reported(client):
    class BrokenPublisher:
        def publish(self, event, payload):
            raise RuntimeError("socket closed")

    app.dependency_overrides[get_publisher] = lambda: BrokenPublisher()

    res = await _add(client, msg="Hi", msgFrom="A")

    assert res.status_code == 200
    assert res.json()["msg"] == "Hi"


async def test_get_messages_storage_failure_returns_empty_list(client):
    messages = AsyncMock()
    messages.find_many.side_effect = StorageError("Something went wrong")
    app.dependency_overrides[get_message_service] = lambda: MessageService(messages)

    res = await client.get("/api/v1/messaging/getMessages")

    assert res.status_code == 200
    assert res.json() == []

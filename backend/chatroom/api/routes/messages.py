"""Message Routes — add a message, read the feed, and stream new messages.

Invariants:
    - A missing msgDateTime is set to now (UTC) here, before the service is called
    - After a successful save exactly one 'messageUpdate' event is published
    - Publish failures are logged and never change the HTTP response
    - getMessages never fails because of storage: the service degrades to []

Design Decisions:
    - SSE over websockets: one-way feed, plain HTTP, same StreamingResponse wiring
      as the other streaming endpoints
    - Keep-alive comments every listener_keepalive_seconds so proxies hold the connection
"""

import asyncio
import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from chatroom.api.dependencies import get_message_service, get_publisher
from chatroom.api.error_handlers import error_response
from chatroom.config import get_settings
from chatroom.core.errors import is_error
from chatroom.core.repository_protocols import MessagePublisher
from chatroom.infrastructure.listener_hub import ListenerHub, get_listener_hub
from chatroom.schemas.message import AddMessageRequest, ChatMessage
from chatroom.services.message_service import MessageService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/messaging", tags=["messages"])

MESSAGE_UPDATE_EVENT = "messageUpdate"

# SSE headers prevent proxy/browser buffering of streamed events.
_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


@router.post("/addMessage", response_model=ChatMessage)
async def add_message(
    body: AddMessageRequest,
    service: MessageService = Depends(get_message_service),
    publisher: MessagePublisher = Depends(get_publisher),
):
    """Persist a message and notify connected listeners."""
    incoming = body.message_to_add
    message = ChatMessage(
        msg=incoming.msg,
        msg_from=incoming.msg_from,
        msg_date_time=incoming.msg_date_time or datetime.now(timezone.utc),
    )

    result = await service.save(message)
    if is_error(result):
        return error_response(result)

    _notify_listeners(publisher, result)
    return result


@router.get("/getMessages", response_model=list[ChatMessage])
async def get_messages(
    service: MessageService = Depends(get_message_service),
):
    """All messages, earliest first."""
    return await service.list_all()


@router.get("/stream")
async def stream_messages(
    request: Request, hub: ListenerHub = Depends(get_listener_hub),
):
    """Server-sent events feed of newly saved messages."""
    keepalive = get_settings().listener_keepalive_seconds

    async def event_generator():
        async with hub.subscribe() as queue:
            while not await request.is_disconnected():
                try:
                    event = await asyncio.wait_for(queue.get(), keepalive)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield sse_line(event)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=_SSE_HEADERS,
    )


def sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


def _notify_listeners(publisher: MessagePublisher, message: ChatMessage) -> None:
    # Fire-and-forget: the caller already has its answer
    try:
        publisher.publish(
            MESSAGE_UPDATE_EVENT,
            {"msg": message.model_dump(mode="json", by_alias=True)},
        )
    except Exception as e:
        logger.warning(
            f"Failed to publish {MESSAGE_UPDATE_EVENT}: {e}",
            extra={"message_id": str(message.id)},
        )

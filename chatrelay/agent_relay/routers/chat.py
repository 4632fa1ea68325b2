"""Chat endpoints.

Thin HTTP adapter -- delegates to the session registry and the relay.
Domain errors (``RelayError``) propagate to the app-level handler, which
turns them into ``{"error": ...}`` responses.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import APIRouter
from sse_starlette.sse import EventSourceResponse, ServerSentEvent

from chatrelay.agent_relay.deps import Registry, Settings
from chatrelay.agent_relay.errors import MessageValidationError, SessionNotFoundError
from chatrelay.agent_relay.models.api import (
    ChatMessageRequest,
    ChatMessageResponse,
    ChatStartRequest,
    ChatStartResponse,
    MessageResponse,
    SessionListResponse,
    SessionSummary,
)
from chatrelay.agent_relay.relay.dispatch import send_message
from chatrelay.agent_relay.relay.streaming import StreamRelay

router = APIRouter(prefix="/chat", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Cache-Control",
}

# One "data: <json>" line plus a blank line per frame.
_SSE_SEP = "\n"


@router.post("/start", response_model=ChatStartResponse)
async def start_chat(body: ChatStartRequest, registry: Registry) -> ChatStartResponse:
    if not body.agent_name:
        msg = "Agent name is required"
        raise MessageValidationError(msg)

    entry = registry.get_or_create(body.agent_name, body.session_id)
    return ChatStartResponse(
        session_id=entry.session_id,
        agent_name=entry.agent_name,
        message=f"Chat session started with {entry.agent_name}",
    )


@router.post("/message", response_model=ChatMessageResponse)
async def post_message(body: ChatMessageRequest, registry: Registry) -> ChatMessageResponse:
    return await send_message(
        registry,
        message=body.message,
        session_id=body.session_id,
        agent_name=body.agent_name,
    )


async def _sse_frames(relay: StreamRelay) -> AsyncIterator[ServerSentEvent]:
    async for event in relay.events():
        yield ServerSentEvent(data=event.to_json(), sep=_SSE_SEP)


@router.post("/stream", response_class=EventSourceResponse)
async def stream_message(body: ChatMessageRequest, registry: Registry, settings: Settings) -> EventSourceResponse:
    """Stream the agent's reply as Server-Sent Events.

    Validation and session errors are returned as plain 400 responses; once
    the stream is open every failure arrives as an ``error`` frame.
    """
    relay = StreamRelay(registry)
    relay.negotiate(message=body.message, session_id=body.session_id, agent_name=body.agent_name)
    return EventSourceResponse(
        _sse_frames(relay),
        headers=SSE_HEADERS,
        ping=settings.sse_ping_interval,
        sep=_SSE_SEP,
    )


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(registry: Registry) -> SessionListResponse:
    sessions = [
        SessionSummary(session_id=entry.session_id, agent_name=entry.agent_name, created_at=entry.created_at)
        for entry in registry.list()
    ]
    return SessionListResponse(sessions=sessions)


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def delete_session(session_id: str, registry: Registry) -> MessageResponse:
    if not registry.delete(session_id):
        raise SessionNotFoundError(session_id)
    return MessageResponse(message="Session deleted successfully")

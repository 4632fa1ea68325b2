"""API request / response schemas.

Field names are snake_case in Python and camelCase on the wire
(``sessionId``, ``agentName``, ...).  Request fields are optional at the
schema level on purpose: a missing ``agentName`` or ``message`` must produce
the relay's own 400 error body, not FastAPI's 422 validation response.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------


class AgentDescriptor(CamelModel):
    """Static description of an agent offered by the relay."""

    id: str
    display_name: str
    description: str
    aliases: list[str] = []


class AgentListResponse(CamelModel):
    agents: list[AgentDescriptor]


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatStartRequest(CamelModel):
    agent_name: str | None = None
    session_id: str | None = None


class ChatStartResponse(CamelModel):
    session_id: str
    agent_name: str
    message: str


class ChatMessageRequest(CamelModel):
    """Body of both ``/chat/message`` and ``/chat/stream``."""

    session_id: str | None = None
    agent_name: str | None = None
    message: str | None = None


class ChatMessageResponse(CamelModel):
    session_id: str
    agent_name: str
    message: str
    response: str
    timestamp: datetime


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class SessionSummary(CamelModel):
    """Serialised registry entry (the chat handle itself is never exposed)."""

    session_id: str
    agent_name: str
    created_at: datetime


class SessionListResponse(CamelModel):
    sessions: list[SessionSummary]


class MessageResponse(CamelModel):
    message: str


class HealthResponse(CamelModel):
    status: str
    timestamp: datetime

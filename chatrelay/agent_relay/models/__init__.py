"""Data models for the chat relay."""

from chatrelay.agent_relay.models.api import (
    AgentDescriptor,
    AgentListResponse,
    ChatMessageRequest,
    ChatMessageResponse,
    ChatStartRequest,
    ChatStartResponse,
    HealthResponse,
    MessageResponse,
    SessionListResponse,
    SessionSummary,
)
from chatrelay.agent_relay.models.enums import RelayState, StreamEventType
from chatrelay.agent_relay.models.events import (
    ContentEvent,
    EndEvent,
    ErrorEvent,
    StartEvent,
    StreamEvent,
    ToolCallEvent,
    stream_event_adapter,
)

__all__ = [
    # API schemas
    "AgentDescriptor",
    "AgentListResponse",
    "ChatMessageRequest",
    "ChatMessageResponse",
    "ChatStartRequest",
    "ChatStartResponse",
    # Events
    "ContentEvent",
    "EndEvent",
    "ErrorEvent",
    "HealthResponse",
    "MessageResponse",
    # Enums
    "RelayState",
    "SessionListResponse",
    "SessionSummary",
    "StartEvent",
    "StreamEvent",
    "StreamEventType",
    "ToolCallEvent",
    "stream_event_adapter",
]

"""Shared enumerations used across the chat relay."""

from __future__ import annotations

from enum import StrEnum


class StreamEventType(StrEnum):
    """Discriminator of frames sent over the SSE channel."""

    START = "start"
    CONTENT = "content"
    TOOL_CALL = "tool_call"
    END = "end"
    ERROR = "error"


class RelayState(StrEnum):
    """Lifecycle of a single streaming request."""

    IDLE = "idle"
    NEGOTIATING = "negotiating"
    STREAMING = "streaming"
    TERMINATED = "terminated"

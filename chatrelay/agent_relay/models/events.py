"""Stream event models.

A streaming prompt produces a sequence of these events.  The agent runtime
emits ``content`` / ``tool_call`` / ``end`` (and may emit ``error``); the
relay injects the leading ``start`` and guarantees a single terminal event.

Each event serialises to the JSON payload of one SSE frame, e.g.::

    data: {"type":"content","content":"Hello"}
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from chatrelay.agent_relay.models.enums import StreamEventType


class _EventBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @property
    def is_terminal(self) -> bool:
        return False

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class StartEvent(_EventBase):
    type: Literal[StreamEventType.START] = StreamEventType.START
    session_id: str
    agent_name: str


class ContentEvent(_EventBase):
    type: Literal[StreamEventType.CONTENT] = StreamEventType.CONTENT
    content: str


class ToolCallEvent(_EventBase):
    type: Literal[StreamEventType.TOOL_CALL] = StreamEventType.TOOL_CALL
    tool: str | None = None
    arguments: Any = None


class EndEvent(_EventBase):
    type: Literal[StreamEventType.END] = StreamEventType.END

    @property
    def is_terminal(self) -> bool:
        return True


class ErrorEvent(_EventBase):
    type: Literal[StreamEventType.ERROR] = StreamEventType.ERROR
    error: str

    @property
    def is_terminal(self) -> bool:
        return True


StreamEvent = Annotated[
    StartEvent | ContentEvent | ToolCallEvent | EndEvent | ErrorEvent,
    Field(discriminator="type"),
]

stream_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)
"""Validates a decoded frame payload back into the matching event model."""

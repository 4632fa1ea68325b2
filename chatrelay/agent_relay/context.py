"""Per-session context held by the session registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chatrelay.agent_relay.agents.assistant import ChatHandle


@dataclass
class SessionEntry:
    """A live conversation: the chat handle and the agent it is bound to.

    ``chat`` is created exactly once, when the entry is created, and reused
    for every message in the session.  ``agent_name`` is the canonical agent
    id and never changes after creation.
    """

    session_id: str
    chat: ChatHandle
    agent_name: str
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

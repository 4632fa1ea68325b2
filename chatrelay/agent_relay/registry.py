"""In-process session registry.

Maps session ids to live ``SessionEntry`` objects.  Ephemeral -- empty on
process restart -- and never evicts: an entry lives until it is deleted.

One registry is created at startup and shared through ``app.state``; tests
build their own.

``get_or_create`` does its check-and-insert without awaiting, so on the
single event loop two requests for the same new session id cannot both
build a chat handle.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger

from chatrelay.agent_relay.context import SessionEntry

if TYPE_CHECKING:
    from chatrelay.agent_relay.agents.catalog import AgentCatalog


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class SessionRegistry:
    """Authority on which sessions exist and which chat handle each one owns."""

    def __init__(self, catalog: AgentCatalog, *, clock: Callable[[], int] = _epoch_millis) -> None:
        self._catalog = catalog
        self._clock = clock
        self._sessions: dict[str, SessionEntry] = {}

    # -- Mutation --------------------------------------------------------------

    def get_or_create(self, agent_name: str, session_id: str | None = None) -> SessionEntry:
        """Return the session for *session_id*, creating it if needed.

        An existing entry is returned as-is: its stored agent wins over
        *agent_name*.  Otherwise *agent_name* is resolved first, so an unknown
        agent raises ``UnknownAgentError`` without creating anything.  When
        *session_id* is omitted a ``session-<agent>-<millis>`` id is generated.
        """
        if session_id:
            existing = self._sessions.get(session_id)
            if existing is not None:
                return existing

        agent = self._catalog.resolve(agent_name)
        session_id = session_id or self._new_session_id(agent.agent_id)

        entry = SessionEntry(
            session_id=session_id,
            chat=agent.chat(session_id, persist=True),
            agent_name=agent.agent_id,
        )
        self._sessions[session_id] = entry
        logger.info("Registry: created session {} (agent={})", session_id, agent.agent_id)
        return entry

    def delete(self, session_id: str) -> bool:
        """Remove a session.  Returns ``False`` if it did not exist."""
        entry = self._sessions.pop(session_id, None)
        if entry is None:
            return False
        logger.info("Registry: deleted session {} (agent={})", session_id, entry.agent_name)
        return True

    def _new_session_id(self, agent_id: str) -> str:
        # Two sessions for the same agent within one millisecond would share
        # a timestamp; step forward until the id is free.
        millis = self._clock()
        session_id = f"session-{agent_id}-{millis}"
        while session_id in self._sessions:
            millis += 1
            session_id = f"session-{agent_id}-{millis}"
        return session_id

    # -- Query -----------------------------------------------------------------

    def lookup(self, session_id: str) -> SessionEntry | None:
        return self._sessions.get(session_id)

    def list(self) -> list[SessionEntry]:
        """Return a snapshot of all sessions, oldest first."""
        return sorted(self._sessions.values(), key=lambda entry: entry.created_at)

    @property
    def active_count(self) -> int:
        return len(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

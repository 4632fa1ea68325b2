"""Message dispatch -- resolves a request to a session and runs one turn.

Target resolution, in order:

1. ``session_id`` names an existing session -> use it; any ``agent_name``
   in the request is ignored.
2. ``agent_name`` given -> ``registry.get_or_create(agent_name, session_id)``;
   a client may pre-assign the id of a brand-new session this way.
3. Otherwise -> ``MissingTargetError``.

Validation always happens before resolution, so a bad request never
creates a session.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from loguru import logger

from chatrelay.agent_relay.errors import MessageValidationError, MissingTargetError, UpstreamFailure
from chatrelay.agent_relay.models.api import ChatMessageResponse

if TYPE_CHECKING:
    from chatrelay.agent_relay.context import SessionEntry
    from chatrelay.agent_relay.registry import SessionRegistry


@dataclass
class ResolvedTarget:
    """The session a request will talk to."""

    session_id: str
    """Session id reported back to the client (the caller's own id when given)."""

    entry: SessionEntry

    @property
    def agent_name(self) -> str:
        return self.entry.agent_name


def validate_message(message: str | None) -> str:
    if not message:
        msg = "Message is required"
        raise MessageValidationError(msg)
    return message


def resolve_target(
    registry: SessionRegistry,
    *,
    session_id: str | None = None,
    agent_name: str | None = None,
) -> ResolvedTarget:
    if session_id:
        entry = registry.lookup(session_id)
        if entry is not None:
            return ResolvedTarget(session_id=session_id, entry=entry)

    if agent_name:
        entry = registry.get_or_create(agent_name, session_id)
        return ResolvedTarget(session_id=session_id or entry.session_id, entry=entry)

    raise MissingTargetError


async def send_message(
    registry: SessionRegistry,
    *,
    message: str | None,
    session_id: str | None = None,
    agent_name: str | None = None,
) -> ChatMessageResponse:
    """Send *message* and wait for the complete reply.

    Runtime failures are raised as ``UpstreamFailure``; the session stays
    registered and usable for the next message.
    """
    text = validate_message(message)
    target = resolve_target(registry, session_id=session_id, agent_name=agent_name)

    try:
        response = await target.entry.chat.prompt(text)
    except Exception as exc:
        logger.exception("Chat error in session {} (agent={})", target.entry.session_id, target.agent_name)
        raise UpstreamFailure(str(exc) or type(exc).__name__) from exc

    return ChatMessageResponse(
        session_id=target.session_id,
        agent_name=target.agent_name,
        message=text,
        response=response,
        timestamp=datetime.now(tz=UTC),
    )

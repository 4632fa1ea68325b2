"""Streaming relay -- drives one streaming prompt as an ordered event sequence.

State machine::

    IDLE --negotiate()--> NEGOTIATING --events()--> STREAMING --> TERMINATED

``negotiate`` runs the same validation and session resolution as the plain
message path.  Its errors are raised to the caller while nothing has been
streamed yet, so they become ordinary HTTP error responses.

``events`` is consumed once the transport has switched to SSE.  It yields
one ``start`` event, then the runtime's events unchanged and in order, and
finishes with exactly one terminal event (``end`` or ``error``).  Any
exception from the runtime becomes an ``error`` event.  A runtime stream
that stops without a terminal event gets a synthetic ``end``.

Closing the ``events`` generator (client disconnect) closes the runtime
stream with it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import TYPE_CHECKING

from loguru import logger

from chatrelay.agent_relay.errors import RelayError
from chatrelay.agent_relay.models.enums import RelayState, StreamEventType
from chatrelay.agent_relay.models.events import EndEvent, ErrorEvent, StartEvent
from chatrelay.agent_relay.relay.dispatch import resolve_target, validate_message

if TYPE_CHECKING:
    from chatrelay.agent_relay.models.events import StreamEvent
    from chatrelay.agent_relay.registry import SessionRegistry
    from chatrelay.agent_relay.relay.dispatch import ResolvedTarget


class RelayStateError(RuntimeError):
    """A relay method was called in the wrong state."""


class StreamRelay:
    """Relay for a single streaming request.  Not reusable."""

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry
        self._state = RelayState.IDLE
        self._target: ResolvedTarget | None = None
        self._message: str | None = None

    @property
    def state(self) -> RelayState:
        return self._state

    @property
    def target(self) -> ResolvedTarget | None:
        return self._target

    def negotiate(
        self,
        *,
        message: str | None,
        session_id: str | None = None,
        agent_name: str | None = None,
    ) -> ResolvedTarget:
        """Validate the request and resolve its session.

        Raises the same ``RelayError`` subclasses as the plain message path;
        on error the relay is terminated.
        """
        if self._state is not RelayState.IDLE:
            msg = f"Cannot negotiate in state '{self._state}'"
            raise RelayStateError(msg)

        self._state = RelayState.NEGOTIATING
        try:
            self._message = validate_message(message)
            self._target = resolve_target(self._registry, session_id=session_id, agent_name=agent_name)
        except RelayError:
            self._state = RelayState.TERMINATED
            raise
        return self._target

    async def events(self) -> AsyncIterator[StreamEvent]:
        if self._state is not RelayState.NEGOTIATING or self._target is None or self._message is None:
            msg = f"Cannot stream in state '{self._state}'; call negotiate() first"
            raise RelayStateError(msg)

        target = self._target
        self._state = RelayState.STREAMING
        logger.info("Stream started: session={} agent={}", target.entry.session_id, target.agent_name)

        try:
            yield StartEvent(session_id=target.session_id, agent_name=target.agent_name)

            terminal: StreamEvent | None = None
            try:
                async with aclosing(target.entry.chat.stream(self._message)) as stream:
                    async for event in stream:
                        if event.type == StreamEventType.START:
                            continue
                        yield event
                        if event.is_terminal:
                            terminal = event
                            break
            except Exception as exc:
                if terminal is not None:
                    logger.warning("Stream cleanup failed: session={} error={!r}", target.entry.session_id, exc)
                else:
                    logger.warning("Stream error: session={} error={!r}", target.entry.session_id, exc)
                    terminal = ErrorEvent(error=str(exc) or type(exc).__name__)
                    yield terminal

            if terminal is None:
                terminal = EndEvent()
                yield terminal

            logger.info("Stream finished: session={} terminal={}", target.entry.session_id, terminal.type)
        finally:
            self._state = RelayState.TERMINATED

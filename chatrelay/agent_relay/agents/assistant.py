"""pydantic-ai adapter -- the agent runtime behind the relay.

The relay only needs two things from an agent:

- ``AssistantAgent.chat(chat_id, persist=True)`` -> a ``ChatHandle``
- ``ChatHandle.prompt(text)`` (full reply) or ``ChatHandle.stream(text)``
  (``content`` / ``tool_call`` events followed by ``end``)

A ``ChatHandle`` owns the conversation's message history.  The registry keeps
one handle per session and reuses it for every message, which is what gives
the agent its memory of earlier turns.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from pydantic_ai import Agent
from pydantic_ai.messages import (
    FunctionToolCallEvent,
    PartDeltaEvent,
    PartStartEvent,
    TextPart,
    TextPartDelta,
)

from chatrelay.agent_relay.agents.prompt import render_system_prompt
from chatrelay.agent_relay.models.api import AgentDescriptor
from chatrelay.agent_relay.models.events import ContentEvent, EndEvent, ToolCallEvent

if TYPE_CHECKING:
    from pydantic_ai.messages import AgentStreamEvent, ModelMessage
    from pydantic_ai.models import Model

    from chatrelay.agent_relay.agents.definitions import AgentSpec
    from chatrelay.agent_relay.agents.tools import SkillSet
    from chatrelay.agent_relay.models.events import StreamEvent

logger = logging.getLogger(__name__)

_RUN_DONE = object()


class UnknownSkillError(LookupError):
    """Raised by ``call_skill`` for a skill the agent does not have."""


def _text_chunk(event: AgentStreamEvent) -> str | None:
    """Return the text carried by a model stream event, if any."""
    if isinstance(event, PartStartEvent) and isinstance(event.part, TextPart):
        return event.part.content or None
    if isinstance(event, PartDeltaEvent) and isinstance(event.delta, TextPartDelta):
        return event.delta.content_delta or None
    return None


class ChatHandle:
    """A conversation with one agent, identified by ``chat_id``.

    With ``persist=True`` the message history survives between prompts for
    the lifetime of the handle.  With ``persist=False`` every prompt starts
    from an empty history.  Prompts on the same handle run one at a time.
    """

    def __init__(self, agent: AssistantAgent, chat_id: str, *, persist: bool = True) -> None:
        self._agent = agent
        self.chat_id = chat_id
        self.persist = persist
        self._history: list[ModelMessage] = []
        self._lock = asyncio.Lock()

    @property
    def agent_id(self) -> str:
        return self._agent.agent_id

    @property
    def history(self) -> list[ModelMessage]:
        return list(self._history)

    def _remember(self, messages: list[ModelMessage]) -> None:
        if self.persist:
            self._history = list(messages)

    async def prompt(self, text: str) -> str:
        """Run one turn and return the complete reply text."""
        async with self._lock:
            result = await self._agent.pydantic_agent.run(text, message_history=self._history or None)
            self._remember(result.all_messages())
        logger.debug("Chat %s: prompt completed (history=%d)", self.chat_id, len(self._history))
        return result.output

    async def stream(self, text: str) -> AsyncIterator[StreamEvent]:
        """Run one turn, yielding events as the model produces them.

        Yields ``ContentEvent`` / ``ToolCallEvent`` in the order the run
        produces them, then a single ``EndEvent``.  Failures are raised, not
        yielded.  Closing the iterator early cancels the run and leaves the
        history untouched.

        The pydantic-ai run executes in its own task and hands events over a
        queue.
        """
        queue: asyncio.Queue[StreamEvent | object] = asyncio.Queue()
        async with self._lock:
            run_task = asyncio.create_task(self._run_stream(text, queue))
            try:
                while True:
                    event = await queue.get()
                    if event is _RUN_DONE:
                        break
                    yield event
                await run_task
            finally:
                if not run_task.done():
                    run_task.cancel()
                    await asyncio.gather(run_task, return_exceptions=True)
                    logger.debug("Chat %s: stream abandoned, run cancelled", self.chat_id)
        logger.debug("Chat %s: stream completed (history=%d)", self.chat_id, len(self._history))
        yield EndEvent()

    async def _run_stream(self, text: str, queue: asyncio.Queue[StreamEvent | object]) -> None:
        pydantic_agent = self._agent.pydantic_agent
        try:
            async with pydantic_agent.iter(text, message_history=self._history or None) as run:
                async for node in run:
                    if Agent.is_model_request_node(node):
                        async with node.stream(run.ctx) as request_stream:
                            async for event in request_stream:
                                chunk = _text_chunk(event)
                                if chunk is not None:
                                    queue.put_nowait(ContentEvent(content=chunk))
                    elif Agent.is_call_tools_node(node):
                        async with node.stream(run.ctx) as tool_stream:
                            async for event in tool_stream:
                                if isinstance(event, FunctionToolCallEvent):
                                    queue.put_nowait(
                                        ToolCallEvent(
                                            tool=event.part.tool_name,
                                            arguments=event.part.args_as_dict(),
                                        )
                                    )
            if run.result is not None:
                self._remember(run.result.all_messages())
        finally:
            queue.put_nowait(_RUN_DONE)


class AssistantAgent:
    """A named agent: a pydantic-ai ``Agent`` plus its skills and descriptor."""

    def __init__(self, spec: AgentSpec, *, model: Model | str, skills: SkillSet) -> None:
        self.spec = spec
        self.skills = skills
        model_name = model if isinstance(model, str) else model.model_name
        self.pydantic_agent: Agent[None, str] = Agent(
            model,
            system_prompt=render_system_prompt(spec, model_name=model_name),
            tools=skills.functions(),
            name=spec.agent_id,
            defer_model_check=True,
        )
        logger.info("Created agent %s: model=%s, skills=%d", spec.agent_id, model_name, len(skills.skill_names))

    @property
    def agent_id(self) -> str:
        return self.spec.agent_id

    @property
    def descriptor(self) -> AgentDescriptor:
        return AgentDescriptor(
            id=self.spec.agent_id,
            display_name=self.spec.display_name,
            description=self.spec.description,
            aliases=list(self.spec.aliases),
        )

    def chat(self, chat_id: str, *, persist: bool = True) -> ChatHandle:
        return ChatHandle(self, chat_id, persist=persist)

    async def call_skill(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Invoke one skill directly, bypassing the model."""
        skill = self.skills.get(name)
        if skill is None:
            msg = f"Agent '{self.agent_id}' has no skill '{name}'"
            raise UnknownSkillError(msg)
        return await skill(**(arguments or {}))

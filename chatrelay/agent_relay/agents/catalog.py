"""Agent catalog -- resolves client-supplied agent names to live agents.

Every agent answers to its canonical id plus any aliases declared in its
``AgentSpec`` (``book`` and ``book-assistant`` are the same agent).  Matching is
case-insensitive.  Resolution is a pure dictionary lookup so it can run
before anything touches the session registry.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

import httpx
from loguru import logger

from chatrelay.agent_relay.agents.assistant import AssistantAgent
from chatrelay.agent_relay.agents.definitions import DEFAULT_AGENTS, AgentSpec
from chatrelay.agent_relay.errors import UnknownAgentError

if TYPE_CHECKING:
    from pydantic_ai.models import Model

    from chatrelay.agent_relay.models.api import AgentDescriptor
    from chatrelay.agent_relay.settings import RelaySettings


class AgentCatalog:
    """Fixed alias table of the agents this process serves."""

    def __init__(self, agents: Iterable[AssistantAgent]) -> None:
        self._agents: list[AssistantAgent] = list(agents)
        self._aliases: dict[str, AssistantAgent] = {}
        for agent in self._agents:
            for alias in (agent.agent_id, *agent.spec.aliases):
                key = alias.lower()
                existing = self._aliases.get(key)
                if existing is not None and existing is not agent:
                    msg = f"Alias '{key}' is claimed by both '{existing.agent_id}' and '{agent.agent_id}'"
                    raise ValueError(msg)
                self._aliases[key] = agent

    @classmethod
    def from_specs(
        cls,
        specs: Iterable[AgentSpec],
        *,
        model: Model | str,
        tool_timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AgentCatalog:
        agents = [
            AssistantAgent(spec, model=model, skills=spec.skills(timeout=tool_timeout, transport=transport))
            for spec in specs
        ]
        return cls(agents)

    def resolve(self, name: str) -> AssistantAgent:
        """Return the agent for *name*.  Raises ``UnknownAgentError``."""
        agent = self._aliases.get(name.lower())
        if agent is None:
            raise UnknownAgentError(name)
        return agent

    def descriptors(self) -> list[AgentDescriptor]:
        return [agent.descriptor for agent in self._agents]

    def __iter__(self) -> Iterator[AssistantAgent]:
        return iter(self._agents)

    def __len__(self) -> int:
        return len(self._agents)


def build_default_catalog(settings: RelaySettings) -> AgentCatalog:
    """Catalog of the built-in book and crypto assistants."""
    catalog = AgentCatalog.from_specs(
        DEFAULT_AGENTS,
        model=settings.default_model,
        tool_timeout=settings.tool_timeout,
    )
    logger.info("Agent catalog ready: {}", ", ".join(agent.agent_id for agent in catalog))
    return catalog

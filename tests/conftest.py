"""Shared test fixtures: an agent catalog backed by pydantic-ai test models.

No test talks to a real LLM or a real HTTP API.  Agents run on
``TestModel`` (deterministic canned replies); individual tests swap the
model with ``agent.pydantic_agent.override(model=...)``.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel

from chatrelay.agent_relay.agents.catalog import AgentCatalog
from chatrelay.agent_relay.agents.definitions import AgentSpec
from chatrelay.agent_relay.agents.tools import SkillSet
from chatrelay.agent_relay.registry import SessionRegistry

CANNED_REPLY = "Hello from the agent"
FIRST_CHUNK = "Hello"


class EchoSkills(SkillSet):
    skill_names = ("echo",)

    async def echo(self, text: str) -> str:
        """Return the text unchanged."""
        return text


BOOK_SPEC = AgentSpec(
    agent_id="book",
    display_name="Book Assistant",
    description="Helpful assistant for book-related queries",
    aliases=("book-assistant",),
    system_prompt="You are {{ display_name }}.",
)

CRYPTO_SPEC = AgentSpec(
    agent_id="crypto",
    display_name="Crypto Assistant",
    description="Assistant for cryptocurrency information",
    aliases=("crypto-assistant",),
    skills=EchoSkills,
    system_prompt="You are {{ display_name }}.",
)


@pytest.fixture
def test_model() -> TestModel:
    return TestModel(call_tools=[], custom_output_text=CANNED_REPLY)


@pytest.fixture
def catalog(test_model: TestModel) -> AgentCatalog:
    return AgentCatalog.from_specs([BOOK_SPEC, CRYPTO_SPEC], model=test_model)


@pytest.fixture
def registry(catalog: AgentCatalog) -> SessionRegistry:
    return SessionRegistry(catalog)


def stalling_model() -> FunctionModel:
    """Model whose streamed reply sends ``FIRST_CHUNK`` and then never finishes.

    Non-streamed runs answer ``CANNED_REPLY`` straight away.
    """

    def reply(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        return ModelResponse(parts=[TextPart(content=CANNED_REPLY)])

    async def stall(messages: list[ModelMessage], info: AgentInfo) -> AsyncIterator[str]:
        yield FIRST_CHUNK
        await asyncio.Event().wait()

    return FunctionModel(reply, stream_function=stall)

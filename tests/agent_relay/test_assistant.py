"""Unit tests for the pydantic-ai adapter and the HTTP-backed skills."""

from __future__ import annotations

import asyncio

import httpx
import pytest
from pydantic_ai.models.test import TestModel

from chatrelay.agent_relay.agents.assistant import AssistantAgent, UnknownSkillError
from chatrelay.agent_relay.agents.catalog import AgentCatalog
from chatrelay.agent_relay.agents.definitions import BOOK_ASSISTANT, CRYPTO_ASSISTANT
from chatrelay.agent_relay.agents.tools import BookSkills, CryptoSkills
from chatrelay.agent_relay.models.events import ContentEvent, EndEvent
from tests.conftest import CANNED_REPLY, FIRST_CHUNK, stalling_model

# ---------------------------------------------------------------------------
# ChatHandle
# ---------------------------------------------------------------------------


async def test_prompt_returns_reply(catalog: AgentCatalog) -> None:
    chat = catalog.resolve("book").chat("c1")

    assert await chat.prompt("hello") == CANNED_REPLY
    assert chat.chat_id == "c1"
    assert chat.agent_id == "book"


async def test_persistent_chat_accumulates_history(catalog: AgentCatalog) -> None:
    chat = catalog.resolve("book").chat("c1", persist=True)

    await chat.prompt("first")
    first = len(chat.history)
    await chat.prompt("second")

    assert first == 2
    assert len(chat.history) == 4


async def test_ephemeral_chat_keeps_no_history(catalog: AgentCatalog) -> None:
    chat = catalog.resolve("book").chat("c1", persist=False)

    await chat.prompt("first")

    assert chat.history == []


async def test_stream_yields_content_then_end(catalog: AgentCatalog) -> None:
    chat = catalog.resolve("book").chat("c1")

    events = [event async for event in chat.stream("hello")]

    assert events[-1] == EndEvent()
    assert all(isinstance(e, ContentEvent) for e in events[:-1])
    assert "".join(e.content for e in events[:-1]) == CANNED_REPLY
    assert len(chat.history) == 2


async def test_abandoned_stream_leaves_history_untouched(catalog: AgentCatalog) -> None:
    book = catalog.resolve("book")
    chat = book.chat("c1")

    with book.pydantic_agent.override(model=stalling_model()):
        stream = chat.stream("hello")
        assert await anext(stream) == ContentEvent(content=FIRST_CHUNK)
        await stream.aclose()

        assert chat.history == []
        # The handle is still usable afterwards.
        assert await asyncio.wait_for(chat.prompt("again"), timeout=5) == CANNED_REPLY


def test_descriptor() -> None:
    agent = AssistantAgent(BOOK_ASSISTANT, model=TestModel(), skills=BookSkills())

    descriptor = agent.descriptor

    assert descriptor.id == "book"
    assert descriptor.display_name == "Book Assistant"
    assert descriptor.aliases == ["book-assistant"]
    assert descriptor.model_dump(by_alias=True)["displayName"] == "Book Assistant"


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


async def test_get_book_info() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "openlibrary.org"
        assert request.url.params["title"] == "The Black Swan"
        return httpx.Response(
            200,
            json={
                "docs": [
                    {
                        "title": "The Black Swan",
                        "author_name": ["Nassim Nicholas Taleb"],
                        "first_publish_year": 2007,
                        "edition_count": 40,
                        "subject": ["Probability", "Uncertainty", "Forecasting", "Risk", "Economics", "Chance"],
                    },
                ],
            },
        )

    skills = BookSkills(transport=httpx.MockTransport(handler))

    info = await skills.get_book_info("The Black Swan")

    assert info["found"] is True
    assert info["authors"] == ["Nassim Nicholas Taleb"]
    assert info["first_publish_year"] == 2007
    assert len(info["subjects"]) == 5


async def test_get_book_info_not_found() -> None:
    skills = BookSkills(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"docs": []})))

    assert await skills.get_book_info("zzzz") == {"found": False, "book_name": "zzzz"}


async def test_get_crypto_price() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["ids"] == "bitcoin"
        assert request.url.params["vs_currencies"] == "eur"
        return httpx.Response(200, json={"bitcoin": {"eur": 55000.5, "eur_24h_change": -1.25}})

    skills = CryptoSkills(transport=httpx.MockTransport(handler))

    quote = await skills.get_crypto_price(" Bitcoin ", vs_currency="EUR")

    assert quote == {
        "found": True,
        "coin_id": "bitcoin",
        "vs_currency": "eur",
        "price": 55000.5,
        "change_24h": -1.25,
    }


async def test_get_crypto_price_unknown_coin() -> None:
    skills = CryptoSkills(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))

    quote = await skills.get_crypto_price("notacoin")

    assert quote["found"] is False


async def test_skill_http_error_raises() -> None:
    skills = CryptoSkills(transport=httpx.MockTransport(lambda request: httpx.Response(503)))

    with pytest.raises(httpx.HTTPStatusError):
        await skills.get_crypto_price("bitcoin")


# ---------------------------------------------------------------------------
# call_skill
# ---------------------------------------------------------------------------


async def test_call_skill_directly() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ethereum": {"usd": 3000}}))
    agent = AssistantAgent(CRYPTO_ASSISTANT, model=TestModel(), skills=CryptoSkills(transport=transport))

    result = await agent.call_skill("get_crypto_price", {"coin_id": "ethereum"})

    assert result["price"] == 3000


async def test_call_unknown_skill(catalog: AgentCatalog) -> None:
    with pytest.raises(UnknownSkillError, match="no skill 'get_book_info'"):
        await catalog.resolve("crypto").call_skill("get_book_info", {"book_name": "x"})

"""Agent skills backed by public HTTP APIs.

A ``SkillSet`` groups the skills of one agent.  Each skill is a bound async
method; ``functions()`` hands them to pydantic-ai as plain tools, and
``AssistantAgent.call_skill`` can invoke them directly by name.

Skills never raise on "not found" -- they return ``{"found": False, ...}`` so
the model can tell the user.  Transport errors (timeouts, 5xx) do raise and
surface as upstream failures.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import httpx

OPEN_LIBRARY_SEARCH_URL = "https://openlibrary.org/search.json"
COINGECKO_SIMPLE_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"


class SkillSet:
    """Base class for a group of related skills."""

    skill_names: tuple[str, ...] = ()

    def __init__(self, *, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    def functions(self) -> list[Callable[..., Awaitable[Any]]]:
        return [getattr(self, name) for name in self.skill_names]

    def get(self, name: str) -> Callable[..., Awaitable[Any]] | None:
        if name not in self.skill_names:
            return None
        return getattr(self, name)


class BookSkills(SkillSet):
    skill_names = ("get_book_info",)

    async def get_book_info(self, book_name: str) -> dict[str, Any]:
        """Look up a book by title and return its authors, first publication year and subjects.

        Args:
            book_name: Title of the book, e.g. "The Black Swan".
        """
        async with self._client() as client:
            resp = await client.get(
                OPEN_LIBRARY_SEARCH_URL,
                params={"title": book_name, "limit": 1},
            )
            resp.raise_for_status()

        docs = resp.json().get("docs") or []
        if not docs:
            return {"found": False, "book_name": book_name}

        doc = docs[0]
        return {
            "found": True,
            "title": doc.get("title", book_name),
            "authors": doc.get("author_name", []),
            "first_publish_year": doc.get("first_publish_year"),
            "edition_count": doc.get("edition_count"),
            "subjects": (doc.get("subject") or [])[:5],
        }


class CryptoSkills(SkillSet):
    skill_names = ("get_crypto_price",)

    async def get_crypto_price(self, coin_id: str, vs_currency: str = "usd") -> dict[str, Any]:
        """Get the current market price and 24h change of a cryptocurrency.

        Args:
            coin_id: CoinGecko coin id, e.g. "bitcoin" or "ethereum".
            vs_currency: Quote currency, e.g. "usd" or "eur".
        """
        coin_id = coin_id.strip().lower()
        vs_currency = vs_currency.strip().lower()

        async with self._client() as client:
            resp = await client.get(
                COINGECKO_SIMPLE_PRICE_URL,
                params={"ids": coin_id, "vs_currencies": vs_currency, "include_24hr_change": "true"},
            )
            resp.raise_for_status()

        quote = resp.json().get(coin_id)
        if not quote or vs_currency not in quote:
            return {"found": False, "coin_id": coin_id, "vs_currency": vs_currency}

        return {
            "found": True,
            "coin_id": coin_id,
            "vs_currency": vs_currency,
            "price": quote[vs_currency],
            "change_24h": quote.get(f"{vs_currency}_24h_change"),
        }

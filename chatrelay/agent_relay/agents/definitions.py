"""Built-in agent definitions.

Each ``AgentSpec`` is the static half of an agent: identity, aliases, a
system prompt template and the skill set it may call.  The catalog turns
specs into live ``AssistantAgent`` objects once a model is known.
"""

from __future__ import annotations

from dataclasses import dataclass

from chatrelay.agent_relay.agents.tools import BookSkills, CryptoSkills, SkillSet


@dataclass(frozen=True)
class AgentSpec:
    agent_id: str
    display_name: str
    description: str
    system_prompt: str
    aliases: tuple[str, ...] = ()
    skills: type[SkillSet] = SkillSet


BOOK_ASSISTANT = AgentSpec(
    agent_id="book",
    display_name="Book Assistant",
    description="Helpful assistant for book-related queries",
    aliases=("book-assistant",),
    skills=BookSkills,
    system_prompt=(
        "You are {{ display_name }}, a friendly librarian.\n"
        "Answer questions about books, authors and reading recommendations.\n"
        "When the user names a specific book, call get_book_info before answering "
        "and base facts such as author and publication year on its result.\n"
        "Today is {{ date }}."
    ),
)

CRYPTO_ASSISTANT = AgentSpec(
    agent_id="crypto",
    display_name="Crypto Assistant",
    description="Assistant for cryptocurrency information",
    aliases=("crypto-assistant",),
    skills=CryptoSkills,
    system_prompt=(
        "You are {{ display_name }}.\n"
        "Explain cryptocurrency concepts in plain language.\n"
        "For any question about a current price, call get_crypto_price with the "
        "CoinGecko coin id (BTC is 'bitcoin', ETH is 'ethereum') and quote the result.\n"
        "Never give financial advice.\n"
        "Today is {{ date }}."
    ),
)

DEFAULT_AGENTS: tuple[AgentSpec, ...] = (BOOK_ASSISTANT, CRYPTO_ASSISTANT)

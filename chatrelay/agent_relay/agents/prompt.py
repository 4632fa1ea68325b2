"""System prompt rendering with Jinja2 template support.

Agent system prompts may contain Jinja2 template syntax.  Variables
available to a template:

- ``agent_id``     : str -- canonical agent id, e.g. "book"
- ``display_name`` : str -- human readable name
- ``description``  : str -- one-line agent description
- ``model_name``   : str -- model identifier
- ``date``         : str -- current date (YYYY-MM-DD)
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import jinja2

if TYPE_CHECKING:
    from chatrelay.agent_relay.agents.definitions import AgentSpec


def render_system_prompt(
    spec: AgentSpec,
    *,
    model_name: str,
    extra_vars: dict[str, object] | None = None,
) -> str:
    """Render ``spec.system_prompt``.

    Templates without Jinja2 syntax are returned unchanged.
    """
    raw = spec.system_prompt
    if "{{" not in raw and "{%" not in raw:
        return raw

    template_vars: dict[str, object] = {
        "agent_id": spec.agent_id,
        "display_name": spec.display_name,
        "description": spec.description,
        "model_name": model_name,
        "date": datetime.now(tz=UTC).strftime("%Y-%m-%d"),
    }
    if extra_vars:
        template_vars.update(extra_vars)

    env = jinja2.Environment(autoescape=False, undefined=jinja2.StrictUndefined)  # noqa: S701
    return env.from_string(raw).render(**template_vars)

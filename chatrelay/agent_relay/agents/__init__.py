"""Agents served by the relay.

- **definitions**: static agent specs (identity, aliases, prompt, skills)
- **tools**: HTTP-backed skills the agents may call
- **prompt**: Jinja2 system prompt rendering
- **assistant**: pydantic-ai adapter (``AssistantAgent`` / ``ChatHandle``)
- **catalog**: alias table resolving client-supplied names to agents
"""

import json

import click


@click.group()
def main() -> None:
    """Chat Relay - session-oriented HTTP relay for conversational agents."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from RELAY_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from RELAY_PORT or 3000).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the chat relay HTTP server."""
    import uvicorn

    from chatrelay.agent_relay.settings import RelaySettings

    settings = RelaySettings()

    uvicorn.run(
        "chatrelay.agent_relay.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


# ---------------------------------------------------------------------------
# Local agent access (no HTTP server)
# ---------------------------------------------------------------------------


def _load_catalog():
    from chatrelay.agent_relay.agents.catalog import build_default_catalog
    from chatrelay.agent_relay.log import setup_logging
    from chatrelay.agent_relay.settings import get_settings

    settings = get_settings()
    setup_logging("WARNING")
    return build_default_catalog(settings)


def _resolve(agent_name: str):
    from chatrelay.agent_relay.errors import UnknownAgentError

    try:
        return _load_catalog().resolve(agent_name)
    except UnknownAgentError as exc:
        raise click.BadParameter(exc.message, param_hint="AGENT") from None


@main.command()
def agents() -> None:
    """List the available agents and their aliases."""
    for descriptor in _load_catalog().descriptors():
        aliases = ", ".join(descriptor.aliases) or "-"
        click.echo(f"{descriptor.id:<10} {descriptor.display_name:<20} aliases: {aliases}")
        click.echo(f"{'':<10} {descriptor.description}")


@main.command()
@click.argument("agent_name", metavar="AGENT")
@click.argument("prompt")
@click.option("--stream", is_flag=True, default=False, help="Print the reply as it is generated.")
def ask(agent_name: str, prompt: str, stream: bool) -> None:
    """Send a one-off PROMPT to AGENT and print the reply."""
    import asyncio

    from chatrelay.agent_relay.models.enums import StreamEventType

    agent = _resolve(agent_name)
    chat = agent.chat(f"cli-{agent.agent_id}", persist=False)

    async def _run() -> None:
        if not stream:
            click.echo(await chat.prompt(prompt))
            return
        async for event in chat.stream(prompt):
            if event.type == StreamEventType.CONTENT:
                click.echo(event.content, nl=False)
            elif event.type == StreamEventType.TOOL_CALL:
                click.secho(f"\n[tool] {event.tool} {json.dumps(event.arguments)}", fg="cyan", err=True)
        click.echo()

    asyncio.run(_run())


@main.command()
@click.argument("agent_name", metavar="AGENT")
@click.argument("skill_name", metavar="SKILL")
@click.option(
    "-a",
    "--arg",
    "args",
    multiple=True,
    metavar="KEY=VALUE",
    help="Skill argument; repeat for several.",
)
def skill(agent_name: str, skill_name: str, args: tuple[str, ...]) -> None:
    """Call one of AGENT's skills directly, without the model.

    Example: chatrelay skill book get_book_info -a "book_name=The Black Swan"
    """
    import asyncio

    from chatrelay.agent_relay.agents.assistant import UnknownSkillError

    arguments: dict[str, str] = {}
    for item in args:
        key, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--arg")
        arguments[key] = value

    agent = _resolve(agent_name)
    try:
        result = asyncio.run(agent.call_skill(skill_name, arguments))
    except UnknownSkillError as exc:
        raise click.BadParameter(str(exc), param_hint="SKILL") from None
    click.echo(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()

"""FastAPI dependency injection for the shared registry and agent catalog.

Usage in route handlers::

    @router.get("/sessions")
    async def list_sessions(registry: Registry) -> SessionListResponse:
        ...

Both objects are created once in the app lifespan and stored on
``app.state``.  Dependencies raise HTTP 503 if the lifespan has not run
(tests set ``app.state`` themselves).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from chatrelay.agent_relay.agents.catalog import AgentCatalog
from chatrelay.agent_relay.registry import SessionRegistry
from chatrelay.agent_relay.settings import RelaySettings, get_settings


def get_registry(request: Request) -> SessionRegistry:
    registry: SessionRegistry | None = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session registry not initialised.",
        )
    return registry


def get_catalog(request: Request) -> AgentCatalog:
    catalog: AgentCatalog | None = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Agent catalog not initialised.",
        )
    return catalog


# -- Annotated type aliases for concise route signatures ---------------------

Registry = Annotated[SessionRegistry, Depends(get_registry)]
"""Annotated dependency: process-wide session registry."""

Catalog = Annotated[AgentCatalog, Depends(get_catalog)]
"""Annotated dependency: agent alias table."""

Settings = Annotated[RelaySettings, Depends(get_settings)]

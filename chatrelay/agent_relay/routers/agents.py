"""Agent listing endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from chatrelay.agent_relay.deps import Catalog
from chatrelay.agent_relay.models.api import AgentListResponse

router = APIRouter(tags=["agents"])


@router.get("/agents", response_model=AgentListResponse)
async def list_agents(catalog: Catalog) -> AgentListResponse:
    return AgentListResponse(agents=catalog.descriptors())

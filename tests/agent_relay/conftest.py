"""Shared fixtures for HTTP-level tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sse_starlette.sse import AppStatus

from chatrelay.agent_relay.agents.catalog import AgentCatalog
from chatrelay.agent_relay.app import app
from chatrelay.agent_relay.registry import SessionRegistry


@pytest.fixture(autouse=True)
def _reset_app_state() -> Iterator[None]:
    """Give every test a clean ``app.state`` and SSE exit event."""
    # sse-starlette keeps a process-wide exit event bound to the loop that
    # created it; every TestClient request runs on a fresh loop.
    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
    yield
    app.state.catalog = None
    app.state.registry = None


@pytest.fixture
def client(catalog: AgentCatalog, registry: SessionRegistry) -> TestClient:
    """HTTP client wired to the app with the test catalog and a fresh registry.

    The client is not entered as a context manager, so the app lifespan does
    NOT run; state is set here instead.
    """
    app.state.catalog = catalog
    app.state.registry = registry
    return TestClient(app)

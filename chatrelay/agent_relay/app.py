from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRouter
from loguru import logger

from chatrelay.agent_relay.agents.catalog import build_default_catalog
from chatrelay.agent_relay.errors import MessageValidationError, RelayError
from chatrelay.agent_relay.log import setup_logging
from chatrelay.agent_relay.models.api import HealthResponse
from chatrelay.agent_relay.registry import SessionRegistry
from chatrelay.agent_relay.settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level, json_logs=settings.log_json)

    logger.info("Chat relay starting (host={}, port={})", settings.host, settings.port)
    logger.info("Default model: {}", settings.default_model)

    # -- Catalog and registry --------------------------------------------------
    # Created once per process and shared by every request via deps.py.
    catalog = build_default_catalog(settings)
    registry = SessionRegistry(catalog)
    _app.state.catalog = catalog
    _app.state.registry = registry

    yield

    # -- Shutdown --------------------------------------------------------------
    # Sessions are in-memory only; they are discarded with the process.
    logger.info("Chat relay shutting down (sessions={})", registry.active_count)


app = FastAPI(title="Chat Relay", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RelayError)
async def handle_relay_error(_request: Request, exc: RelayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed: {} ({})", exc.message, exc.to_body().get("details"))
    else:
        logger.debug("Request rejected ({}): {}", exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Body parse and schema errors use the relay's 400 body.
    return await handle_relay_error(request, MessageValidationError(_describe_validation_error(exc)))


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    field = ".".join(part for part in first.get("loc", ()) if isinstance(part, str) and part != "body")
    if field:
        return f"Invalid request body: {field}: {first['msg']}"
    return f"Invalid request body: {first['msg']}"


# ---------------------------------------------------------------------------
# API router -- all endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="OK", timestamp=datetime.now(tz=UTC))


from chatrelay.agent_relay.routers.agents import router as agents_router  # noqa: E402
from chatrelay.agent_relay.routers.chat import router as chat_router  # noqa: E402

api.include_router(agents_router)
api.include_router(chat_router)

app.include_router(api)

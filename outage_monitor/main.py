from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from outage_monitor.api.v1.router import v1_router
from outage_monitor.config import SERVER_VERSION, settings
from outage_monitor.core.exceptions import OutageMonitorError, outage_monitor_error_handler
from outage_monitor.core.logs import configure_logging
from outage_monitor.core.middleware import RequestTracingMiddleware
from outage_monitor.core.secrets import SecretsLoader
from outage_monitor.schemas.health import ServerInfoResponse
from outage_monitor.services.tools import TOOL_NAMES

configure_logging(settings.log_level)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.statusgator_timeout))
    app.state.http_client = http_client
    app.state.settings = settings
    app.state.secrets = SecretsLoader(settings)

    # Warm the secrets cache; a missing key only matters once a tool is called
    secrets = await app.state.secrets.load()
    logger.info(
        "outage_monitor_starting",
        host=settings.host,
        port=settings.port,
        statusgator_url=settings.statusgator_base_url,
        process_credential=bool(secrets.get("STATUSGATOR_API_KEY")),
        secrets_manager=settings.use_secrets_manager,
    )
    yield

    await http_client.aclose()
    logger.info("outage_monitor_stopping")


app = FastAPI(
    title="Outage Monitor MCP Server",
    description="MCP server for monitoring outages on AT&T, Verizon, T-Mobile, AWS, Google Cloud, and Azure",
    version=SERVER_VERSION,
    lifespan=lifespan,
)

# Exception handler
app.add_exception_handler(OutageMonitorError, outage_monitor_error_handler)

# Middleware (Starlette: last-added = outermost)
# 1. RequestTracing (outermost): correlation ID + request logging
# 2. CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "X-Correlation-ID", "X-Request-ID"],
    expose_headers=["X-Correlation-ID"],
)
app.add_middleware(RequestTracingMiddleware)

# Routes
app.include_router(v1_router)


@app.get("/")
async def root() -> ServerInfoResponse:
    return ServerInfoResponse(
        name="Outage Monitor MCP Server",
        version=SERVER_VERSION,
        description=app.description,
        transport="HTTP (JSON-RPC 2.0)",
        endpoints={"health": "/health", "mcp": "/mcp (POST)"},
        tools=TOOL_NAMES,
        auth_methods=[
            "Authorization: Bearer <StatusGator API key> (per request)",
            "STATUSGATOR_API_KEY environment variable (server default)",
        ],
    )

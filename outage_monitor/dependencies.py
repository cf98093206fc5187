import httpx
import structlog
from fastapi import Request

from outage_monitor.config import Settings, settings as default_settings
from outage_monitor.core.exceptions import CredentialError
from outage_monitor.core.secrets import SecretsLoader
from outage_monitor.services.dispatcher import ToolDispatcher
from outage_monitor.services.statusgator.client import StatusGatorClient


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the shared outbound HTTP client stored on app state during lifespan."""
    return request.app.state.http_client


def get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)


def get_secrets(request: Request) -> SecretsLoader:
    return request.app.state.secrets


def get_request_logger(request: Request) -> structlog.typing.FilteringBoundLogger:
    """Request-scoped logger bound by RequestTracingMiddleware."""
    return getattr(request.state, "log", None) or structlog.get_logger()


def bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization", "")
    if not auth_header.lower().startswith("bearer "):
        return None
    return auth_header[len("bearer "):].strip() or None


async def resolve_api_key(request: Request) -> str:
    """API key for tool execution: request bearer token, then process credential."""
    token = bearer_token(request)
    if token:
        request.state.auth_source = "bearer"
        return token

    api_key = await get_secrets(request).get("STATUSGATOR_API_KEY")
    if api_key:
        request.state.auth_source = "environment"
        return api_key

    raise CredentialError(
        "No API key provided. Send a StatusGator API key as a Bearer token or set STATUSGATOR_API_KEY."
    )


async def build_dispatcher(request: Request) -> ToolDispatcher:
    """Dispatcher bound to this request's credential, logger and correlation ID."""
    api_key = await resolve_api_key(request)
    log = get_request_logger(request).bind(auth_source=request.state.auth_source)
    settings = get_settings(request)
    client = StatusGatorClient(
        api_key=api_key,
        http_client=get_http_client(request),
        base_url=settings.statusgator_base_url,
        timeout=settings.statusgator_timeout,
        log=log,
        correlation_id=getattr(request.state, "correlation_id", None),
    )
    return ToolDispatcher(client, log=log)

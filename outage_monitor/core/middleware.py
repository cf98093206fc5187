import time
import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = structlog.get_logger()

CORRELATION_HEADERS = ("x-correlation-id", "x-request-id")


def extract_correlation_id(request: Request) -> str | None:
    for header in CORRELATION_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return None


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Tags every request with a correlation ID and logs it as structured JSON.

    The request-scoped logger is stored on ``request.state.log`` and handed
    explicitly to whatever handles the request.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = extract_correlation_id(request) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        log = logger.bind(
            request_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        request.state.log = log

        client_ip = request.client.host if request.client else None
        log.info("http_request_received", ip=client_ip, user_agent=request.headers.get("user-agent"))

        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = round((time.perf_counter() - start) * 1000, 1)
        response.headers["X-Correlation-ID"] = correlation_id

        if response.status_code >= 500:
            log.error("http_request", status=response.status_code, latency_ms=latency_ms)
        elif response.status_code >= 400:
            log.warning("http_request", status=response.status_code, latency_ms=latency_ms)
        else:
            log.info("http_request", status=response.status_code, latency_ms=latency_ms)

        return response

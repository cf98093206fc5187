from fastapi import Request
from fastapi.responses import JSONResponse


class OutageMonitorError(Exception):
    """Base exception for outage monitor errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status: int = 500,
        details: dict | None = None,
    ):
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        result = {
            "error": {
                "code": self.code,
                "message": self.message,
                "status": self.status,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class CredentialError(OutageMonitorError):
    def __init__(self, message: str = "No API key provided.", details: dict | None = None):
        super().__init__(
            code="credential_required",
            message=message,
            status=401,
            details=details or {
                "suggestion": "Send 'Authorization: Bearer <StatusGator API key>' or set STATUSGATOR_API_KEY."
            },
        )


class UpstreamError(OutageMonitorError):
    def __init__(self, message: str = "StatusGator API is unavailable.", details: dict | None = None):
        super().__init__(code="upstream_error", message=message, status=502, details=details)


class NotFoundError(OutageMonitorError):
    def __init__(self, message: str = "Resource not found.", details: dict | None = None):
        super().__init__(code="not_found", message=message, status=404, details=details)


class ValidationError(OutageMonitorError):
    def __init__(self, message: str = "Invalid tool arguments.", details: dict | None = None):
        super().__init__(code="invalid_arguments", message=message, status=400, details=details)


async def outage_monitor_error_handler(request: Request, exc: OutageMonitorError) -> JSONResponse:
    """Global exception handler for OutageMonitorError and subclasses."""
    return JSONResponse(status_code=exc.status, content=exc.to_dict())

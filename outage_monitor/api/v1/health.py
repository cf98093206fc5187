from datetime import datetime, timezone

from fastapi import APIRouter

from outage_monitor.config import SERVER_NAME, SERVER_VERSION
from outage_monitor.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health")
async def health_check() -> HealthResponse:
    """Liveness check, no auth required."""
    return HealthResponse(
        status="ok",
        server=SERVER_NAME,
        version=SERVER_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )

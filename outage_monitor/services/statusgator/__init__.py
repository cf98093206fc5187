from outage_monitor.services.statusgator.catalog import (
    DEFAULT_MONITORED,
    MONITORED_SERVICES,
    SERVICE_ALIASES,
    SERVICE_ENUM,
    normalize_service_name,
)
from outage_monitor.services.statusgator.client import StatusGatorClient, parse_instant

__all__ = [
    "DEFAULT_MONITORED",
    "MONITORED_SERVICES",
    "SERVICE_ALIASES",
    "SERVICE_ENUM",
    "StatusGatorClient",
    "normalize_service_name",
    "parse_instant",
]

"""structlog setup shared by the HTTP and stdio transports."""

from typing import TextIO

import structlog

from outage_monitor.config import SERVER_NAME

_NAME_TO_LEVEL = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "warn": 30,
    "error": 40,
    "critical": 50,
}


def _add_service_name(logger, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVER_NAME)
    return event_dict


def configure_logging(level: str = "info", stream: TextIO | None = None) -> None:
    """Configure structlog for JSON output.

    The stdio transport passes ``sys.stderr`` so stdout carries nothing but
    MCP frames.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            _add_service_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_NAME_TO_LEVEL.get(level.lower(), 20)),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )

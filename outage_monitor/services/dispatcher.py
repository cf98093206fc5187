"""Routes MCP tool calls to the StatusGator client and builds result envelopes."""

import asyncio
import json
import time
from typing import Any, Awaitable, Callable

import structlog
from pydantic import BaseModel

from outage_monitor.core.exceptions import OutageMonitorError, UpstreamError, ValidationError
from outage_monitor.schemas.jsonrpc import TextContent, ToolResult
from outage_monitor.services.statusgator.catalog import DEFAULT_MONITORED
from outage_monitor.services.statusgator.client import StatusGatorClient


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def _envelope(payload: Any, is_error: bool = False) -> ToolResult:
    text = json.dumps(_to_jsonable(payload), indent=2)
    return ToolResult(content=[TextContent(text=text)], is_error=is_error)


def _require_str(arguments: dict, key: str, message: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


def _optional_str(arguments: dict, key: str) -> str | None:
    value = arguments.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} parameter must be a string")
    return value


class ToolDispatcher:
    """Executes one tool call against a StatusGator client.

    ``call_tool`` never raises: argument errors, unknown tools and upstream
    failures all come back as an error-flagged envelope.
    """

    def __init__(self, client: StatusGatorClient, log: structlog.typing.FilteringBoundLogger | None = None):
        self._client = client
        self._log = log or structlog.get_logger()
        self._handlers: dict[str, Callable[[dict], Awaitable[Any]]] = {
            "check_outage": self._check_outage,
            "check_all_outages": self._check_all_outages,
            "get_service_status": self._get_service_status,
            "get_all_incidents": self._get_all_incidents,
            "search_service": self._search_service,
            "get_historical_incidents": self._get_historical_incidents,
            "get_service_uptime": self._get_service_uptime,
            "get_multi_service_history": self._get_multi_service_history,
            "get_incident_details": self._get_incident_details,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    async def call_tool(self, name: str, arguments: dict | None = None) -> ToolResult:
        log = self._log.bind(tool=name)
        start = time.perf_counter()
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise ValidationError(f"Unknown tool: {name}")
            if arguments is not None and not isinstance(arguments, dict):
                raise ValidationError("Tool arguments must be an object")
            payload = await handler(arguments or {})
        except OutageMonitorError as e:
            log.warning("tool_call_failed", code=e.code, reason=e.message)
            return _envelope({"error": e.message}, is_error=True)
        except Exception as e:
            log.exception("tool_call_crashed")
            return _envelope({"error": str(e) or "Unknown error occurred"}, is_error=True)

        log.info("tool_call", latency_ms=round((time.perf_counter() - start) * 1000, 1))
        return _envelope(payload)

    # ── Handlers ─────────────────────────────────────────────────────────────

    async def _check_outage(self, arguments: dict) -> Any:
        service = _require_str(arguments, "service", "Service parameter is required")
        return await self._client.check_outage(service)

    async def _check_all_outages(self, arguments: dict) -> Any:
        results = await asyncio.gather(*[self._client.check_outage(s) for s in DEFAULT_MONITORED])
        outages = [r for r in results if r.has_outage]
        return {
            "total_services": len(DEFAULT_MONITORED),
            "services_with_outages": len(outages),
            "outages": outages,
            "all_statuses": results,
        }

    async def _get_service_status(self, arguments: dict) -> Any:
        service = _require_str(arguments, "service", "Service parameter is required")
        status = await self._client.get_service_status(service)
        if status is None:
            return {"error": f"Service '{service}' not found"}
        return status

    async def _get_all_incidents(self, arguments: dict) -> Any:
        incidents = await self._client.get_all_current_incidents()
        return {"total_incidents": len(incidents), "incidents": incidents}

    async def _search_service(self, arguments: dict) -> Any:
        name = _require_str(arguments, "service_name", "service_name parameter is required")
        service = await self._client.resolve_service(name)
        if service is None:
            return {"error": f"Service '{name}' not found"}
        return service

    async def _get_historical_incidents(self, arguments: dict) -> Any:
        service = _require_str(arguments, "service", "Service parameter is required")
        start_date = _optional_str(arguments, "start_date")
        end_date = _optional_str(arguments, "end_date")
        status = _optional_str(arguments, "status")
        incidents = await self._client.get_historical_incidents(
            service, start_date, end_date, status, strict=True
        )
        return {
            "service": service,
            "start_date": start_date,
            "end_date": end_date,
            "status": status,
            "total_incidents": len(incidents),
            "incidents": incidents,
        }

    async def _get_service_uptime(self, arguments: dict) -> Any:
        service = _require_str(arguments, "service", "Service parameter is required")
        start_date = _optional_str(arguments, "start_date")
        end_date = _optional_str(arguments, "end_date")
        if not start_date or not end_date:
            raise ValidationError("start_date and end_date parameters are required")
        stats = await self._client.get_service_uptime(service, start_date, end_date)
        if stats is None:
            raise UpstreamError(f"Unable to calculate uptime for service '{service}'")
        return stats

    async def _get_multi_service_history(self, arguments: dict) -> Any:
        services = arguments.get("services")
        if (
            not isinstance(services, list)
            or not services
            or not all(isinstance(s, str) and s.strip() for s in services)
        ):
            raise ValidationError("services parameter must be a non-empty array of service names")
        history = await self._client.get_multi_service_history(
            services,
            _optional_str(arguments, "start_date"),
            _optional_str(arguments, "end_date"),
        )
        return {
            "services": history,
            "total_incidents": sum(len(incidents) for incidents in history.values()),
        }

    async def _get_incident_details(self, arguments: dict) -> Any:
        name = _require_str(arguments, "service", "Service parameter is required")
        incident_id = _require_str(arguments, "incident_id", "incident_id parameter is required")
        service = await self._client.resolve_service(name)
        if service is None:
            return {"error": f"Service '{name}' not found"}
        incident = await self._client.get_incident_details(service.id, incident_id)
        if incident is None:
            return {"error": f"Incident '{incident_id}' not found for service '{name}'"}
        return incident

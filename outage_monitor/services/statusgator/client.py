import asyncio
import math
import time
from datetime import datetime, timezone

import httpx
import structlog

from outage_monitor.config import settings
from outage_monitor.core.exceptions import CredentialError, NotFoundError, UpstreamError
from outage_monitor.schemas.statusgator import (
    Incident,
    OutageCheck,
    Service,
    ServiceStatus,
    UptimeStats,
)
from outage_monitor.services.statusgator.catalog import DEFAULT_MONITORED, normalize_service_name

# Status literals that mean "no outage". Anything else, including values we
# have never seen, counts as an outage.
UP_STATUSES = frozenset({"operational", "up"})


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 timestamp or date. Naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class StatusGatorClient:
    """Async client for the StatusGator v3 API, bound to one API key."""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        log: structlog.typing.FilteringBoundLogger | None = None,
        correlation_id: str | None = None,
    ):
        if not api_key:
            raise CredentialError("StatusGator API key is required.")
        self.base_url = (base_url or settings.statusgator_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.statusgator_timeout
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        if correlation_id:
            self._headers["X-Correlation-ID"] = correlation_id
            self._headers["X-Request-ID"] = correlation_id
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.timeout)
        self._log = (log or structlog.get_logger()).bind(client="statusgator")

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, endpoint: str) -> dict:
        """GET ``endpoint`` and return the decoded ``{data: ...}`` envelope."""
        url = f"{self.base_url}{endpoint}"
        start = time.perf_counter()
        self._log.debug("statusgator_request", url=url)
        try:
            response = await self._client.get(url, headers=self._headers, timeout=self.timeout)
        except httpx.TimeoutException as e:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            self._log.error("statusgator_request_timeout", url=url, timeout=self.timeout, duration_ms=duration_ms)
            raise UpstreamError(f"Failed to fetch from StatusGator: request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            self._log.error("statusgator_request_error", url=url, error=str(e), duration_ms=duration_ms)
            raise UpstreamError(f"Failed to fetch from StatusGator: {e}") from e

        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        if not response.is_success:
            self._log.warning(
                "statusgator_request_failed",
                url=url,
                status=response.status_code,
                duration_ms=duration_ms,
            )
            raise UpstreamError(
                f"Failed to fetch from StatusGator: StatusGator API error: "
                f"{response.status_code} {response.reason_phrase}",
                details={"status": response.status_code},
            )

        self._log.info("statusgator_request_completed", url=url, status=response.status_code, duration_ms=duration_ms)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Failed to fetch from StatusGator: invalid JSON ({e})") from e

    # ── Services ─────────────────────────────────────────────────────────────

    async def list_services(self) -> list[Service]:
        payload = await self._get("/services")
        return [Service.model_validate(s) for s in payload.get("data", [])]

    async def resolve_service(self, name: str) -> Service | None:
        """Find a service by alias, id or name. Returns None when nothing matches."""
        wanted = normalize_service_name(name)
        services = await self.list_services()

        for service in services:
            if service.id == wanted or service.name.lower() == wanted:
                return service

        for service in services:
            if wanted in service.name.lower() or wanted in service.id:
                return service

        return None

    async def get_incidents(self, service_id: str) -> list[Incident]:
        """Incidents for one service. Upstream failures degrade to an empty list."""
        try:
            payload = await self._get(f"/services/{service_id}/incidents")
        except UpstreamError as e:
            self._log.warning("incidents_fetch_failed", service_id=service_id, reason=e.message)
            return []
        return [Incident.model_validate(i) for i in payload.get("data", [])]

    async def get_incident_details(self, service_id: str, incident_id: str) -> Incident | None:
        try:
            payload = await self._get(f"/services/{service_id}/incidents/{incident_id}")
        except UpstreamError as e:
            self._log.warning(
                "incident_details_fetch_failed",
                service_id=service_id,
                incident_id=incident_id,
                reason=e.message,
            )
            return None
        return Incident.model_validate(payload["data"])

    async def get_service_status(self, identifier: str) -> ServiceStatus | None:
        """Current status plus open incidents, or None if StatusGator can't answer."""
        try:
            service = await self.resolve_service(identifier)
            service_id = service.id if service else identifier

            service_payload, incidents = await asyncio.gather(
                self._get(f"/services/{service_id}"),
                self.get_incidents(service_id),
            )
            details = Service.model_validate(service_payload["data"])
        except (UpstreamError, KeyError, ValueError) as e:
            self._log.warning("service_status_failed", service=identifier, reason=str(e))
            return None

        return ServiceStatus(
            service_id=details.id,
            service_name=details.name,
            status=details.status,
            current_incidents=[i for i in incidents if i.status != "resolved"],
            last_checked=_now_iso(),
        )

    async def check_outage(self, name: str) -> OutageCheck:
        status = await self.get_service_status(name)

        if status is None:
            return OutageCheck(service=name, has_outage=False, status="unknown", incidents=[])

        return OutageCheck(
            service=status.service_name,
            has_outage=status.status not in UP_STATUSES,
            status=status.status,
            incidents=status.current_incidents,
        )

    async def get_all_current_incidents(self) -> list[Incident]:
        """Open incidents across the default monitored services, one service at a time."""
        incidents: list[Incident] = []
        for name in DEFAULT_MONITORED:
            status = await self.get_service_status(name)
            if status and status.current_incidents:
                incidents.extend(status.current_incidents)
        return incidents

    # ── History & uptime ─────────────────────────────────────────────────────

    async def _require_service(self, name: str) -> Service:
        service = await self.resolve_service(name)
        if service is None:
            raise NotFoundError(f"Service '{name}' not found")
        return service

    async def _incidents_in_range(
        self,
        service: Service,
        start_date: str | None = None,
        end_date: str | None = None,
        status: str | None = None,
    ) -> list[Incident]:
        incidents = await self.get_incidents(service.id)

        if start_date:
            start = parse_instant(start_date)
            incidents = [i for i in incidents if parse_instant(i.created_at) >= start]

        if end_date:
            end = parse_instant(end_date)
            incidents = [i for i in incidents if parse_instant(i.created_at) <= end]

        if status:
            wanted = status.lower()
            incidents = [i for i in incidents if i.status.lower() == wanted]

        incidents.sort(key=lambda i: parse_instant(i.created_at), reverse=True)
        return incidents

    async def get_historical_incidents(
        self,
        name: str,
        start_date: str | None = None,
        end_date: str | None = None,
        status: str | None = None,
        strict: bool = False,
    ) -> list[Incident]:
        """Incidents for a service filtered by creation date and status, newest first.

        With ``strict`` unset every failure, including an unknown service, is
        logged and reported as an empty list. With ``strict`` set a
        NotFoundError for an unknown service propagates.
        """
        try:
            service = await self._require_service(name)
            return await self._incidents_in_range(service, start_date, end_date, status)
        except NotFoundError as e:
            if strict:
                raise
            self._log.warning("historical_incidents_failed", service=name, reason=e.message)
        except (UpstreamError, ValueError) as e:
            self._log.warning("historical_incidents_failed", service=name, reason=str(e))
        return []

    async def get_service_uptime(self, name: str, start_date: str, end_date: str) -> UptimeStats | None:
        """Uptime for a service over [start_date, end_date].

        Raises NotFoundError if the service can't be resolved; other failures
        return None.
        """
        try:
            service = await self._require_service(name)
            incidents = await self._incidents_in_range(service, start_date, end_date)
            period_start = parse_instant(start_date)
            period_end = parse_instant(end_date)
        except (UpstreamError, ValueError) as e:
            self._log.warning("uptime_calculation_failed", service=name, reason=str(e))
            return None

        downtime_minutes = 0.0
        for incident in incidents:
            # Unresolved incidents contribute nothing
            if incident.resolved_at:
                opened = parse_instant(incident.created_at)
                closed = parse_instant(incident.resolved_at)
                downtime_minutes += (closed - opened).total_seconds() / 60

        period_minutes = (period_end - period_start).total_seconds() / 60
        if period_minutes > 0:
            uptime = (period_minutes - downtime_minutes) / period_minutes * 100
        else:
            uptime = 100.0

        # Halves round up
        return UptimeStats(
            service_id=service.id,
            service_name=service.name,
            period_start=start_date,
            period_end=end_date,
            total_incidents=len(incidents),
            total_downtime_minutes=math.floor(downtime_minutes + 0.5),
            uptime_percentage=math.floor(uptime * 100 + 0.5) / 100,
            incidents=incidents,
        )

    async def get_multi_service_history(
        self,
        names: list[str],
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, list[Incident]]:
        """History for several services, looked up one at a time in the given order."""
        results: dict[str, list[Incident]] = {}
        for name in names:
            results[name] = await self.get_historical_incidents(name, start_date, end_date)
        return results

from pydantic import BaseModel, ConfigDict, Field


class Service(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    name: str = ""
    url: str = ""
    status: str = "unknown"  # "operational", "degraded", "down", ...
    favicon: str | None = None


class Incident(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    service_id: str = ""
    service_name: str = ""
    title: str = ""
    description: str = ""
    status: str = ""  # "investigating", "resolved", ...
    severity: str = ""
    created_at: str
    updated_at: str = ""
    resolved_at: str | None = None
    url: str | None = None


class ServiceStatus(BaseModel):
    service_id: str
    service_name: str
    status: str
    current_incidents: list[Incident] = []
    last_checked: str


class OutageCheck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    service: str
    has_outage: bool = Field(serialization_alias="hasOutage")
    status: str
    incidents: list[Incident] = []


class UptimeStats(BaseModel):
    service_id: str
    service_name: str
    period_start: str
    period_end: str
    total_incidents: int
    total_downtime_minutes: int
    uptime_percentage: float
    incidents: list[Incident] = []

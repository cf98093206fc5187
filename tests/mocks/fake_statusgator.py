"""Fake StatusGator v3 API for local development and testing.

Run standalone: uvicorn tests.mocks.fake_statusgator:app --port 8002
"""

import copy

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

SERVICES = [
    {"id": "att", "name": "AT&T", "url": "https://www.att.com", "status": "operational"},
    {"id": "verizon", "name": "Verizon", "url": "https://www.verizon.com", "status": "up"},
    {"id": "t-mobile", "name": "T-Mobile", "url": "https://www.t-mobile.com", "status": "degraded"},
    {
        "id": "amazon-web-services",
        "name": "Amazon Web Services",
        "url": "https://aws.amazon.com",
        "status": "operational",
        "favicon": "https://aws.amazon.com/favicon.ico",
    },
    {"id": "google-cloud", "name": "Google Cloud", "url": "https://cloud.google.com", "status": "down"},
    {"id": "microsoft-azure", "name": "Microsoft Azure", "url": "https://azure.microsoft.com", "status": "operational"},
    {"id": "github", "name": "GitHub", "url": "https://github.com", "status": "Operational"},
]


def _incident(incident_id, service_id, service_name, status, created_at, resolved_at=None, **extra):
    incident = {
        "id": incident_id,
        "service_id": service_id,
        "service_name": service_name,
        "title": f"{service_name} incident {incident_id}",
        "description": "Elevated error rates",
        "status": status,
        "severity": "major",
        "created_at": created_at,
        "updated_at": resolved_at or created_at,
    }
    if resolved_at:
        incident["resolved_at"] = resolved_at
    incident.update(extra)
    return incident


INCIDENTS = {
    "t-mobile": [
        _incident("tm-1", "t-mobile", "T-Mobile", "investigating", "2024-03-10T12:00:00Z"),
        _incident("tm-0", "t-mobile", "T-Mobile", "resolved", "2024-03-01T08:00:00Z", "2024-03-01T09:00:00Z"),
    ],
    "google-cloud": [
        _incident("gc-1", "google-cloud", "Google Cloud", "identified", "2024-03-11T06:00:00Z"),
    ],
    "amazon-web-services": [
        _incident("aws-1", "amazon-web-services", "Amazon Web Services", "resolved",
                  "2024-01-01T00:00:00Z", "2024-01-01T01:00:00Z"),
        _incident("aws-2", "amazon-web-services", "Amazon Web Services", "Resolved",
                  "2024-01-15T12:00:00Z", "2024-01-15T12:30:00Z"),
        _incident("aws-3", "amazon-web-services", "Amazon Web Services", "investigating",
                  "2024-01-31T23:59:59Z"),
        _incident("aws-4", "amazon-web-services", "Amazon Web Services", "resolved",
                  "2024-02-05T00:00:00Z", "2024-02-05T02:00:00Z"),
    ],
}


def create_fake_statusgator(services: list[dict] | None = None, incidents: dict | None = None) -> FastAPI:
    """Build a fresh fake API. Tests may edit ``app.state`` to change its data.

    ``app.state.calls`` records every request path; paths in
    ``app.state.fail_paths`` answer 500.
    """
    app = FastAPI(title="Fake StatusGator")
    app.state.services = copy.deepcopy(SERVICES if services is None else services)
    app.state.incidents = copy.deepcopy(INCIDENTS if incidents is None else incidents)
    app.state.calls = []
    app.state.headers = []
    app.state.fail_paths = set()

    @app.middleware("http")
    async def record(request: Request, call_next):
        app.state.calls.append(request.url.path)
        app.state.headers.append(dict(request.headers))
        if not request.headers.get("authorization", "").startswith("Bearer "):
            return JSONResponse(status_code=401, content={"error": "Unauthorized"})
        if request.url.path in app.state.fail_paths:
            return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
        return await call_next(request)

    def _find(service_id: str) -> dict | None:
        return next((s for s in app.state.services if s["id"] == service_id), None)

    @app.get("/services")
    async def list_services():
        return {"data": app.state.services}

    @app.get("/services/{service_id}")
    async def get_service(service_id: str):
        service = _find(service_id)
        if service is None:
            return JSONResponse(status_code=404, content={"error": "Not Found"})
        return {"data": service}

    @app.get("/services/{service_id}/incidents")
    async def list_incidents(service_id: str):
        if _find(service_id) is None:
            return JSONResponse(status_code=404, content={"error": "Not Found"})
        return {"data": app.state.incidents.get(service_id, [])}

    @app.get("/services/{service_id}/incidents/{incident_id}")
    async def get_incident(service_id: str, incident_id: str):
        for incident in app.state.incidents.get(service_id, []):
            if incident["id"] == incident_id:
                return {"data": incident}
        return JSONResponse(status_code=404, content={"error": "Not Found"})

    return app


app = create_fake_statusgator()

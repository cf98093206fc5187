"""Tool catalog returned on discovery (``tools/list``)."""

from outage_monitor.services.statusgator.catalog import DISPLAY_NAMES, SERVICE_ENUM

_SERVICE_EXAMPLES = '(e.g., "att", "verizon", "t-mobile", "aws", "google-cloud", "azure")'

_DATE_RANGE_PROPERTIES = {
    "start_date": {
        "type": "string",
        "description": "Start of the period, ISO 8601 (e.g., \"2024-01-01\" or \"2024-01-01T00:00:00Z\")",
    },
    "end_date": {
        "type": "string",
        "description": "End of the period, ISO 8601 (e.g., \"2024-01-31T23:59:59Z\")",
    },
}

TOOLS: list[dict] = [
    {
        "name": "check_outage",
        "description": f"Check if a specific service is experiencing an outage. Supports: {DISPLAY_NAMES}",
        "inputSchema": {
            "type": "object",
            "properties": {
                "service": {
                    "type": "string",
                    "description": f"The service to check {_SERVICE_EXAMPLES}",
                    "enum": SERVICE_ENUM,
                },
            },
            "required": ["service"],
        },
    },
    {
        "name": "check_all_outages",
        "description": f"Check all monitored services ({DISPLAY_NAMES}) for outages",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "get_service_status",
        "description": "Get detailed status information for a specific service including current incidents",
        "inputSchema": {
            "type": "object",
            "properties": {
                "service": {
                    "type": "string",
                    "description": f"The service to get status for {_SERVICE_EXAMPLES}",
                },
            },
            "required": ["service"],
        },
    },
    {
        "name": "get_all_incidents",
        "description": "Get all current incidents across all monitored services",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "search_service",
        "description": "Search for a service by name in the StatusGator database",
        "inputSchema": {
            "type": "object",
            "properties": {
                "service_name": {
                    "type": "string",
                    "description": "The name of the service to search for",
                },
            },
            "required": ["service_name"],
        },
    },
    {
        "name": "get_historical_incidents",
        "description": "Get past incidents for a service, optionally filtered by date range and status, newest first",
        "inputSchema": {
            "type": "object",
            "properties": {
                "service": {
                    "type": "string",
                    "description": f"The service to get history for {_SERVICE_EXAMPLES}",
                },
                **_DATE_RANGE_PROPERTIES,
                "status": {
                    "type": "string",
                    "description": "Only return incidents with this status (e.g., \"resolved\", \"investigating\")",
                },
            },
            "required": ["service"],
        },
    },
    {
        "name": "get_service_uptime",
        "description": "Calculate uptime percentage and total downtime for a service over a period",
        "inputSchema": {
            "type": "object",
            "properties": {
                "service": {
                    "type": "string",
                    "description": f"The service to calculate uptime for {_SERVICE_EXAMPLES}",
                },
                **_DATE_RANGE_PROPERTIES,
            },
            "required": ["service", "start_date", "end_date"],
        },
    },
    {
        "name": "get_multi_service_history",
        "description": "Get incident history for several services at once",
        "inputSchema": {
            "type": "object",
            "properties": {
                "services": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "The services to get history for",
                },
                **_DATE_RANGE_PROPERTIES,
            },
            "required": ["services"],
        },
    },
    {
        "name": "get_incident_details",
        "description": "Get the full details of a single incident",
        "inputSchema": {
            "type": "object",
            "properties": {
                "service": {
                    "type": "string",
                    "description": f"The service the incident belongs to {_SERVICE_EXAMPLES}",
                },
                "incident_id": {
                    "type": "string",
                    "description": "The StatusGator incident id",
                },
            },
            "required": ["service", "incident_id"],
        },
    },
]

TOOL_NAMES: list[str] = [tool["name"] for tool in TOOLS]

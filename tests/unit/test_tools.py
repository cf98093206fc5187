from outage_monitor.services.dispatcher import ToolDispatcher
from outage_monitor.services.statusgator.catalog import SERVICE_ENUM
from outage_monitor.services.tools import TOOL_NAMES, TOOLS


def _tool(name):
    return next(t for t in TOOLS if t["name"] == name)


def test_tool_names_in_order():
    assert TOOL_NAMES == [
        "check_outage",
        "check_all_outages",
        "get_service_status",
        "get_all_incidents",
        "search_service",
        "get_historical_incidents",
        "get_service_uptime",
        "get_multi_service_history",
        "get_incident_details",
    ]


def test_every_tool_has_object_schema():
    for tool in TOOLS:
        assert tool["description"]
        assert tool["inputSchema"]["type"] == "object"
        for required in tool["inputSchema"].get("required", []):
            assert required in tool["inputSchema"]["properties"]


def test_check_outage_enum_matches_catalog():
    assert _tool("check_outage")["inputSchema"]["properties"]["service"]["enum"] == SERVICE_ENUM


def test_uptime_requires_dates():
    assert _tool("get_service_uptime")["inputSchema"]["required"] == ["service", "start_date", "end_date"]


def test_multi_history_takes_string_array():
    services = _tool("get_multi_service_history")["inputSchema"]["properties"]["services"]
    assert services == {
        "type": "array",
        "items": {"type": "string"},
        "description": "The services to get history for",
    }


def test_every_listed_tool_has_a_handler(statusgator_client):
    assert set(ToolDispatcher(statusgator_client).tool_names) == set(TOOL_NAMES)

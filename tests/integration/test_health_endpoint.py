from outage_monitor.services.tools import TOOL_NAMES


class TestHealthEndpoint:
    async def test_returns_health_without_auth(self, anon_client):
        """GET /health does NOT require auth."""
        response = await anon_client.get("/health")
        assert response.status_code == 200

    async def test_health_response_fields(self, anon_client):
        response = await anon_client.get("/health")
        data = response.json()
        assert data["status"] == "ok"
        assert data["server"] == "outage-monitor-mcp"
        assert data["version"] == "1.0.0"
        assert data["timestamp"].endswith("Z")

    async def test_health_makes_no_upstream_call(self, anon_client, fake_statusgator):
        await anon_client.get("/health")
        assert fake_statusgator.state.calls == []


class TestServerInfo:
    async def test_root_describes_server(self, anon_client):
        response = await anon_client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["version"] == "1.0.0"
        assert data["endpoints"] == {"health": "/health", "mcp": "/mcp (POST)"}
        assert data["tools"] == TOOL_NAMES
        assert len(data["auth_methods"]) == 2

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from outage_monitor.config import Settings
from outage_monitor.core.secrets import SecretsLoader
from outage_monitor.services.dispatcher import ToolDispatcher
from outage_monitor.services.statusgator.client import StatusGatorClient
from tests.mocks.fake_statusgator import create_fake_statusgator

FAKE_BASE_URL = "http://fake-statusgator"


@pytest.fixture
def fake_statusgator():
    """A fresh fake StatusGator API per test."""
    return create_fake_statusgator()


@pytest_asyncio.fixture
async def upstream_http_client(fake_statusgator):
    """Outbound HTTP client routed in-process to the fake StatusGator API."""
    client = httpx.AsyncClient(transport=ASGITransport(app=fake_statusgator))
    yield client
    await client.aclose()


@pytest.fixture
def statusgator_client(upstream_http_client):
    return StatusGatorClient(
        api_key="sg-test-key",
        http_client=upstream_http_client,
        base_url=FAKE_BASE_URL,
    )


@pytest.fixture
def dispatcher(statusgator_client):
    return ToolDispatcher(statusgator_client)


def make_settings(**overrides) -> Settings:
    values = {
        "statusgator_api_key": None,
        "statusgator_base_url": FAKE_BASE_URL,
        "use_secrets_manager": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest_asyncio.fixture
async def app_factory(upstream_http_client):
    """Wire the FastAPI app to the fake StatusGator API with a given process credential."""
    from outage_monitor.main import app

    original_state = dict(app.state._state)

    def _configure(env_api_key: str | None = None):
        settings = make_settings(statusgator_api_key=env_api_key)
        app.state.http_client = upstream_http_client
        app.state.settings = settings
        app.state.secrets = SecretsLoader(settings)
        return app

    yield _configure

    app.state._state.clear()
    app.state._state.update(original_state)


@pytest_asyncio.fixture
async def anon_client(app_factory):
    """Client with no bearer token, server with no process credential."""
    app = app_factory(env_api_key=None)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def auth_client(app_factory):
    """Client sending its own StatusGator key as a bearer token."""
    app = app_factory(env_api_key=None)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        client.headers["Authorization"] = "Bearer sg-bearer-key"
        yield client


@pytest_asyncio.fixture
async def env_client(app_factory):
    """Client with no bearer token, server holding a process credential."""
    app = app_factory(env_api_key="sg-env-key")
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

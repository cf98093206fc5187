"""MCP over stdin/stdout, for desktop clients that spawn the server."""

import json
import sys

import httpx
import structlog
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from outage_monitor.config import SERVER_NAME, SERVER_VERSION, Settings, settings as default_settings
from outage_monitor.core.logs import configure_logging
from outage_monitor.core.secrets import SecretsLoader
from outage_monitor.services.dispatcher import ToolDispatcher
from outage_monitor.services.statusgator.client import StatusGatorClient
from outage_monitor.services.tools import TOOLS

logger = structlog.get_logger()


class ToolCallError(Exception):
    """Carries an error envelope's text back through the MCP SDK as ``isError``."""


def create_server(
    http_client: httpx.AsyncClient,
    secrets: SecretsLoader,
    settings: Settings | None = None,
) -> Server:
    settings = settings or default_settings
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [types.Tool(**tool) for tool in TOOLS]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
        log = logger.bind(transport="stdio", tool=name)
        api_key = await secrets.get("STATUSGATOR_API_KEY")
        if not api_key:
            log.warning("mcp_credential_missing")
            raise ToolCallError(json.dumps({"error": "No API key provided. Set STATUSGATOR_API_KEY."}, indent=2))

        client = StatusGatorClient(
            api_key=api_key,
            http_client=http_client,
            base_url=settings.statusgator_base_url,
            timeout=settings.statusgator_timeout,
            log=log,
        )
        result = await ToolDispatcher(client, log=log).call_tool(name, arguments)
        if result.is_error:
            raise ToolCallError(result.text)
        return [types.TextContent(type="text", text=c.text) for c in result.content]

    return server


async def serve_stdio(settings: Settings | None = None) -> None:
    settings = settings or default_settings
    # stdout belongs to the protocol
    configure_logging(settings.log_level, stream=sys.stderr)

    secrets = SecretsLoader(settings)
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.statusgator_timeout)) as http_client:
        server = create_server(http_client, secrets, settings)
        logger.info("outage_monitor_starting", transport="stdio")
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

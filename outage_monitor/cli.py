import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from outage_monitor.config import settings
from outage_monitor.core.secrets import SecretsLoader

console = Console()
err_console = Console(stderr=True)
cli_app = typer.Typer(name="outage-monitor", help="Outage Monitor MCP server")


def _run_async(coro):
    """Run async code from sync CLI context."""
    return asyncio.run(coro)


@cli_app.command("run")
def run(
    transport: str = typer.Option(None, "--transport", help="'http' or 'stdio' (default: MCP_TRANSPORT)"),
):
    """Start the server on the configured transport."""
    transport = (transport or settings.mcp_transport).lower()
    if transport == "stdio":
        stdio()
    elif transport == "http":
        serve(host=None, port=None)
    else:
        err_console.print(f"[red]Unknown transport: {transport}[/red] (valid options: stdio, http)")
        raise typer.Exit(code=1)


@cli_app.command("serve")
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default: HOST)"),
    port: int = typer.Option(None, "--port", help="Bind port (default: PORT)"),
):
    """Serve MCP over HTTP (JSON-RPC on POST /mcp)."""
    import uvicorn

    uvicorn.run(
        "outage_monitor.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@cli_app.command("stdio")
def stdio():
    """Serve MCP over stdin/stdout."""
    from outage_monitor.transports.stdio import serve_stdio

    _run_async(serve_stdio())


@cli_app.command("check")
def check(
    service: str = typer.Argument(help="Service to check, e.g. 'aws' or 'verizon'"),
    api_key: str = typer.Option(None, "--api-key", envvar="STATUSGATOR_API_KEY", help="StatusGator API key"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
):
    """Check a single service for an outage."""
    if not api_key:
        # Same credential the servers use, including AWS Secrets Manager
        api_key = _run_async(SecretsLoader(settings).get("STATUSGATOR_API_KEY"))
    if not api_key:
        console.print("[red]No API key provided.[/red] Pass --api-key or set STATUSGATOR_API_KEY.")
        raise typer.Exit(code=1)

    async def _check():
        from outage_monitor.services.statusgator.client import StatusGatorClient

        client = StatusGatorClient(api_key=api_key)
        try:
            return await client.check_outage(service)
        finally:
            await client.close()

    result = _run_async(_check())

    if as_json:
        console.print_json(json.dumps(result.model_dump(mode="json", by_alias=True, exclude_none=True)))
        return

    colour = "red" if result.has_outage else "green"
    console.print(f"\n[bold]{result.service}[/bold]: [{colour}]{result.status}[/{colour}]")
    if not result.incidents:
        console.print("[dim]No open incidents.[/dim]\n")
        return

    table = Table(title="Open Incidents")
    table.add_column("Created", style="cyan")
    table.add_column("Status")
    table.add_column("Severity", style="yellow")
    table.add_column("Title")
    for incident in result.incidents:
        table.add_row(incident.created_at, incident.status, incident.severity, incident.title)
    console.print(table)


@cli_app.command("tools")
def tools():
    """List the MCP tools this server exposes."""
    from outage_monitor.services.tools import TOOLS

    table = Table(title="MCP Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Required")
    table.add_column("Description")
    for tool in TOOLS:
        required = ", ".join(tool["inputSchema"].get("required", [])) or "-"
        table.add_row(tool["name"], required, tool["description"])
    console.print(table)


def main():
    cli_app()


if __name__ == "__main__":
    main()

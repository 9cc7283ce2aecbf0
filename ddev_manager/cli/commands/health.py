"""
Health Commands.

Is the backend up, and can it reach ddev? (requires running server)
"""

import asyncio
from typing import Any

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ddev_manager.cli.client import get_api_client

app = typer.Typer(help="Health check commands")
console = Console()

_STATUS_COLORS = {"healthy": "green", "unhealthy": "red"}


def _colored(status: str) -> str:
    color = _STATUS_COLORS.get(status, "yellow")
    return f"[{color}]{status}[/{color}]"


@app.command()
def status(
    detailed: bool = typer.Option(False, "--detailed", "-d", help="Show component details"),
) -> None:
    """
    Check that the backend can run ddev.

    Examples:
        dashboard.py health status
        dashboard.py health status -d
    """
    asyncio.run(_status(detailed))


async def _status(detailed: bool) -> None:
    client = get_api_client()
    path = "/api/health/detailed" if detailed else "/api/health/ready"
    try:
        response = await client.get(path)
    except httpx.ConnectError:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: cli.py --service server[/dim]")
        raise typer.Exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        await client.close()

    if response.status_code == 503:
        console.print(Panel("[red]UNHEALTHY[/red]\nddev is not available to the backend", title="Backend Status"))
        raise typer.Exit(1)
    if response.status_code != 200:
        console.print(f"[red]Unexpected response: {response.status_code}[/red]")
        raise typer.Exit(1)

    body = response.json()
    if detailed:
        _show_detailed(body)
    else:
        ddev = body.get("checks", {}).get("ddev", {})
        console.print(Panel(
            f"{_colored(body.get('status', 'unknown'))}\n"
            f"ddev {ddev.get('version') or '?'} ({ddev.get('latency_ms', '?')}ms)",
            title="Backend Status",
        ))
    if body.get("status") != "healthy":
        raise typer.Exit(1)


def _show_detailed(body: dict[str, Any]) -> None:
    table = Table(title="Health Status", show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    for component, check in body.get("checks", {}).items():
        details = []
        if check.get("version"):
            details.append(f"version: {check['version']}")
        if "latency_ms" in check:
            details.append(f"latency: {check['latency_ms']}ms")
        if "error" in check:
            details.append(f"error: {check['error']}")
        table.add_row(component, _colored(check.get("status", "unknown")), ", ".join(details) or "-")

    console.print(table)

    realtime = body.get("realtime") or {}
    console.print(f"\n[dim]Realtime connections: {realtime.get('connections', 0)}[/dim]")
    for pool, info in (body.get("pools") or {}).items():
        console.print(f"[dim]{pool}: {info}[/dim]")
    application = body.get("application") or {}
    if application:
        console.print(
            f"[dim]{application.get('name', 'N/A')} v{application.get('version', 'N/A')}"
            f" ({application.get('env', 'N/A')})[/dim]"
        )


@app.command()
def ping() -> None:
    """
    Check that the backend answers at all.

    Examples:
        dashboard.py health ping
    """
    asyncio.run(_ping())


async def _ping() -> None:
    client = get_api_client()
    try:
        response = await client.get("/api/health")
    except httpx.HTTPError as e:
        console.print(f"[red]✗ Backend is not reachable ({type(e).__name__})[/red]")
        raise typer.Exit(1)
    finally:
        await client.close()

    if response.status_code == 200:
        console.print("[green]✓ Backend is reachable[/green]")
    else:
        console.print(f"[yellow]Backend responded with status {response.status_code}[/yellow]")

"""
Project Commands.

Commands for listing, inspecting and operating ddev projects through the
backend API (requires running server).
"""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Optional

import httpx
import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from ddev_manager.cli.client import APIClient, APIError, get_api_client

app = typer.Typer(help="ddev project commands")
console = Console()

STATUS_COLORS = {"running": "green", "stopped": "red", "paused": "yellow"}


def _run(fn: Callable[..., Awaitable[None]], *args: Any) -> None:
    """Run an async command body with the shared client and uniform error output."""
    asyncio.run(_guarded(fn, *args))


async def _guarded(fn: Callable[..., Awaitable[None]], *args: Any) -> None:
    client = get_api_client()
    try:
        await fn(client, *args)
    except APIError as e:
        console.print(f"[red]Error ({e.status_code}): {e.message}[/red]")
        for detail in e.details:
            console.print(f"[dim]  - {detail}[/dim]")
        raise typer.Exit(1)
    except httpx.ConnectError:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: cli.py --service server[/dim]")
        raise typer.Exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        await client.close()


def parse_assignments(assignments: list[str]) -> dict[str, Any]:
    """
    Turn ``key=value`` pairs into a config update.

    Values are parsed as YAML scalars so ``router_http_port=8080`` becomes an
    int and ``xdebug_enabled=true`` a bool; lists use ``[a, b]``.
    """
    updates: dict[str, Any] = {}
    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{assignment}'")
        value = yaml.safe_load(raw) if raw.strip() else None
        # Versions like 8.2 stay strings
        if isinstance(value, float):
            value = raw.strip()
        updates[key.strip()] = value
    return updates


# =============================================================================
# Listing and inspection
# =============================================================================


@app.command("list")
def list_projects() -> None:
    """
    List all ddev projects.

    Examples:
        dashboard.py projects list
    """
    _run(_list)


async def _list(client: APIClient) -> None:
    body = await client.call("GET", "/api/projects")
    projects = body.get("data") or []

    if not projects:
        console.print(f"[yellow]{body.get('message') or 'No projects found'}[/yellow]")
        return

    table = Table(title=f"DDEV Projects ({body.get('count', len(projects))})", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("Type")
    table.add_column("PHP")
    table.add_column("Database")
    table.add_column("URL", style="dim")

    for project in projects:
        config = project.get("config") or {}
        status = str(project.get("status", "unknown"))
        color = STATUS_COLORS.get(status, "yellow")
        table.add_row(
            str(project.get("name", "?")),
            f"[{color}]{status}[/{color}]",
            str(config.get("type", project.get("type", "-"))),
            str(config.get("php_version", "-")),
            str(config.get("database", "-")),
            str(project.get("primary_url") or project.get("httpsurl") or "-"),
        )

    console.print(table)


@app.command()
def show(name: str = typer.Argument(..., help="Project name")) -> None:
    """
    Show a project's status and configuration.

    Examples:
        dashboard.py projects show mysite
    """
    _run(_show, name)


async def _show(client: APIClient, name: str) -> None:
    body = await client.call("GET", f"/api/projects/{name}")
    project = body.get("data") or {}

    status = str(project.get("status", "unknown"))
    color = STATUS_COLORS.get(status, "yellow")
    console.print(Panel(
        f"[bold]{project.get('name', name)}[/bold]\n"
        f"Status: [{color}]{status}[/{color}]\n"
        f"Type: {project.get('type', '-')}\n"
        f"Root: {project.get('approot', '-')}\n"
        f"URL: {project.get('primary_url') or project.get('httpsurl') or '-'}",
        title="Project",
    ))
    _display_config(project.get("config") or {})


@app.command()
def options() -> None:
    """
    Show the values accepted for PHP version, database, type and webserver.

    Examples:
        dashboard.py projects options
    """
    _run(_options)


async def _options(client: APIClient) -> None:
    body = await client.call("GET", "/api/projects/options")
    data = body.get("data") or {}
    for key, label in (
        ("phpVersions", "PHP versions"),
        ("databases", "Databases"),
        ("projectTypes", "Project types"),
        ("webserverTypes", "Webserver types"),
    ):
        console.print(f"[bold cyan]{label}[/bold cyan]: {', '.join(data.get(key, []))}")


@app.command()
def logs(
    name: str = typer.Argument(..., help="Project name"),
    service: str = typer.Option("web", "--service", "-s", help="Container service"),
    lines: int = typer.Option(100, "--lines", "-n", min=1, max=10000, help="Lines to tail"),
) -> None:
    """
    Tail a project's service logs.

    Examples:
        dashboard.py projects logs mysite
        dashboard.py projects logs mysite --service db --lines 500
    """
    _run(_logs, name, service, lines)


async def _logs(client: APIClient, name: str, service: str, lines: int) -> None:
    body = await client.call(
        "GET",
        f"/api/projects/{name}/logs",
        params={"service": service, "lines": lines},
    )
    data = body.get("data") or {}
    console.print(f"[dim]{data.get('project', name)} / {data.get('service', service)} (last {data.get('lines', lines)} lines)[/dim]")
    console.print(data.get("logs", ""), markup=False, highlight=False)


@app.command()
def config(
    name: str = typer.Argument(..., help="Project name"),
    assignments: Optional[list[str]] = typer.Option(
        None,
        "--set",
        help="Field to update as key=value (repeatable)",
    ),
) -> None:
    """
    Show or update a project's config.yaml.

    Examples:
        dashboard.py projects config mysite
        dashboard.py projects config mysite --set php_version=8.2 --set router_http_port=8080
    """
    updates = parse_assignments(assignments or [])
    _run(_config, name, updates)


async def _config(client: APIClient, name: str, updates: dict[str, Any]) -> None:
    if updates:
        body = await client.call("PUT", f"/api/projects/{name}/config", json=updates)
        console.print(f"[green]✓ {body.get('message', 'Configuration updated')}[/green]")
    else:
        body = await client.call("GET", f"/api/projects/{name}/config")
    _display_config(body.get("data") or {})


def _display_config(data: dict[str, Any]) -> None:
    """Display a config document as a tree."""
    tree = Tree("[bold cyan]config[/bold cyan]")

    def add_items(parent: Tree, items: dict[str, Any]) -> None:
        for key, value in items.items():
            if isinstance(value, dict):
                branch = parent.add(f"[cyan]{key}[/cyan]")
                add_items(branch, value)
            else:
                parent.add(f"[cyan]{key}[/cyan]: {value}")

    add_items(tree, data)
    console.print(tree)


# =============================================================================
# Lifecycle
# =============================================================================


@app.command()
def create(
    name: str = typer.Argument(..., help="Project name"),
    directory: Path = typer.Option(..., "--directory", "-D", help="Existing project directory"),
    project_type: str = typer.Option("php", "--type", "-t", help="Project type"),
    php_version: Optional[str] = typer.Option(None, "--php", help="PHP version"),
    docroot: Optional[str] = typer.Option(None, "--docroot", help="Document root"),
    database: Optional[str] = typer.Option(None, "--database", help="Database, e.g. mariadb:10.11"),
    webserver_type: Optional[str] = typer.Option(None, "--webserver", help="Webserver type"),
) -> None:
    """
    Configure a new project in an existing directory.

    Examples:
        dashboard.py projects create mysite -D ~/code/mysite -t wordpress
    """
    payload: dict[str, Any] = {
        "name": name,
        "type": project_type,
        "directory": str(directory.expanduser().resolve()),
    }
    if php_version:
        payload["phpVersion"] = php_version
    if docroot:
        payload["docroot"] = docroot
    if database:
        payload["database"] = database
    if webserver_type:
        payload["webserverType"] = webserver_type

    _run(_action, "POST", "/api/projects", {"json": payload})


@app.command()
def start(name: str = typer.Argument(..., help="Project name")) -> None:
    """
    Start a project.

    Examples:
        dashboard.py projects start mysite
    """
    _run(_action, "POST", f"/api/projects/{name}/start", {})


@app.command()
def stop(name: str = typer.Argument(..., help="Project name")) -> None:
    """
    Stop a project.

    Examples:
        dashboard.py projects stop mysite
    """
    _run(_action, "POST", f"/api/projects/{name}/stop", {})


@app.command()
def restart(name: str = typer.Argument(..., help="Project name")) -> None:
    """
    Restart a project.

    Examples:
        dashboard.py projects restart mysite
    """
    _run(_action, "POST", f"/api/projects/{name}/restart", {})


@app.command()
def delete(
    name: str = typer.Argument(..., help="Project name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """
    Delete a project (containers removed, no snapshot taken).

    Examples:
        dashboard.py projects delete mysite
        dashboard.py projects delete mysite --yes
    """
    if not yes:
        typer.confirm(f"Delete project '{name}'? This cannot be undone.", abort=True)
    _run(_action, "DELETE", f"/api/projects/{name}", {"params": {"confirm": "true"}})


async def _action(client: APIClient, method: str, path: str, kwargs: dict[str, Any]) -> None:
    with console.status("Waiting for ddev..."):
        body = await client.call(method, path, **kwargs)
    console.print(f"[green]✓ {body.get('message', 'Done')}[/green]")


# =============================================================================
# Database
# =============================================================================


@app.command("import-db")
def import_db(
    name: str = typer.Argument(..., help="Project name"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Database dump"),
) -> None:
    """
    Import a database dump into a project.

    Examples:
        dashboard.py projects import-db mysite ./dump.sql.gz
    """
    _run(_import_db, name, file)


async def _import_db(client: APIClient, name: str, file: Path) -> None:
    with console.status(f"Importing {file.name}..."), file.open("rb") as fh:
        body = await client.call(
            "POST",
            f"/api/projects/{name}/database/import",
            files={"database": (file.name, fh, "application/octet-stream")},
        )
    console.print(f"[green]✓ {body.get('message', 'Database imported')}[/green]")


@app.command("export-db")
def export_db(
    name: str = typer.Argument(..., help="Project name"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Destination file"),
) -> None:
    """
    Export a project's database to a gzipped dump.

    Examples:
        dashboard.py projects export-db mysite
        dashboard.py projects export-db mysite -o backups/mysite.sql.gz
    """
    _run(_export_db, name, output or Path(f"{name}_database.sql.gz"))


async def _export_db(client: APIClient, name: str, output: Path) -> None:
    with console.status("Exporting database..."):
        size = await client.download(f"/api/projects/{name}/database/export", output)
    console.print(f"[green]✓ Database exported to {output} ({size} bytes)[/green]")

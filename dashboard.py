#!/usr/bin/env python3
"""
DDEV Manager Dashboard.

Terminal client for the backend API.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    python dashboard.py --help                            # Show help

    # Projects (requires running server)
    python dashboard.py projects list                     # List projects
    python dashboard.py projects show mysite              # Status + config
    python dashboard.py projects options                  # Accepted values
    python dashboard.py projects create mysite -D ~/code/mysite -t wordpress
    python dashboard.py projects start mysite             # Start / stop / restart
    python dashboard.py projects delete mysite            # Delete (asks first)
    python dashboard.py projects logs mysite -s db        # Tail service logs
    python dashboard.py projects config mysite --set php_version=8.2
    python dashboard.py projects import-db mysite dump.sql.gz
    python dashboard.py projects export-db mysite -o backup.sql.gz

    # Health checks
    python dashboard.py health status                     # Readiness (ddev available)
    python dashboard.py health ping                       # Ping backend

    # System info
    python dashboard.py system info                       # Show app info
    python dashboard.py system config ddev                # Show configuration

Options:
    --verbose, -v     Enable verbose output
    --debug           Enable debug mode (detailed logging)
    --help            Show help message
"""

from pathlib import Path

import typer
from rich.console import Console

project_root = Path(__file__).resolve().parent

console = Console()


def _validate_project_root() -> None:
    """Validate that we're running from the project root."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


from ddev_manager.cli.commands import health_app, projects_app, system_app

app = typer.Typer(
    name="dashboard",
    help="DDEV Manager - manage local ddev projects from the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(projects_app, name="projects")
app.add_typer(health_app, name="health")
app.add_typer(system_app, name="system")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    DDEV Manager Dashboard.

    List, start, stop, configure and back up ddev projects.
    """
    _validate_project_root()

    if debug:
        from ddev_manager.backend.core.logging import setup_logging
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        from ddev_manager.backend.core.logging import setup_logging
        setup_logging(level="INFO", format_type="console")


if __name__ == "__main__":
    app()

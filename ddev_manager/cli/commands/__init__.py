"""
CLI Commands.

Organized by domain/feature area.
"""

from ddev_manager.cli.commands.health import app as health_app
from ddev_manager.cli.commands.projects import app as projects_app
from ddev_manager.cli.commands.system import app as system_app

__all__ = [
    "health_app",
    "projects_app",
    "system_app",
]

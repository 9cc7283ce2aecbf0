"""
ddev CLI integration.

Everything that touches the external ddev binary goes through CommandRunner.
"""

from ddev_manager.backend.ddev.runner import CommandResult, CommandRunner

__all__ = ["CommandResult", "CommandRunner"]

"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate the ddev command runner, translate its failures into
application exceptions, and publish realtime events.

Usage:
    from ddev_manager.backend.services.base import BaseService

    class SnapshotService(BaseService):
        async def take(self, name: str) -> None:
            self._validate_project_name(name)
            await self.runner.run("snapshot", name)
"""

from typing import Any

from ddev_manager.backend.core.exceptions import ValidationError
from ddev_manager.backend.core.logging import get_logger
from ddev_manager.backend.core.utils import is_valid_project_name
from ddev_manager.backend.ddev.runner import CommandRunner
from ddev_manager.backend.events.publishers import ProjectEventPublisher


class BaseService:
    """
    Base class for all services.

    Provides:
    - Access to the ddev command runner and event publisher
    - Logging context
    - Common validation patterns

    Subclasses should:
    - Call super().__init__(runner, publisher) in their __init__
    - Implement business logic methods
    """

    def __init__(self, runner: CommandRunner, publisher: ProjectEventPublisher) -> None:
        """
        Initialize the service.

        Args:
            runner: Wrapper around the ddev binary
            publisher: Realtime event publisher
        """
        self._runner = runner
        self._publisher = publisher
        self._logger = get_logger(self.__class__.__module__)

    @property
    def runner(self) -> CommandRunner:
        """Get the ddev command runner."""
        return self._runner

    @property
    def publisher(self) -> ProjectEventPublisher:
        """Get the event publisher."""
        return self._publisher

    def _validate_project_name(self, name: str) -> None:
        """
        Validate a project name against the allowlist.

        Raises:
            ValidationError: If the name contains characters other than
                letters, digits, '-' and '_', or is longer than 50
        """
        if not is_valid_project_name(name):
            raise ValidationError(
                "Validation error",
                details=[
                    "name: must be 1-50 characters of letters, digits, '-' or '_'",
                ],
            )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )

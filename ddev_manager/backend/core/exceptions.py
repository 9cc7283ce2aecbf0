"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Every failure surfaced by the ddev wrapper or the HTTP layer is one of
these; exception_handlers.py maps each to a status code.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        code: str = "SYS_INTERNAL_ERROR",
        details: list[str] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or []
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a project (or other resource) cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when input fails validation before any external call."""

    def __init__(self, message: str = "Validation failed", details: list[str] | None = None) -> None:
        super().__init__(message, code="VAL_VALIDATION_ERROR", details=details)


class UploadRejectedError(ApplicationError):
    """Raised when an uploaded file fails the extension or size checks."""

    def __init__(self, message: str = "Upload rejected") -> None:
        super().__init__(message, code="UPLOAD_REJECTED")


class FilesystemPermissionError(ApplicationError):
    """Raised when a project file cannot be read or written due to permissions."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, code="FS_PERMISSION_DENIED")


class RateLimitError(ApplicationError):
    """Raised when rate limit is exceeded."""

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message, code="RATE_LIMITED")


class ToolNotInstalledError(ApplicationError):
    """Raised when the ddev binary is not installed or not on PATH."""

    def __init__(
        self,
        message: str = "DDEV is not installed or not available in PATH. Please install DDEV first.",
    ) -> None:
        super().__init__(message, code="DDEV_NOT_INSTALLED")


class CommandFailedError(ApplicationError):
    """Raised when a ddev invocation exits non-zero or times out."""

    def __init__(self, message: str = "DDEV command failed", diagnostic: str | None = None) -> None:
        self.diagnostic = diagnostic
        super().__init__(message, code="DDEV_COMMAND_FAILED")


class ConfigReadError(ApplicationError):
    """Raised when a project's .ddev/config.yaml cannot be read or parsed."""

    def __init__(self, message: str = "Project configuration unreadable") -> None:
        super().__init__(message, code="DDEV_CONFIG_UNREADABLE")

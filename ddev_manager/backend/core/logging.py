"""
Logging Setup.

structlog over the stdlib logging tree, configured from
config/settings/logging.yaml. Every module gets its logger from
``get_logger``; nothing builds handlers of its own.

A JSON record carries:
    timestamp, level, logger, event   - the basics
    func_name, lineno                 - call site
    service                           - service_id from application.yaml
    source                            - web, cli, realtime, ddev or internal
    request_id, frontend, method, path - bound per request by the middleware
    plus every key passed in ``extra``, lifted to the top level

ddev output attached to a record (``stdout``, ``stderr``, ``output``) is
cut to MAX_OUTPUT_CHARS so a noisy ``ddev start`` does not flood the file.

Usage:
    from ddev_manager.backend.core.logging import get_logger, setup_logging

    setup_logging(level="DEBUG", format_type="console")
    logger = get_logger(__name__)
    logger.info("Project started", extra={"project": "mysite"})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

from ddev_manager.backend.core.config import get_app_config, resolve_project_path

VALID_SOURCES = frozenset({
    "web",
    "cli",
    "api",
    "realtime",
    "ddev",
    "internal",
    "unknown",
})
"""Values used for the ``source`` field. Callers set it explicitly."""

MAX_OUTPUT_CHARS = 4000
_OUTPUT_FIELDS = ("stdout", "stderr", "output")

# Libraries whose INFO/DEBUG chatter drowns out ours
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "multipart", "python_multipart", "watchfiles")


def _lift_extra(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Merge the ``extra`` mapping into the record, without clobbering bound keys."""
    extra = event_dict.pop("extra", None)
    if isinstance(extra, dict):
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    elif extra is not None:
        event_dict["extra"] = extra
    return event_dict


def _clip_output(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    for key in _OUTPUT_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > MAX_OUTPUT_CHARS:
            event_dict[key] = f"{value[:MAX_OUTPUT_CHARS]}... [{len(value) - MAX_OUTPUT_CHARS} chars truncated]"
    return event_dict


def _stamp_service(service_id: str) -> Processor:
    def add_service(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_id)
        return event_dict

    return add_service


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging.

    Arguments override the matching logging.yaml values; ``None`` keeps the
    file's setting. Calling again replaces the root handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console'
        enable_console: Write to stdout
        enable_file_logging: Write JSONL to the rotating file
    """
    app_config = get_app_config()
    settings = app_config.logging
    handlers = settings.handlers

    level_name = (level or settings.level).upper()
    render_console = (format_type or settings.format) == "console"
    to_console = handlers.console.enabled if enable_console is None else enable_console
    to_file = handlers.file.enabled if enable_file_logging is None else enable_file_logging

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _lift_extra,
        _stamp_service(app_config.application.service_id),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        _clip_output,
    ]

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared,
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if to_console:
        stream = logging.StreamHandler(sys.stdout)
        if render_console:
            stream.setFormatter(structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=True),
                foreign_pre_chain=shared,
            ))
        else:
            stream.setFormatter(json_formatter)
        root.addHandler(stream)

    if to_file:
        log_path = resolve_project_path(handlers.file.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=handlers.file.max_bytes,
            backupCount=handlers.file.backup_count,
            encoding="utf-8",
        )
        rotating.setFormatter(json_formatter)
        root.addHandler(rotating)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Structlog logger for ``name`` (normally ``__name__``)."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit ``source`` field.

    For code that runs outside an HTTP request: the realtime channel and
    the terminal client.

    Raises:
        AttributeError: If ``level`` is not a logger method
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)

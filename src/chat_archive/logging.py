"""Structured logging for chat_archive.

Events are snake_case names with keyword context. They render as JSON lines
or as console output depending on LoggingSettings. While an uploaded file is
being imported, its name is bound to every event through structlog's
context variables.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from chat_archive.config import LoggingSettings

__all__ = [
    "configure_logging",
    "file_context",
    "get_logger",
]

_PACKAGE_LOGGER = "chat_archive"


def _renderer(json_output: bool) -> Any:
    if json_output:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog and the package's stdlib logger.

    Safe to call again; the previous handler is replaced.

    Args:
        settings: Level and output format (read from the environment if omitted)
        add_timestamp: If True, add ISO timestamp to log entries
    """
    settings = settings or LoggingSettings()
    level = logging.getLevelNamesMapping().get(settings.level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.UnicodeDecoder(),
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))
    processors.append(_renderer(settings.json_output))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Logger name (usually __name__ of the calling module)

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)


@contextmanager
def file_context(file_name: str) -> Iterator[None]:
    """Bind ``file`` to every event logged while one upload is processed."""
    with structlog.contextvars.bound_contextvars(file=file_name):
        yield


_configured = False


def _ensure_configured() -> None:
    """Configure from the environment the first time the module is imported."""
    global _configured
    if not _configured:
        configure_logging()
        _configured = True


_ensure_configured()

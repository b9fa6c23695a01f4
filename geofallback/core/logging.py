"""Logging configuration module."""

from enum import Enum
from logging import (
    CRITICAL,
    DEBUG,
    ERROR,
    INFO,
    WARNING,
    Handler,
    Logger,
    StreamHandler,
    getLogger,
)
from typing import Any, Protocol, cast

import structlog
from structlog import dev, processors, stdlib
from structlog.processors import JSONRenderer, TimeStamper, dict_tracebacks
from structlog.stdlib import BoundLogger

# Define log levels
LOG_LEVELS: dict[str, int] = {
    "debug": DEBUG,
    "info": INFO,
    "warning": WARNING,
    "error": ERROR,
    "critical": CRITICAL,
}


class Severity(str, Enum):
    """Severity of a message handed to a log sink."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def configure_logging(
    testing: bool = False,
    level: str | None = None,
    json_logs: bool | None = None,
) -> None:
    """Configure structured logging for the package.

    Args:
        testing: Whether the package is running in test mode
        level: Log level name, defaults to ``settings.LOG_LEVEL``
        json_logs: Render JSON lines, defaults to ``settings.JSON_LOGS``
    """
    if level is None or json_logs is None:
        from geofallback.core.config import settings

        level = level or settings.LOG_LEVEL
        json_logs = settings.JSON_LOGS if json_logs is None else json_logs

    log_level = LOG_LEVELS.get(level.lower(), INFO)
    use_json = json_logs and not testing

    # Configure root logger
    root_logger: Logger = getLogger()
    root_logger.setLevel(log_level)

    # Create and configure package logger
    package_logger: Logger = getLogger("geofallback")
    package_logger.setLevel(log_level)

    # Create handler
    handler: Handler = StreamHandler()
    handler.setLevel(log_level)

    # Define shared processors
    shared_processors = [
        stdlib.add_logger_name,
        stdlib.add_log_level,
        stdlib.PositionalArgumentsFormatter(),
        TimeStamper(fmt="%Y-%m-%d %H:%M:%S.%f"),
        dict_tracebacks,
    ]

    # Configure structlog
    structlog.configure(
        processors=[
            stdlib.filter_by_level,
            *shared_processors,
            processors.format_exc_info,
            JSONRenderer() if use_json else processors.KeyValueRenderer(),
        ],
        context_class=dict,
        logger_factory=stdlib.LoggerFactory(),
        wrapper_class=stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure handler formatter
    formatter = stdlib.ProcessorFormatter(
        processor=processors.JSONRenderer() if use_json else dev.ConsoleRenderer(),
        foreign_pre_chain=shared_processors,
    )
    handler.setFormatter(formatter)

    # Clear existing handlers to prevent duplicates
    root_logger.handlers = []
    package_logger.handlers = []

    root_logger.addHandler(handler)


def get_logger(channel: str | None = None) -> BoundLogger:
    """Get a configured logger instance.

    Args:
        channel: Optional channel name to bind to the logger

    Returns:
        A structured logger instance.
    """
    initial = {"channel": channel} if channel else {}
    return cast(BoundLogger, structlog.get_logger("geofallback", **initial))


class LogSink(Protocol):
    """Receives the diagnostics produced while resolving a query."""

    def log(self, message: str, severity: Severity | str, **context: Any) -> None:
        ...


class StructlogSink:
    """Log sink that writes to a structlog logger bound to a channel."""

    def __init__(
        self, channel: str = "geocoder", logger: BoundLogger | None = None
    ) -> None:
        self.channel = channel
        self._logger = logger if logger is not None else get_logger(channel)

    def log(self, message: str, severity: Severity | str, **context: Any) -> None:
        """Write ``message`` at ``severity``.

        Raises:
            ValueError: If ``severity`` is not a known log level
        """
        level = Severity(severity.lower())
        getattr(self._logger, level.value)(message, **context)

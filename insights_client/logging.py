"""femtologging helpers for the Insights client.

Messages are formatted with percent-style interpolation before they reach
femtologging, which only accepts pre-formatted strings.

Example:
>>> from insights_client.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "uploaded %d bytes", 512)

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger

LOG_LEVEL_ENV = "INSIGHTS_LOG_LEVEL"
_DEFAULT_LEVEL = "INFO"


class LogLevel(enum.StrEnum):
    """Log levels understood by femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Return the upper-cased level and whether the input was rejected.

    Unknown or empty input falls back to ``INFO``.
    """
    if not level:
        return (_DEFAULT_LEVEL, True)
    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)
    return (_DEFAULT_LEVEL, True)


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Configure femtologging's root handler.

    Parameters
    ----------
    level : str | None
        Raw log level, typically from ``--log-level`` or ``INSIGHTS_LOG_LEVEL``.
    force : bool, optional
        Whether to replace an existing handler configuration.

    Returns
    -------
    tuple[str, bool]
        The applied level and a flag set when ``level`` was invalid.

    """
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


class _SupportsLog(typ.Protocol):
    """Minimal femtologging logger interface."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _emit(
    logger: _SupportsLog,
    level: str,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    message = template % args if args else template
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_debug(logger: _SupportsLog, template: str, *args: object) -> None:
    """Log a DEBUG message with percent-style formatting."""
    _emit(logger, "DEBUG", template, args, None)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message with percent-style formatting."""
    _emit(logger, "INFO", template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting."""
    _emit(logger, "WARNING", template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the record.

    """
    _emit(logger, "ERROR", template, args, exc_info)


__all__ = [
    "LOG_LEVEL_ENV",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "normalize_log_level",
]

"""Structured log events for imports and connector logs.

Events are emitted through femtologging as ``[event] key=value`` messages so
log aggregators can parse them: INFO for progress, ERROR for failures.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from insights_client.errors import (
    GraphConsumedError,
    InsightsAPIError,
    InsightsConfigError,
)
from insights_client.logging import get_logger, log_error, log_info

if typ.TYPE_CHECKING:
    import datetime as dt

    from insights_client.models import ConnectorLogLevel

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class ImportEventType(enum.StrEnum):
    """Structured log event types."""

    IMPORT_STARTED = "import.started"
    PAYLOAD_BUILT = "import.payload_built"
    IMPORT_COMPLETED = "import.completed"
    IMPORT_FAILED = "import.failed"
    CONNECTOR_LOG_SENT = "connector_log.sent"


class ErrorCategory(enum.StrEnum):
    """Failure classes used for alert routing."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    CONFIGURATION = "configuration"
    SOURCE_FAILURE = "source_failure"


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Classify an import failure.

    Server errors, timeouts, and network failures are transient; other HTTP
    errors are client errors. Anything raised outside the client's own error
    hierarchy came from a caller-supplied source.
    """
    if isinstance(exc, InsightsAPIError):
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR
    if isinstance(exc, InsightsConfigError | GraphConsumedError):
        return ErrorCategory.CONFIGURATION
    return ErrorCategory.SOURCE_FAILURE


@dataclasses.dataclass(frozen=True, slots=True)
class ImportRunContext:
    """Shared context for one upload."""

    source_id: int
    started_at: dt.datetime


class ImportEventLogger:
    """Emit structured import events."""

    def log_import_started(self, context: ImportRunContext) -> None:
        """Log the start of an upload."""
        log_info(
            logger,
            "[%s] source_id=%d started_at=%s",
            ImportEventType.IMPORT_STARTED,
            context.source_id,
            context.started_at.isoformat(),
        )

    def log_payload_built(self, context: ImportRunContext, payload_bytes: int) -> None:
        """Log the compressed payload size before transmission."""
        log_info(
            logger,
            "[%s] source_id=%d payload_bytes=%d",
            ImportEventType.PAYLOAD_BUILT,
            context.source_id,
            payload_bytes,
        )

    def log_import_completed(
        self, context: ImportRunContext, duration: dt.timedelta
    ) -> None:
        """Log a successful upload."""
        log_info(
            logger,
            "[%s] source_id=%d duration_seconds=%.3f",
            ImportEventType.IMPORT_COMPLETED,
            context.source_id,
            duration.total_seconds(),
        )

    def log_import_failed(
        self,
        context: ImportRunContext,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a failed upload with its error category."""
        log_error(
            logger,
            "[%s] source_id=%d duration_seconds=%.3f error_type=%s "
            "error_category=%s error_message=%s",
            ImportEventType.IMPORT_FAILED,
            context.source_id,
            duration.total_seconds(),
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_connector_log_sent(
        self, source_id: int, level: ConnectorLogLevel
    ) -> None:
        """Log delivery of a connector log record."""
        log_info(
            logger,
            "[%s] source_id=%d level=%s",
            ImportEventType.CONNECTOR_LOG_SENT,
            source_id,
            level,
        )


__all__ = [
    "ErrorCategory",
    "ImportEventLogger",
    "ImportEventType",
    "ImportRunContext",
    "categorize_error",
]

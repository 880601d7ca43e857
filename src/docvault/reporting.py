"""Error reporting passed explicitly into handlers and services.

Handlers never reach for a global notifier; the app factory puts a reporter
on ``app.state`` and the ``get_reporter`` dependency hands it out.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from fastapi import Request

from docvault.exceptions import AppError, ErrorSeverity

LEVEL_BY_SEVERITY: dict[ErrorSeverity, int] = {
    ErrorSeverity.LOW: logging.INFO,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class ErrorReporter(Protocol):
    def report(self, error: AppError, **context: Any) -> None: ...

    def warn(self, message: str, **context: Any) -> None: ...


class LoggingErrorReporter:
    """Writes AppErrors to a stdlib logger, picking the level from severity."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("docvault.errors")

    def report(self, error: AppError, **context: Any) -> None:
        level = LEVEL_BY_SEVERITY.get(error.severity, logging.ERROR)
        cause = error.original_error
        exc_info = (type(cause), cause, cause.__traceback__) if cause is not None else None
        extra = {"error_code": str(error.code), "severity": str(error.severity), **context}
        self.logger.log(level, "%s: %s", error.code, error.user_message, exc_info=exc_info, extra=extra)
        error.reported = True

    def warn(self, message: str, **context: Any) -> None:
        self.logger.warning(message, extra=context)


def get_reporter(request: Request) -> ErrorReporter:
    reporter = getattr(request.app.state, "reporter", None)
    if reporter is None:
        reporter = LoggingErrorReporter()
        request.app.state.reporter = reporter
    return reporter


__all__ = ["ErrorReporter", "LoggingErrorReporter", "LEVEL_BY_SEVERITY", "get_reporter"]

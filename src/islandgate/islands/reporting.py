"""Error-observability hand-off for deferred failures."""

from __future__ import annotations

import logging
from typing import Protocol

_logger = logging.getLogger(__name__)


class ErrorReporter(Protocol):
    def report(self, error: Exception) -> None:
        ...


class LoggingErrorReporter:
    """Default reporter: a WARNING with the traceback, nothing user-visible."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def report(self, error: Exception) -> None:
        self._logger.warning("Deferred activation failed: %s", error, exc_info=error)


def safe_report(reporter: ErrorReporter, error: Exception) -> None:
    """Report *error*; a failing reporter is logged and otherwise ignored."""
    try:
        reporter.report(error)
    except Exception:
        _logger.debug("Error reporter failed", exc_info=True)

"""
Standard library bridge.

DispatchHandler is a logging.Handler that turns each stdlib LogRecord into a
LogEntry and hands it to a Dispatcher, so third-party code logging through
`logging` reaches the same loggers:

    logging.getLogger("vendor").addHandler(DispatchHandler(category="vendor"))
"""

import logging
from datetime import datetime, timezone

from logroute.core import Dispatcher
from logroute.exceptions import LogEntryError
from logroute.records import LogEntry, Priority

# stdlib level floor → priority, highest first
LEVEL_MAP: tuple[tuple[int, Priority], ...] = (
    (logging.CRITICAL, Priority.CRITICAL),
    (logging.ERROR, Priority.ERROR),
    (logging.WARNING, Priority.WARNING),
    (logging.INFO, Priority.INFO),
)


def priority_for_level(level: int) -> Priority:
    """Map a stdlib level to a priority. Anything below INFO is DEBUG."""
    for floor, priority in LEVEL_MAP:
        if level >= floor:
            return priority
    return Priority.DEBUG


class DispatchHandler(logging.Handler):
    """
    Forwards stdlib records to a Dispatcher.

    The category defaults to the stdlib logger name. A dispatcher of None
    means the process-wide instance, resolved per record.
    """

    def __init__(
        self,
        dispatcher: Dispatcher | None = None,
        category: str | None = None,
        level: int = logging.NOTSET,
    ):
        super().__init__(level)
        self.dispatcher = dispatcher
        self.category = category

    def to_entry(self, record: logging.LogRecord) -> LogEntry:
        return LogEntry.create(
            self.format(record),
            priority=priority_for_level(record.levelno),
            category=self.category if self.category is not None else record.name,
            date=datetime.fromtimestamp(record.created, tz=timezone.utc),
            logger_name=record.name,
            module=record.module,
            function=record.funcName,
            line=record.lineno,
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = self.to_entry(record)
        except LogEntryError:
            # Empty message, nothing to route
            return
        except Exception:
            self.handleError(record)
            return
        dispatcher = self.dispatcher or Dispatcher.instance()
        try:
            dispatcher.add(entry)
        except Exception:
            self.handleError(record)

"""
logroute: priority/category log dispatch.

Loggers are registered with a priority bitmask and optional categories;
each entry is routed to every logger whose filter matches it.

    import logroute
    from logroute import LogEntry, Priority

    logroute.add_logger({"logger": "echo"}, Priority.ALL)
    logroute.add(LogEntry("Cache warmed", Priority.INFO, "cache"))
"""

__version__ = "0.1.0"

from logroute.exceptions import LogException, LogEntryError
from logroute.records import LogEntry, Priority, SEVERITIES, priority_name
from logroute.keys import fingerprint
from logroute.adapters import (
    Logger,
    EchoLogger,
    FormattedTextLogger,
    W3CLogger,
    DatabaseLogger,
)
from logroute.routing import LookupRecord, LookupTable
from logroute.registry import ConfigurationRegistry
from logroute.config import DispatchConfig, LoggerSpec
from logroute.core import Dispatcher
from logroute.bridge import DispatchHandler


def get_instance() -> Dispatcher:
    return Dispatcher.instance()


def set_instance(instance: Dispatcher | None) -> None:
    Dispatcher.set_instance(instance)


def add_logger(options, priorities=Priority.ALL, categories=None) -> str:
    """Register a logger on the process-wide dispatcher."""
    return Dispatcher.instance().add_logger(options, priorities, categories)


def add(entry, priority=Priority.INFO, category="", date=None) -> None:
    """Route an entry (or a message string) through the process-wide dispatcher."""
    Dispatcher.instance().add(entry, priority, category, date)


__all__ = [
    "__version__",
    "LogException",
    "LogEntryError",
    "LogEntry",
    "Priority",
    "SEVERITIES",
    "priority_name",
    "fingerprint",
    "Logger",
    "EchoLogger",
    "FormattedTextLogger",
    "W3CLogger",
    "DatabaseLogger",
    "LookupRecord",
    "LookupTable",
    "ConfigurationRegistry",
    "DispatchConfig",
    "LoggerSpec",
    "Dispatcher",
    "DispatchHandler",
    "get_instance",
    "set_instance",
    "add_logger",
    "add",
]

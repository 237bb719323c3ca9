"""
Legacy entry adapter.

Older call sites hand the dispatcher a loosely-typed mapping instead of a
LogEntry:

    {"c-ip": "127.0.0.1", "status": "deprecated", "level": Priority.DEBUG,
     "comment": "Test Entry", "foo": "bar"}

The input is classified once, here, into LegacyMapping, LegacyEntry or
LegacyInvalid. Nothing past this module inspects raw legacy shapes.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from logroute.records import LogEntry, Priority

# Legacy key → LogEntry field. Every other key is kept as an extra field.
MESSAGE_KEY = "comment"
PRIORITY_KEY = "level"
CATEGORY_KEY = "status"
CLIENT_IP_KEY = "c-ip"


@dataclass(frozen=True)
class LegacyMapping:
    data: dict[str, Any] = field(default_factory=dict)

    def to_entry(self) -> LogEntry:
        """
        Translate to a LogEntry.

        A missing level means DEBUG. An empty or missing comment raises
        LogEntryError like any other empty message.
        """
        data = dict(self.data)
        message = data.pop(MESSAGE_KEY, "")
        priority = data.pop(PRIORITY_KEY, Priority.DEBUG)
        category = data.pop(CATEGORY_KEY, "")
        extra: dict[str, Any] = {}
        if CLIENT_IP_KEY in data:
            extra["clientIP"] = data.pop(CLIENT_IP_KEY)
        extra.update(data)
        return LogEntry(
            message=message,
            priority=_legacy_priority(priority),
            category=category or "",
            extra=extra,
        )


@dataclass(frozen=True)
class LegacyEntry:
    entry: LogEntry

    def to_entry(self) -> LogEntry:
        return self.entry


@dataclass(frozen=True)
class LegacyInvalid:
    value: Any = None


LegacyInput = Union[LegacyMapping, LegacyEntry, LegacyInvalid]


def classify(value: Any) -> LegacyInput:
    """Resolve an arbitrary legacy value into one of the three shapes."""
    if isinstance(value, LogEntry):
        return LegacyEntry(value)
    if isinstance(value, Mapping):
        return LegacyMapping({str(k): v for k, v in value.items()})
    return LegacyInvalid(value)


def _legacy_priority(value: Any) -> int:
    if isinstance(value, str):
        try:
            return Priority.from_name(value)
        except ValueError:
            return Priority.INFO
    return value

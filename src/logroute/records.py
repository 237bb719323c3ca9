"""
Log entries and priority definitions.

Priorities are independent bits so that logger filters can OR several of
them together. An entry itself always carries exactly one severity.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntFlag
from typing import Any, Iterable

from logroute.exceptions import LogEntryError


class Priority(IntFlag):
    """Severity scale. One bit per level, ALL is the union of the eight."""
    EMERGENCY = 1
    ALERT = 2
    CRITICAL = 4
    ERROR = 8
    WARNING = 16
    NOTICE = 32
    INFO = 64
    DEBUG = 128
    ALL = EMERGENCY | ALERT | CRITICAL | ERROR | WARNING | NOTICE | INFO | DEBUG

    @classmethod
    def from_name(cls, name: str) -> "Priority":
        """Resolve a priority from its name, case-insensitive."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown priority '{name}'. "
                f"Valid priorities: {', '.join(SEVERITY_NAMES.values())}, ALL"
            )

    @classmethod
    def from_value(cls, value: "int | str | Iterable[int | str]") -> "Priority":
        """
        Build a filter mask from an int, a name, or a list of either.

        "ALL", 24 and ["ERROR", "WARNING"] are all valid inputs.
        """
        if isinstance(value, bool):
            raise TypeError("Expected int, str or list for priority, got bool")
        if isinstance(value, int):
            return cls(value & cls.ALL)
        if isinstance(value, str):
            return cls.from_name(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            mask = cls(0)
            for item in value:
                mask |= cls.from_value(item)
            return mask
        raise TypeError(f"Expected int, str or list for priority, got {type(value).__name__}")

    @classmethod
    def coerce(cls, value: Any) -> "Priority":
        """
        Lenient from_value() for registration: never raises.

        None (and bool, or any other type) means ALL, ints are masked to the
        eight severities, unknown names contribute nothing.
        """
        if value is None or isinstance(value, bool):
            return cls.ALL
        if isinstance(value, int):
            return cls(value & cls.ALL)
        if isinstance(value, str):
            try:
                return cls.from_name(value)
            except ValueError:
                return cls(0)
        if isinstance(value, (list, tuple, set, frozenset)):
            mask = cls(0)
            for item in value:
                if item is not None and not isinstance(item, bool):
                    mask |= cls.coerce(item)
            return mask
        return cls.ALL


SEVERITIES: tuple[Priority, ...] = (
    Priority.EMERGENCY,
    Priority.ALERT,
    Priority.CRITICAL,
    Priority.ERROR,
    Priority.WARNING,
    Priority.NOTICE,
    Priority.INFO,
    Priority.DEBUG,
)

# Display names for single severities: bit value → name
SEVERITY_NAMES: dict[int, str] = {int(p): p.name for p in SEVERITIES}


def priority_name(value: int) -> str:
    """Display name for a single severity. Falls back to the numeric string."""
    return SEVERITY_NAMES.get(int(value), str(value))


def normalize_category(category: str | None) -> str:
    return str(category or "").strip().lower()


def _coerce_date(date: datetime | None) -> datetime:
    if date is None:
        return datetime.now(timezone.utc)
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


@dataclass(frozen=True)
class LogEntry:
    """
    Immutable log entry. Created by callers, routed by the Dispatcher.

    Extra named fields live in `extra` and are readable as attributes,
    so a legacy entry carrying a client address exposes `entry.clientIP`.
    """
    message: str
    priority: Priority = Priority.INFO
    category: str = ""
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    extra: dict[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        message = str(self.message) if self.message is not None else ""
        if not message.strip():
            raise LogEntryError("Log entry message cannot be empty")

        # Anything that is not exactly one severity falls back to INFO
        try:
            priority = Priority(self.priority)
        except (ValueError, TypeError):
            priority = Priority.INFO
        if priority not in SEVERITIES:
            priority = Priority.INFO

        object.__setattr__(self, "message", message)
        object.__setattr__(self, "priority", priority)
        object.__setattr__(self, "category", normalize_category(self.category))
        object.__setattr__(self, "date", _coerce_date(self.date))
        object.__setattr__(self, "extra", dict(self.extra))

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails
        extra = self.__dict__.get("extra", {})
        if name in extra:
            return extra[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    @classmethod
    def create(
        cls,
        message: str,
        priority: int = Priority.INFO,
        category: str | None = "",
        date: datetime | None = None,
        **extra: Any,
    ) -> "LogEntry":
        """Factory method with auto-timestamp and keyword extras."""
        return cls(
            message=message,
            priority=priority,
            category=category or "",
            date=_coerce_date(date),
            extra=extra,
        )

    @property
    def priority_name(self) -> str:
        return priority_name(self.priority)

    def get(self, name: str, default: Any = None) -> Any:
        """Read a core or extra field by name."""
        if name in ("message", "priority", "category", "date"):
            return getattr(self, name)
        return self.extra.get(name, default)

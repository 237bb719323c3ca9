"""
Dispatcher: process-wide log routing.

One Dispatcher holds every registered logger configuration, the lookup table
of their filters, and the lazily created logger instances. Entries are
routed to every logger whose priority mask and category set match.

The process-wide instance is created on first use and can be replaced or
cleared with set_instance(), which is how tests isolate themselves.
"""

import threading
import warnings
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from logroute.adapters import Logger
from logroute.config import DispatchConfig
from logroute.legacy import LegacyInvalid, classify
from logroute.records import SEVERITIES, LogEntry, Priority, priority_name
from logroute.registry import ConfigurationRegistry
from logroute.routing import LookupRecord, LookupTable


class Dispatcher:
    """
    Singleton log dispatcher.

    Usage:
        log = Dispatcher.instance()
        log.add_logger({"logger": "formattedtext", "text_file": "php.log"},
                       Priority.ERROR | Priority.WARNING, ["deprecated"])
        log.add(LogEntry("Old API called", Priority.WARNING, "deprecated"))
    """

    _instance: Optional["Dispatcher"] = None
    _lock = threading.Lock()

    # Re-export priorities for convenience: Dispatcher.DEBUG, etc.
    EMERGENCY = Priority.EMERGENCY
    ALERT = Priority.ALERT
    CRITICAL = Priority.CRITICAL
    ERROR = Priority.ERROR
    WARNING = Priority.WARNING
    NOTICE = Priority.NOTICE
    INFO = Priority.INFO
    DEBUG = Priority.DEBUG
    ALL = Priority.ALL

    def __init__(self, registry: ConfigurationRegistry | None = None) -> None:
        self._registry = registry if registry is not None else ConfigurationRegistry()
        self._lookup = LookupTable()
        self._queue: list[LogEntry] = []
        self._mutex = threading.Lock()

    # ── Singleton ─────────────────────────────────────────────────

    @classmethod
    def instance(cls) -> "Dispatcher":
        """Get or create the process-wide instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    get_instance = instance

    @classmethod
    def set_instance(cls, instance: Optional["Dispatcher"]) -> None:
        """
        Replace the process-wide instance. None clears it, so the next
        instance() call builds a fresh, empty one. Loggers held by the
        replaced instance are closed.
        """
        with cls._lock:
            previous = cls._instance
            cls._instance = instance
        if previous is not None and previous is not instance:
            previous.close()

    @classmethod
    def reset(cls) -> None:
        """Clear the process-wide instance. For testing."""
        cls.set_instance(None)

    # ── Registration ──────────────────────────────────────────────

    def add_logger(
        self,
        options: Mapping[str, Any],
        priorities: int | str | Iterable[int | str] = Priority.ALL,
        categories: str | Iterable[str] | None = None,
    ) -> str:
        """
        Register a logger configuration and return its fingerprint.

        categories may be a single string or a sequence; they are lowercased.
        priorities never raise: None means ALL and unknown names are dropped.
        Registering the same options again keeps one configuration and
        replaces its priorities and categories.
        """
        mask = Priority.coerce(priorities)
        with self._mutex:
            fp = self._registry.store(options)
            self._lookup.set(fp, mask, categories)
        return fp

    def configure(self, config: Any) -> list[str]:
        """
        Register every logger in a DispatchConfig (or a dict / YAML-parsed
        mapping of the same shape). Returns the fingerprints, in order.
        """
        if not isinstance(config, DispatchConfig):
            config = DispatchConfig.from_dict(config)
        return [
            self.add_logger(spec.options, spec.priority_mask, spec.categories)
            for spec in config.loggers
        ]

    # ── Routing ───────────────────────────────────────────────────

    def find_loggers(self, priority: int, category: str | None = None) -> list[str]:
        """
        Fingerprints of loggers matching a priority and category, in
        registration order.

        A logger registered without categories matches every category.
        An empty or None category matches every logger's category set.
        """
        return self._lookup.find(int(priority), category)

    def add(
        self,
        entry: LogEntry | str,
        priority: int = Priority.INFO,
        category: str = "",
        date: datetime | None = None,
    ) -> None:
        """
        Route an entry to every matching logger.

        A plain string is wrapped in a LogEntry using priority, category
        and date first.

        Raises:
            LogException: If a matching logger's type cannot be instantiated.
        """
        if not isinstance(entry, LogEntry):
            entry = LogEntry.create(entry, priority=priority, category=category, date=date)
        self.add_log_entry(entry)

    def add_log_entry(self, entry: LogEntry) -> None:
        """Hand an entry to each matched logger, instantiating as needed."""
        for logger in self._resolve(entry):
            logger.process(entry)

    def _resolve(self, entry: LogEntry) -> list[Logger]:
        with self._mutex:
            return [
                self._registry.get_logger(fp)
                for fp in self._lookup.find(int(entry.priority), entry.category)
            ]

    def add_entry(self, entry: Any) -> bool:
        """
        Deprecated: accept a legacy mapping or a LogEntry.

        Mapping keys: c-ip → clientIP, status → category, level → priority
        (DEBUG if absent), comment → message; others are kept as extras.
        Returns False, without raising, for any other input.
        """
        warnings.warn(
            "Dispatcher.add_entry() is deprecated, use Dispatcher.add()",
            DeprecationWarning,
            stacklevel=2,
        )
        shape = classify(entry)
        if isinstance(shape, LegacyInvalid):
            return False
        log_entry = shape.to_entry()
        self._queue.append(log_entry)
        self.add_log_entry(log_entry)
        return True

    # ── Introspection ─────────────────────────────────────────────

    @property
    def registry(self) -> ConfigurationRegistry:
        return self._registry

    @property
    def configurations(self) -> dict[str, dict[str, Any]]:
        return self._registry.configurations

    @property
    def lookup(self) -> dict[str, LookupRecord]:
        return self._lookup.records

    @property
    def loggers(self) -> dict[str, Logger]:
        return self._registry.loggers

    @property
    def queue(self) -> list[LogEntry]:
        """Entries accepted through add_entry(), oldest first."""
        return list(self._queue)

    def status(self) -> dict:
        """Current registrations, filters and instantiation state."""
        registrations = self._registry.describe()
        return {
            "logger_count": len(self._lookup),
            "instantiated_count": len(self._registry.loggers),
            "loggers": {
                fp: {
                    **registrations.get(fp, {}),
                    "priorities": [
                        priority_name(p) for p in SEVERITIES
                        if record.priorities & p
                    ],
                    "categories": sorted(record.categories),
                }
                for fp, record in self._lookup.records.items()
            },
            "types": self._registry.list_types(),
        }

    # ── Cleanup ───────────────────────────────────────────────────

    def flush(self) -> None:
        """Flush all instantiated loggers."""
        self._registry.flush()

    def close(self) -> None:
        """Close all instantiated loggers. Call during shutdown."""
        with self._mutex:
            self._registry.close()

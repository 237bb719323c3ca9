"""
Configuration registry.

Holds every registered logger configuration keyed by fingerprint, and the
type table that maps a `logger` option value to a Logger class. Logger
instances are created lazily on first use and cached by fingerprint.

Usage:
    registry = ConfigurationRegistry()
    fp = registry.store({"logger": "echo"})
    registry.get_logger(fp).process(entry)

Custom types register either a class or a "module.Class" path that is
imported on first use:
    registry.register_type("syslog", SyslogLogger)
    registry.register_type_path("queue", "myapp.logging.QueueLogger")
"""

from __future__ import annotations

import importlib
from typing import Any, Mapping

from logroute.adapters import (
    Logger,
    EchoLogger,
    FormattedTextLogger,
    W3CLogger,
    DatabaseLogger,
)
from logroute.exceptions import LogException
from logroute.keys import fingerprint

# Option key selecting the logger class, and its value when absent
TYPE_KEY = "logger"
DEFAULT_TYPE = "formattedtext"

BUILTIN_TYPES: dict[str, type[Logger]] = {
    "echo": EchoLogger,
    "formattedtext": FormattedTextLogger,
    "w3c": W3CLogger,
    "database": DatabaseLogger,
}


class ConfigurationRegistry:
    """
    fingerprint → options, with lazy Logger instantiation and caching.

    Configurations are never removed. Storing identical options twice
    keeps the first copy.
    """

    def __init__(self, register_builtins: bool = True) -> None:
        self._configurations: dict[str, dict[str, Any]] = {}
        self._loggers: dict[str, Logger] = {}
        self._types: dict[str, type[Logger] | str] = {}  # name → class or "module.Class"
        if register_builtins:
            register_defaults(self)

    # ── Type table ────────────────────────────────────────────────

    def register_type(self, name: str, cls: type[Logger]) -> None:
        """Register a Logger class under a type name."""
        self._types[name.lower()] = cls

    def register_type_path(self, name: str, class_path: str) -> None:
        """Register a "module.Class" path, imported on first instantiation."""
        self._types[name.lower()] = class_path

    def has_type(self, name: str) -> bool:
        return name.lower() in self._types

    def list_types(self) -> list[str]:
        return sorted(self._types)

    def resolve_type(self, name: str) -> type[Logger]:
        """
        Resolve a type name to its Logger class.

        Raises:
            LogException: If the type is not registered, or its class path
                cannot be imported.
        """
        key = str(name).lower()
        entry = self._types.get(key)
        if entry is None:
            raise LogException(
                f"Unable to create a logger instance: unknown logger type '{name}'. "
                f"Available: {', '.join(self.list_types()) or 'none'}",
                logger_type=str(name),
            )
        if isinstance(entry, str):
            module_path, class_name = entry.rsplit(".", 1)
            try:
                module = importlib.import_module(module_path)
                cls = getattr(module, class_name)
            except (ImportError, AttributeError) as exc:
                raise LogException(
                    f"Unable to create a logger instance: cannot load '{entry}' "
                    f"for logger type '{name}'",
                    logger_type=str(name),
                ) from exc
            self._types[key] = cls
            return cls
        return entry

    # ── Configurations ────────────────────────────────────────────

    def store(self, options: Mapping[str, Any]) -> str:
        """Store a configuration and return its fingerprint."""
        fp = fingerprint(options)
        if fp not in self._configurations:
            self._configurations[fp] = dict(options)
        return fp

    def options(self, fp: str) -> dict[str, Any]:
        """Stored options for a fingerprint (copy). KeyError if unknown."""
        return dict(self._configurations[fp])

    def __contains__(self, fp: object) -> bool:
        return fp in self._configurations

    def __len__(self) -> int:
        return len(self._configurations)

    @property
    def configurations(self) -> dict[str, dict[str, Any]]:
        return {fp: dict(opts) for fp, opts in self._configurations.items()}

    # ── Instances ─────────────────────────────────────────────────

    def get_logger(self, fp: str) -> Logger:
        """
        Cached Logger for a fingerprint, instantiated on first access.

        Raises:
            KeyError: If no configuration is stored under the fingerprint.
            LogException: If the configuration's logger type is unknown.
        """
        logger = self._loggers.get(fp)
        if logger is not None:
            return logger

        options = self._configurations[fp]
        cls = self.resolve_type(options.get(TYPE_KEY) or DEFAULT_TYPE)
        logger = cls(dict(options))
        self._loggers[fp] = logger
        return logger

    @property
    def loggers(self) -> dict[str, Logger]:
        """Instantiated loggers so far (read-only copy)."""
        return dict(self._loggers)

    def flush(self) -> None:
        for logger in self._loggers.values():
            logger.flush()

    def close(self) -> None:
        """Close and drop all instantiated loggers."""
        for logger in self._loggers.values():
            logger.close()
        self._loggers.clear()

    def describe(self) -> dict:
        return {
            fp: {
                "type": opts.get(TYPE_KEY) or DEFAULT_TYPE,
                "instantiated": fp in self._loggers,
            }
            for fp, opts in self._configurations.items()
        }


def register_defaults(registry: ConfigurationRegistry) -> int:
    """Register the built-in logger types. Returns count registered."""
    for name, cls in BUILTIN_TYPES.items():
        registry.register_type(name, cls)
    return len(BUILTIN_TYPES)

"""
Entry formatters.

Each built-in logger renders entries through a formatter:
  - echo:     "{PRIORITY}: {message} [{category}]"
  - template: "{DATETIME}\t{PRIORITY}\t{CATEGORY}\t{MESSAGE}" style templates
  - json:     extra fields as a JSON object for the database logger
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any

from logroute.records import LogEntry

PLACEHOLDER = re.compile(r"\{(.*?)\}")

# Rendered in place of fields the entry does not carry
MISSING = "-"


class EntryFormatter(ABC):
    """Base formatter. Transforms LogEntry → string."""

    @abstractmethod
    def format(self, entry: LogEntry) -> str: ...


class EchoFormatter(EntryFormatter):
    """
    Console line.
    Example: DEBUG: TESTING [deprecated]
    """

    def format(self, entry: LogEntry) -> str:
        line = f"{entry.priority_name}: {entry.message}"
        if entry.category:
            line += f" [{entry.category}]"
        return line


class TemplateFormatter(EntryFormatter):
    """
    Replaces {FIELD} placeholders with entry values.

    Field names are case-insensitive. Besides the entry's own and extra
    fields, DATETIME (ISO 8601), DATE, TIME and CLIENTIP are derived.
    Example: 2026-02-12T14:32:05+00:00	ERROR	payments	Card declined
    """

    def __init__(self, template: str):
        self.template = template
        self.fields = [f.upper() for f in PLACEHOLDER.findall(template)]

    def format(self, entry: LogEntry) -> str:
        values = _entry_fields(entry)
        return PLACEHOLDER.sub(
            lambda m: values.get(m.group(1).upper(), MISSING),
            self.template,
        )


class JsonFormatter(EntryFormatter):
    """Extra fields as one JSON object. Core fields have their own columns."""

    def format(self, entry: LogEntry) -> str:
        return json.dumps(
            {str(k): _serialize_value(v) for k, v in entry.extra.items()},
            default=str,
        )


def _entry_fields(entry: LogEntry) -> dict[str, str]:
    fields = {str(k).upper(): _format_value(v) for k, v in entry.extra.items()}
    fields.update({
        "MESSAGE": entry.message,
        "PRIORITY": entry.priority_name,
        "CATEGORY": entry.category or MISSING,
        "DATETIME": entry.date.isoformat(),
        "DATE": entry.date.strftime("%Y-%m-%d"),
        "TIME": entry.date.strftime("%H:%M:%S"),
    })
    fields.setdefault("CLIENTIP", MISSING)
    return fields


def _format_value(v: Any) -> str:
    if v is None or v == "":
        return MISSING
    return str(v)


def _serialize_value(v: Any) -> Any:
    """Make a value JSON-serializable."""
    if isinstance(v, (str, int, float, bool, type(None))):
        return v
    if isinstance(v, (list, tuple)):
        return [_serialize_value(i) for i in v]
    if isinstance(v, dict):
        return {str(k): _serialize_value(val) for k, val in v.items()}
    return str(v)

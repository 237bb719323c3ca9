"""
Built-in loggers (output destinations).

Every logger is constructed from its options mapping and exposes one
operation, process(entry). The `logger` key of the options selects the
class through the ConfigurationRegistry type table:

    echo           EchoLogger            stdout, one line per entry
    formattedtext  FormattedTextLogger   appends template lines to a file
    w3c            W3CLogger             formattedtext in W3C field layout
    database       DatabaseLogger        one DuckDB row per entry
"""

import re
import sys
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import duckdb

from logroute import __version__
from logroute.records import LogEntry
from logroute.formatters import (
    EntryFormatter,
    EchoFormatter,
    JsonFormatter,
    TemplateFormatter,
)


class Logger(ABC):
    """Base logger. Receives entries the Dispatcher has matched to it."""

    def __init__(self, options: Mapping[str, Any] | None = None):
        self.options = dict(options or {})

    @abstractmethod
    def process(self, entry: LogEntry) -> None:
        """Write one entry. Failures propagate to the caller of Dispatcher.add()."""
        ...

    def flush(self) -> None:
        """Flush any buffered output. Override in buffered loggers."""
        pass

    def close(self) -> None:
        """Cleanup. Override if the logger holds resources."""
        self.flush()


class EchoLogger(Logger):
    """Prints each entry to stdout."""

    def __init__(self, options: Mapping[str, Any] | None = None):
        super().__init__(options)
        self.formatter: EntryFormatter = EchoFormatter()

    def process(self, entry: LogEntry) -> None:
        print(self.formatter.format(entry), file=sys.stdout, flush=True)


class FormattedTextLogger(Logger):
    """
    Appends one formatted line per entry to a text file.

    Options:
        text_file:          file name (default error.log)
        text_file_path:     directory (default logs)
        text_entry_format:  {FIELD} template for each line

    A header describing the fields is written when the file is created.
    """

    DEFAULT_FILE = "error.log"
    DEFAULT_FORMAT = "{DATETIME}\t{PRIORITY}\t{CATEGORY}\t{MESSAGE}"

    def __init__(self, options: Mapping[str, Any] | None = None):
        super().__init__(options)
        directory = Path(self.options.get("text_file_path") or "logs")
        self.path = directory / (self.options.get("text_file") or self.DEFAULT_FILE)
        self.formatter = TemplateFormatter(
            self.options.get("text_entry_format") or self.DEFAULT_FORMAT
        )
        self._file = None
        self._lock = threading.Lock()

    def _ensure_file(self) -> None:
        """Open the file on first write, adding the header if it is new."""
        if self._file is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        is_new = not self.path.exists() or self.path.stat().st_size == 0
        self._file = open(self.path, "a", encoding="utf-8")
        if is_new:
            self._file.write(self._header())

    def _header(self) -> str:
        now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        fields = "\t".join(f.lower() for f in self.formatter.fields)
        return (
            f"#Date: {now} UTC\n"
            f"#Software: logroute {__version__}\n"
            "\n"
            f"#Fields: {fields}\n"
        )

    def process(self, entry: LogEntry) -> None:
        line = self.formatter.format(entry)
        with self._lock:
            self._ensure_file()
            self._file.write(line + "\n")

    def flush(self) -> None:
        with self._lock:
            if self._file:
                self._file.flush()

    def close(self) -> None:
        with self._lock:
            if self._file:
                self._file.close()
                self._file = None


class W3CLogger(FormattedTextLogger):
    """W3C extended log file layout: date and time in separate fields."""

    DEFAULT_FILE = "error.w3c.log"
    DEFAULT_FORMAT = "{DATE}\t{TIME}\t{PRIORITY}\t{CLIENTIP}\t{CATEGORY}\t{MESSAGE}"


_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DatabaseLogger(Logger):
    """
    Writes one row per entry to a DuckDB table.

    Options:
        db_path:   DuckDB file, or :memory: (default)
        db_table:  table name (default log_entries), created if missing
    """

    DEFAULT_TABLE = "log_entries"

    def __init__(self, options: Mapping[str, Any] | None = None):
        super().__init__(options)
        self.table = self.options.get("db_table") or self.DEFAULT_TABLE
        if not _IDENTIFIER.match(self.table):
            raise ValueError(f"Invalid table name '{self.table}'")
        self.db_path = str(self.options.get("db_path") or ":memory:")
        self.formatter = JsonFormatter()
        self._connection: duckdb.DuckDBPyConnection | None = None
        self._lock = threading.Lock()

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        """Connection, opened and schema-initialized on first use."""
        if self._connection is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._connection = duckdb.connect(self.db_path)
            self._connection.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    priority INTEGER NOT NULL,
                    message VARCHAR NOT NULL,
                    date TIMESTAMP NOT NULL,
                    category VARCHAR,
                    extra JSON
                )
                """
            )
        return self._connection

    def process(self, entry: LogEntry) -> None:
        with self._lock:
            self.connection.execute(
                f"INSERT INTO {self.table} (priority, message, date, category, extra) "
                "VALUES (?, ?, ?, ?, ?::JSON)",
                [
                    int(entry.priority),
                    entry.message,
                    entry.date.replace(tzinfo=None),
                    entry.category,
                    self.formatter.format(entry),
                ],
            )

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

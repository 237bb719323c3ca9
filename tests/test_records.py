"""
Tests for log entries and priorities.

Covers:
- Priority bit values, ALL mask, name/value resolution
- LogEntry construction, normalization and validation
- Extra fields as attributes
"""

from datetime import datetime, timezone

import pytest

from logroute.exceptions import LogEntryError
from logroute.records import LogEntry, Priority, SEVERITIES, priority_name


# ═══════════════════════════════════════════════════════════════════
#  Priority
# ═══════════════════════════════════════════════════════════════════

class TestPriority:
    def test_each_severity_is_a_distinct_bit(self):
        values = [int(p) for p in SEVERITIES]
        assert values == [1, 2, 4, 8, 16, 32, 64, 128]

    def test_all_is_union_of_severities(self):
        mask = 0
        for p in SEVERITIES:
            mask |= p
        assert Priority.ALL == mask == 255

    def test_masks_combine(self):
        mask = Priority.ERROR | Priority.WARNING
        assert mask & Priority.ERROR
        assert mask & Priority.WARNING
        assert not mask & Priority.DEBUG

    def test_all_except_debug(self):
        mask = Priority.ALL & ~Priority.DEBUG
        assert int(mask) == 127
        assert not mask & Priority.DEBUG

    def test_from_name_case_insensitive(self):
        assert Priority.from_name("debug") == Priority.DEBUG
        assert Priority.from_name("Warning") == Priority.WARNING
        assert Priority.from_name("ALL") == Priority.ALL

    def test_from_name_invalid(self):
        with pytest.raises(ValueError, match="Unknown priority"):
            Priority.from_name("verbose")

    def test_from_value_list(self):
        assert Priority.from_value(["ERROR", "warning"]) == Priority.ERROR | Priority.WARNING
        assert Priority.from_value([8, "NOTICE"]) == Priority.ERROR | Priority.NOTICE

    def test_from_value_int(self):
        assert Priority.from_value(24) == Priority.ERROR | Priority.WARNING

    def test_from_value_rejects_other_types(self):
        with pytest.raises(TypeError):
            Priority.from_value(3.5)

    def test_coerce_never_raises(self):
        assert Priority.coerce(None) == Priority.ALL
        assert Priority.coerce(True) == Priority.ALL
        assert Priority.coerce(3.5) == Priority.ALL
        assert Priority.coerce("bogus") == 0
        assert Priority.coerce(["bogus", "error", None]) == Priority.ERROR
        assert Priority.coerce(0x1FF) == Priority.ALL
        assert Priority.coerce("warning") == Priority.WARNING

    def test_priority_name(self):
        assert priority_name(Priority.DEBUG) == "DEBUG"
        assert priority_name(8) == "ERROR"
        assert priority_name(3) == "3"  # Not a single severity


# ═══════════════════════════════════════════════════════════════════
#  LogEntry
# ═══════════════════════════════════════════════════════════════════

class TestLogEntry:
    def test_defaults(self):
        entry = LogEntry("Cache warmed")
        assert entry.message == "Cache warmed"
        assert entry.priority == Priority.INFO
        assert entry.category == ""
        assert entry.date.tzinfo is not None
        assert entry.extra == {}

    def test_hashable(self):
        when = datetime(2024, 1, 1, tzinfo=timezone.utc)
        a = LogEntry("x", Priority.ERROR, "auth", when, {"clientIP": "127.0.0.1"})
        b = LogEntry("x", Priority.ERROR, "auth", when, {"clientIP": "127.0.0.1"})
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_category_lowercased(self):
        entry = LogEntry("TESTING", Priority.DEBUG, "DePrEcAtEd")
        assert entry.category == "deprecated"

    def test_empty_message_rejected(self):
        with pytest.raises(LogEntryError):
            LogEntry("")
        with pytest.raises(LogEntryError):
            LogEntry("   ")

    def test_entry_error_is_value_error(self):
        with pytest.raises(ValueError):
            LogEntry("")

    def test_composite_priority_falls_back_to_info(self):
        entry = LogEntry("x", Priority.ERROR | Priority.WARNING)
        assert entry.priority == Priority.INFO

    def test_unknown_priority_falls_back_to_info(self):
        assert LogEntry("x", 0).priority == Priority.INFO
        assert LogEntry("x", "loud").priority == Priority.INFO

    def test_naive_date_taken_as_utc(self):
        entry = LogEntry("x", date=datetime(2026, 1, 15, 10, 0, 0))
        assert entry.date == datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc)

    def test_immutable(self):
        entry = LogEntry("x")
        with pytest.raises(AttributeError):
            entry.message = "changed"

    def test_create_with_extras(self):
        entry = LogEntry.create(
            "Card declined", Priority.ERROR, "Payments",
            clientIP="10.0.0.7", order_id=42,
        )
        assert entry.category == "payments"
        assert entry.clientIP == "10.0.0.7"
        assert entry.order_id == 42
        assert entry.get("order_id") == 42
        assert entry.get("message") == "Card declined"
        assert entry.get("missing", "-") == "-"

    def test_unknown_attribute(self):
        entry = LogEntry("x")
        with pytest.raises(AttributeError):
            entry.nothing_here

    def test_priority_name_property(self):
        assert LogEntry("x", Priority.ALERT).priority_name == "ALERT"

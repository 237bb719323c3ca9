"""
Lookup table.

Maps each logger fingerprint to the filter it was registered with:
a priority bitmask and a set of categories. Matching rules:

1. Priority: record.priorities & priority != 0
2. Category: record has no categories (wildcard), OR the target category is
   empty/None, OR the target category is in the record's set
3. A fingerprint matches only if both hold

Results come back in registration order.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from logroute.records import Priority, normalize_category


@dataclass(frozen=True)
class LookupRecord:
    """Filter for one registered logger."""
    priorities: int = Priority.ALL
    categories: frozenset[str] = field(default_factory=frozenset)

    def matches(self, priority: int, category: str | None = None) -> bool:
        if not (self.priorities & priority):
            return False
        if not self.categories or not category:
            return True
        return normalize_category(category) in self.categories


def normalize_categories(categories: str | Iterable[str] | None) -> frozenset[str]:
    """Accept a single category or a sequence; lowercase, drop empties."""
    if categories is None:
        return frozenset()
    if isinstance(categories, str) or not isinstance(categories, Iterable):
        categories = [categories]
    normalized = (normalize_category(c) for c in categories)
    return frozenset(c for c in normalized if c)


class LookupTable:
    """
    Fingerprint → LookupRecord, insertion ordered.

    Re-registering a fingerprint replaces its record but keeps the
    position it was first registered at.
    """

    def __init__(self) -> None:
        self._records: dict[str, LookupRecord] = {}

    def set(
        self,
        fingerprint: str,
        priorities: int = Priority.ALL,
        categories: str | Iterable[str] | None = None,
    ) -> LookupRecord:
        """Store or overwrite the filter for a fingerprint."""
        record = LookupRecord(
            priorities=int(priorities),
            categories=normalize_categories(categories),
        )
        self._records[fingerprint] = record
        return record

    def get(self, fingerprint: str) -> LookupRecord | None:
        return self._records.get(fingerprint)

    def find(self, priority: int, category: str | None = None) -> list[str]:
        """Fingerprints whose filter matches, in registration order."""
        return [
            fp for fp, record in self._records.items()
            if record.matches(priority, category)
        ]

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    @property
    def records(self) -> dict[str, LookupRecord]:
        """Current records (read-only copy)."""
        return dict(self._records)

    def describe(self) -> dict:
        """Describe lookup state for Dispatcher.status()."""
        return {
            fp: {
                "priorities": record.priorities,
                "categories": sorted(record.categories),
            }
            for fp, record in self._records.items()
        }

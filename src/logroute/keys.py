"""
Logger configuration fingerprints.

A fingerprint identifies one logger configuration. Two option mappings with
the same keys and values produce the same fingerprint regardless of key
order, which makes registration idempotent.
"""

import hashlib
import json
from typing import Any, Mapping


def _canonical_value(value: Any) -> Any:
    """Stringify mapping keys and sort sets, recursively."""
    if isinstance(value, Mapping):
        return {str(k): _canonical_value(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        items = [_canonical_value(v) for v in value]
        return sorted(items, key=lambda v: json.dumps(v, sort_keys=True, default=str))
    if isinstance(value, (list, tuple)):
        return [_canonical_value(v) for v in value]
    return value


def canonical_options(options: Mapping[str, Any]) -> str:
    """Stable JSON encoding of an options mapping (sorted keys, no whitespace)."""
    return json.dumps(
        _canonical_value(dict(options)),
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )


def fingerprint(options: Mapping[str, Any]) -> str:
    """SHA256 of the canonical options encoding, as a hex string."""
    return hashlib.sha256(canonical_options(options).encode("utf-8")).hexdigest()

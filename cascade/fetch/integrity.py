"""Integrity tags for configuration payloads.

A tag is the SHA-256 of the payload's canonical JSON serialization: sorted
keys, compact separators, UTF-8. Structurally equal payloads always produce
the same tag regardless of key order.
"""

import hashlib
import hmac
import json
from collections.abc import Mapping
from typing import Any


def canonical_json(data: Mapping[str, Any]) -> str:
    """Serialize a mapping to canonical JSON."""
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def compute_integrity_tag(data: Mapping[str, Any]) -> str:
    """Return the 64-char hex SHA-256 tag for a configuration payload."""
    if not isinstance(data, Mapping):
        raise TypeError(f"Integrity tag requires a mapping, got {type(data).__name__}")
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()


def verify_integrity_tag(data: Mapping[str, Any], tag: str) -> bool:
    """Check a payload against a previously computed tag."""
    return hmac.compare_digest(compute_integrity_tag(data), tag.lower())

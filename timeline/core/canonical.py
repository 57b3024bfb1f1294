"""
Canonical serialization for state hashing and history export.

Replay determinism is checked by comparing canonical bytes, so every state
and event that leaves the store as JSON goes through these functions.
"""

import dataclasses
import json
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Convert a state value to canonical JSON-ready form.

    Rules:
    - dict keys sorted alphabetically (keys coerced to str)
    - tuples converted to lists
    - sets and frozensets converted to sorted lists
    - dataclass instances converted to dicts of their fields
    - recursive normalization

    Two states that compare equal produce the same canonical structure
    regardless of insertion order.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        obj = {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, dict):
        return {str(k): canonicalize(obj[k]) for k in sorted(obj.keys(), key=str)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted((canonicalize(x) for x in obj), key=repr)
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    Guarantees:
    - sort_keys=True (secondary safety)
    - separators remove whitespace
    - ensure_ascii=False keeps UTF-8 stable
    - canonical preprocessing via canonicalize()

    Raises:
        TypeError: If the value contains something JSON cannot represent
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Same as canonical_json_bytes but returns a string."""
    return canonical_json_bytes(obj).decode("utf-8")

"""
Deterministic state snapshot utilities.

Ensures equal states always produce the same bytes and hash.
"""

import hashlib
from typing import Any

from ..core.canonical import canonical_json_bytes


def serialize_state(state: Any) -> bytes:
    """
    Serialize state to deterministic bytes.

    Uses canonical JSON serialization to ensure:
    - Equal states always produce the same bytes
    - No dict ordering issues
    - No whitespace variance
    - UTF-8 stable
    """
    return canonical_json_bytes(state)


def compute_state_hash(state: Any) -> str:
    """
    Compute SHA-256 hash of state.

    Returns:
        Hex string (64 characters)
    """
    return hashlib.sha256(serialize_state(state)).hexdigest()

"""Stable issue identities.

Issue identities key the resolution ledger, so the same declared address or
observed resource ID must always produce the same hash across runs.
"""

from __future__ import annotations

import hashlib
from typing import Final

IDENTITY_HASH_LENGTH: Final[int] = 7


def identity_hash(key: str) -> str:
    """Return the first seven hex digits of the SHA-256 digest of ``key``."""

    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:IDENTITY_HASH_LENGTH]

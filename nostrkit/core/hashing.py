"""nostrkit.core.hashing

The identifier is SHA-256 over the canonical bytes. The same 32 bytes are
the message handed to the signer.
"""

from __future__ import annotations

import hashlib

DIGEST_SIZE = 32


def event_digest(serialized: bytes) -> bytes:
    """Raw 32-byte digest of a canonical serialization."""

    return hashlib.sha256(serialized).digest()


def event_id(serialized: bytes) -> str:
    """Lower-case hex identifier (64 chars)."""

    return event_digest(serialized).hex()

"""nostrkit.security.randomness

Auxiliary randomness for BIP-340 nonce derivation, as an injected capability.

Production signing draws from the OS CSPRNG. Tests pass a fixed source to
get reproducible signatures. A source that cannot deliver is fatal to the
signing call; there is no fallback to weaker entropy.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from nostrkit.core.exceptions import RandomnessUnavailableError


@runtime_checkable
class RandomnessProvider(Protocol):
    def read(self, n: int) -> bytes: ...


class SystemRandomness:
    """Reads from ``os.urandom``."""

    def read(self, n: int) -> bytes:
        try:
            data = os.urandom(n)
        except (OSError, NotImplementedError) as e:
            raise RandomnessUnavailableError(f"secure random source failed: {e}") from e
        if len(data) != n:
            raise RandomnessUnavailableError(
                f"secure random source returned {len(data)} bytes, expected {n}",
                expected=n,
                actual=len(data),
            )
        return data


@dataclass(frozen=True)
class FixedRandomness:
    """Deterministic source for tests. Returns the same bytes every call."""

    value: bytes = bytes(32)

    def read(self, n: int) -> bytes:
        if len(self.value) < n:
            raise RandomnessUnavailableError(
                f"fixed randomness holds {len(self.value)} bytes, {n} requested",
                expected=n,
                actual=len(self.value),
            )
        return self.value[:n]

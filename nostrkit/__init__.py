"""nostrkit: signed event primitives.

An event is a fixed six-slot array, hashed once, signed once.
The id is the digest; the digest is what gets signed.
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "SERIALIZATION_VERSION",
]

__version__ = "0.1.0"

# Leading slot of every canonical event array.
SERIALIZATION_VERSION = 0

"""nostrkit.core

Core primitives: canonical bytes, identifiers, the event model.

Kept import-light; ``nostrkit.core.events`` pulls in the signer and is
imported directly.
"""

from .config import Config
from .exceptions import NostrkitError
from .tags import Tag, Tags
from .time import to_unix_seconds, utc_now

__all__ = [
    "Config",
    "NostrkitError",
    "Tag",
    "Tags",
    "to_unix_seconds",
    "utc_now",
]

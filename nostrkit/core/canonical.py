"""nostrkit.core.canonical

Canonical event serialization.

The signed form is a compact six-slot JSON array, always in this order::

    [0, <pubkey>, <created_at>, <kind>, <tags>, <content>]

This is an explicit positional encoder, not ``json.dumps`` over an object:
there are no keys to sort and nothing to configure. Strings get the minimal
JSON escape set; everything else, including non-ASCII, is emitted verbatim
as UTF-8.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime

from nostrkit import SERIALIZATION_VERSION
from nostrkit.core.time import to_unix_seconds

# C0 controls, quote, backslash, and lone surrogates (which have no UTF-8 form).
_ESCAPE = re.compile(r'[\x00-\x1f"\\\ud800-\udfff]')

_ESCAPE_DCT: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _replace(match: re.Match[str]) -> str:
    ch = match.group(0)
    return _ESCAPE_DCT.get(ch) or f"\\u{ord(ch):04x}"


def encode_string(value: str) -> str:
    """JSON string literal with minimal escaping."""

    if not isinstance(value, str):
        raise TypeError(f"expected str, got {type(value).__name__}")
    return '"' + _ESCAPE.sub(_replace, value) + '"'


def encode_int(value: int) -> str:
    """Decimal integer: no leading zeros, no fraction, no exponent."""

    # bool is an int subclass; True must not serialize as 1.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected int, got {type(value).__name__}")
    return str(int(value))


def _encode_tag(tag: Iterable[str]) -> str:
    # A bare str would iterate per character and collide with a real tag.
    if isinstance(tag, str):
        raise TypeError("a tag must be a sequence of strings, not a string")
    return "[" + ",".join(encode_string(v) for v in tag) + "]"


def encode_tags(tags: Iterable[Iterable[str]]) -> str:
    if isinstance(tags, str):
        raise TypeError("tags must be a sequence of tags, not a string")
    return "[" + ",".join(_encode_tag(tag) for tag in tags) + "]"


def serialize_event(
    pubkey: str,
    created_at: datetime | int,
    kind: int,
    tags: Iterable[Iterable[str]],
    content: str,
) -> bytes:
    """Canonical bytes for the five signed fields.

    ``created_at`` may be an aware datetime or integer unix seconds; a
    datetime is floored to whole seconds.
    """

    ts = created_at if isinstance(created_at, int) else to_unix_seconds(created_at)
    parts = (
        encode_int(SERIALIZATION_VERSION),
        encode_string(pubkey),
        encode_int(ts),
        encode_int(kind),
        encode_tags(tags),
        encode_string(content),
    )
    return ("[" + ",".join(parts) + "]").encode("utf-8")

"""nostrkit.security.redaction

Keep private keys out of logs and CLI output.

Public keys, ids and signatures are 64/128-char hex and are meant to be seen,
so hex is not redacted by shape. Redaction keys off field names and explicit
``name=value`` pairs instead.
"""

from __future__ import annotations

import copy
import re
from typing import Any

_REDACTED = "[REDACTED]"

_REDACTION_PATTERNS: list[tuple[str, str]] = [
    # key=value / key: value for secret-ish names
    (r"(?i)\b(private[_-]?key|secret|password|seckey|nsec)\s*[:=]\s*[^\s\"',]+", r"\1=" + _REDACTED),
    # bech32 nsec
    (r"\bnsec1[02-9ac-hj-np-z]{20,}\b", _REDACTED),
]

_SENSITIVE_FIELD_NAMES = {
    "private_key",
    "privkey",
    "seckey",
    "secret",
    "nsec",
    "password",
    "master_password",
    "private_key_hex",
}


def redact_secrets(text: str) -> str:
    out = text
    for pattern, repl in _REDACTION_PATTERNS:
        out = re.sub(pattern, repl, out)
    return out


def sanitize_for_log(data: dict[str, Any]) -> dict[str, Any]:
    """Deep-copy and redact sensitive fields + embedded secrets."""

    def _walk(obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: _REDACTED if str(k).lower() in _SENSITIVE_FIELD_NAMES else _walk(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [_walk(v) for v in obj]
        if isinstance(obj, str):
            return redact_secrets(obj)
        return obj

    return _walk(copy.deepcopy(data))

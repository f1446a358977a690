"""nostrkit.security

Signing primitives.

- BIP-340 Schnorr over secp256k1 (coincurve)
- injected auxiliary randomness
- encrypted identity files (Fernet), imported from ``nostrkit.security.identity``
"""

from nostrkit.security.randomness import FixedRandomness, RandomnessProvider, SystemRandomness
from nostrkit.security.redaction import redact_secrets, sanitize_for_log
from nostrkit.security.schnorr import SchnorrEngine, public_key_from_private, sign_digest, verify_digest

__all__ = [
    "FixedRandomness",
    "RandomnessProvider",
    "SchnorrEngine",
    "SystemRandomness",
    "public_key_from_private",
    "redact_secrets",
    "sanitize_for_log",
    "sign_digest",
    "verify_digest",
]

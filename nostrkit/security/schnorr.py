"""nostrkit.security.schnorr

BIP-340 Schnorr signatures over secp256k1.

Curve arithmetic, nonce derivation and the verification equation come from
libsecp256k1 via coincurve. This module owns the edges: hex decoding,
length checks, error categories, and where the auxiliary randomness comes
from.

Keys are 32-byte hex strings. Public keys are x-only. Signatures are
64 bytes, hex-encoded.
"""

from __future__ import annotations

import logging
import re

from coincurve import PrivateKey, PublicKeyXOnly

from nostrkit.core.exceptions import (
    InvalidPrivateKeyError,
    InvalidPublicKeyError,
    InvalidSignatureEncodingError,
    RandomnessUnavailableError,
    SecurityError,
)
from nostrkit.core.hashing import DIGEST_SIZE
from nostrkit.security.randomness import RandomnessProvider, SystemRandomness

logger = logging.getLogger(__name__)

KEY_SIZE = 32
SIGNATURE_SIZE = 64
AUX_RAND_SIZE = 32
# Out-of-range draws happen with probability ~2^-128; a stuck source does not.
_KEYGEN_ATTEMPTS = 8

_HEX = re.compile(r"[0-9a-fA-F]*")


def _decode_hex(value: str, *, field: str, size: int, error: type[SecurityError]) -> bytes:
    if not isinstance(value, str) or _HEX.fullmatch(value) is None or len(value) % 2:
        raise error(f"{field} is not valid hex", field=field)
    raw = bytes.fromhex(value)
    if len(raw) != size:
        raise error(
            f"{field} must be {size} bytes, not {len(raw)}",
            field=field,
            expected=size,
            actual=len(raw),
        )
    return raw


def parse_private_key(value: str) -> PrivateKey:
    """Parse a hex scalar. Never echoes the key in errors."""

    raw = _decode_hex(value, field="private_key", size=KEY_SIZE, error=InvalidPrivateKeyError)
    try:
        return PrivateKey(raw)
    except ValueError as e:
        raise InvalidPrivateKeyError("private_key is outside the valid scalar range", field="private_key") from e


def parse_public_key(value: str) -> PublicKeyXOnly:
    raw = _decode_hex(value, field="public_key", size=KEY_SIZE, error=InvalidPublicKeyError)
    try:
        return PublicKeyXOnly(raw)
    except ValueError as e:
        raise InvalidPublicKeyError(f"public_key '{value}' is not a point on secp256k1", field="public_key") from e


def decode_signature(value: str) -> bytes:
    return _decode_hex(value, field="signature", size=SIGNATURE_SIZE, error=InvalidSignatureEncodingError)


def public_key_from_private(private_key: str) -> str:
    """x-only public key hex for a private key hex."""

    return parse_private_key(private_key).public_key_xonly.format().hex()


def _check_digest(digest: bytes) -> None:
    if len(digest) != DIGEST_SIZE:
        raise ValueError(f"digest must be {DIGEST_SIZE} bytes, not {len(digest)}")


class SchnorrEngine:
    """Signs and verifies 32-byte digests.

    Holds the randomness provider used for BIP-340 auxiliary randomness.
    Stateless otherwise; one engine can serve any number of threads.
    """

    def __init__(self, randomness: RandomnessProvider | None = None) -> None:
        self.randomness: RandomnessProvider = randomness or SystemRandomness()

    def sign(self, private_key: str, digest: bytes) -> bytes:
        """Return a 64-byte signature over ``digest``.

        Raises:
            InvalidPrivateKeyError: malformed or out-of-range key.
            RandomnessUnavailableError: no fresh auxiliary randomness.
        """

        _check_digest(digest)
        key = parse_private_key(private_key)
        aux = self.randomness.read(AUX_RAND_SIZE)
        # coincurve draws its own entropy for b"" and signs without any for None.
        if not isinstance(aux, bytes) or len(aux) != AUX_RAND_SIZE:
            actual = len(aux) if isinstance(aux, (bytes, bytearray)) else None
            raise RandomnessUnavailableError(
                f"randomness provider returned {actual} bytes, expected {AUX_RAND_SIZE}",
                expected=AUX_RAND_SIZE,
                actual=actual,
            )
        return key.sign_schnorr(digest, aux)

    def verify(self, public_key: str, digest: bytes, signature: str) -> bool:
        """Check ``signature`` (hex) over ``digest`` for ``public_key`` (hex).

        Raises on malformed key or signature encoding. A well-formed signature
        that fails the verification equation returns ``False``.
        """

        _check_digest(digest)
        pub = parse_public_key(public_key)
        sig = decode_signature(signature)
        ok = pub.verify(sig, digest)
        if not ok:
            logger.debug("signature_rejected", extra={"public_key": public_key, "digest": digest.hex()})
        return bool(ok)


_default_engine: SchnorrEngine | None = None


def default_engine() -> SchnorrEngine:
    """Process-wide engine backed by the OS random source."""

    global _default_engine
    if _default_engine is None:
        _default_engine = SchnorrEngine()
    return _default_engine


def generate_private_key(randomness: RandomnessProvider | None = None) -> str:
    """Fresh private key hex, rejection-sampled into the scalar range."""

    source = randomness or SystemRandomness()
    for _ in range(_KEYGEN_ATTEMPTS):
        candidate = source.read(KEY_SIZE)
        try:
            PrivateKey(candidate)
        except ValueError:
            continue
        return candidate.hex()
    raise RandomnessUnavailableError(f"no valid scalar after {_KEYGEN_ATTEMPTS} draws")


def sign_digest(private_key: str, digest: bytes, *, engine: SchnorrEngine | None = None) -> str:
    return (engine or default_engine()).sign(private_key, digest).hex()


def verify_digest(public_key: str, digest: bytes, signature: str, *, engine: SchnorrEngine | None = None) -> bool:
    return (engine or default_engine()).verify(public_key, digest, signature)

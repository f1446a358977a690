"""nostrkit.core.exceptions

Errors are part of the interface.

Malformed input raises. A well-formed signature that does not verify is a
negative answer, not an error.
"""

from __future__ import annotations


class NostrkitError(Exception):
    """Base exception for nostrkit."""


class ConfigError(NostrkitError):
    """Configuration is missing, invalid, or inconsistent."""


class SecurityError(NostrkitError):
    """Cryptographic input or capability failure.

    Keyword context is kept on the instance so callers can inspect which
    field was wrong without parsing the message.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.expected = expected
        self.actual = actual


class InvalidKeyError(SecurityError):
    """A key could not be parsed."""


class InvalidPublicKeyError(InvalidKeyError):
    """Public key is not 32 hex-encoded bytes naming a curve point."""


class InvalidPrivateKeyError(InvalidKeyError):
    """Private key is malformed or outside the scalar range."""


class InvalidSignatureEncodingError(SecurityError):
    """Signature is not hex, or not 64 bytes once decoded."""


class RandomnessUnavailableError(SecurityError):
    """The secure random source could not supply entropy."""


class IdentityError(SecurityError):
    """Identity file cannot be read, decrypted, or written."""

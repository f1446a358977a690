"""nostrkit.core.events

The event is the primitive.

Five fields are signed: ``pubkey``, ``created_at``, ``kind``, ``tags``,
``content``. ``id`` is the SHA-256 of their canonical form and ``sig`` is a
BIP-340 signature over that same digest. Both start empty and are written
together by :meth:`Event.sign`.

Mutating a signed field after signing leaves ``id`` and ``sig`` stale. The
model does not notice; :meth:`Event.check_signature` and
:meth:`Event.check_id` will.

One instance must not be signed from two threads at once. Distinct
instances share nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from nostrkit.core.canonical import serialize_event
from nostrkit.core.exceptions import InvalidPublicKeyError, InvalidSignatureEncodingError
from nostrkit.core.hashing import event_digest
from nostrkit.core.tags import Tags
from nostrkit.core.time import ensure_utc, from_unix_seconds, to_unix_seconds, utc_now
from nostrkit.security.schnorr import SchnorrEngine, default_engine, parse_public_key, public_key_from_private

logger = logging.getLogger(__name__)


class EventKind(IntEnum):
    """Well-known kinds. Not exhaustive: ``Event.kind`` takes any int >= 0."""

    SET_METADATA = 0
    TEXT_NOTE = 1
    RECOMMEND_SERVER = 2
    CONTACT_LIST = 3
    ENCRYPTED_DIRECT_MESSAGE = 4
    DELETION = 5


class Event(BaseModel):
    """Signed event.

    ``id`` and ``sig`` are accepted on construction only so events received
    over the wire can be checked; locally they are set by :meth:`sign`.
    """

    id: str = ""
    pubkey: str
    created_at: datetime = Field(default_factory=utc_now)
    kind: int = Field(default=int(EventKind.TEXT_NOTE), ge=0)
    tags: Tags = Field(default_factory=Tags)
    content: str = ""
    sig: str = ""

    model_config = {"validate_assignment": True}

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: Any) -> Any:
        # Integers are unix seconds, never milliseconds.
        if isinstance(v, int) and not isinstance(v, bool):
            return from_unix_seconds(v)
        return v

    @field_validator("created_at", mode="after")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_serializer("created_at")
    def _ser_created_at(self, v: datetime) -> int:
        return to_unix_seconds(v)

    @property
    def created_at_unix(self) -> int:
        return to_unix_seconds(self.created_at)

    @property
    def is_signed(self) -> bool:
        return bool(self.id and self.sig)

    def serialize(self) -> bytes:
        """Canonical bytes of the signed fields as currently held."""

        return serialize_event(self.pubkey, self.created_at_unix, self.kind, self.tags.to_array(), self.content)

    def digest(self) -> bytes:
        return event_digest(self.serialize())

    def get_id(self) -> str:
        """Recompute the identifier from current fields. Does not store it."""

        return self.digest().hex()

    def check_id(self) -> bool:
        """True if the stored ``id`` matches the current fields."""

        return bool(self.id) and self.id == self.get_id()

    def sign(self, private_key: str, *, engine: SchnorrEngine | None = None) -> None:
        """Sign with ``private_key`` (hex), setting ``id`` and ``sig``.

        The digest is computed once and used both as the signed message and
        as the stored id. On any error neither field changes.

        Raises:
            InvalidPrivateKeyError: malformed or out-of-range key.
            InvalidPublicKeyError: ``pubkey`` is malformed or belongs to another key.
            RandomnessUnavailableError: no auxiliary randomness.
        """

        engine = engine or default_engine()
        expected = public_key_from_private(private_key)
        if self.pubkey != expected:
            # Reuse the parser for the precise reason (bad hex, length, off-curve).
            self._parse_pubkey()
            if self.pubkey.lower() == expected:
                raise InvalidPublicKeyError("event pubkey must be lower-case hex", field="pubkey")
            raise InvalidPublicKeyError(
                f"event pubkey '{self.pubkey}' does not belong to the signing key",
                field="pubkey",
            )

        digest = self.digest()
        signature = engine.sign(private_key, digest)

        self.id = digest.hex()
        self.sig = signature.hex()
        logger.debug("event_signed", extra={"event_id": self.id, "kind": self.kind})

    def check_signature(self, *, engine: SchnorrEngine | None = None) -> bool:
        """Verify ``sig`` against ``pubkey`` and the digest of the current fields.

        Returns ``False`` for a well-formed signature that does not verify.

        Raises:
            InvalidPublicKeyError: ``pubkey`` cannot be parsed.
            InvalidSignatureEncodingError: ``sig`` is not 64 hex-encoded bytes.
        """

        engine = engine or default_engine()
        self._parse_pubkey()
        try:
            return engine.verify(self.pubkey, self.digest(), self.sig)
        except InvalidSignatureEncodingError as e:
            raise InvalidSignatureEncodingError(
                f"event sig is invalid: {e}", field="sig", expected=e.expected, actual=e.actual
            ) from e

    def _parse_pubkey(self) -> None:
        try:
            parse_public_key(self.pubkey)
        except InvalidPublicKeyError as e:
            raise InvalidPublicKeyError(
                f"event has invalid pubkey '{self.pubkey}': {e}", field="pubkey", expected=e.expected, actual=e.actual
            ) from e

    # -----------------
    # Wire form
    # -----------------

    def to_json_object(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_json_object(cls, data: dict[str, Any]) -> Event:
        return cls.model_validate(data)

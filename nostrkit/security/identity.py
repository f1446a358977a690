"""nostrkit.security.identity

A signing identity is one secp256k1 scalar and its x-only public key.

At rest the scalar is encrypted with Fernet under a PBKDF2-HMAC-SHA256 key
derived from ``NOSTRKIT_MASTER_PASSWORD``. Plaintext key files are written
only with ``NOSTRKIT_DEV_MODE=1``.
"""

from __future__ import annotations

import base64
import contextlib
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from nostrkit.core.config import IdentityConfig
from nostrkit.core.events import Event
from nostrkit.core.exceptions import IdentityError, SecurityError
from nostrkit.core.time import utc_now
from nostrkit.security.randomness import RandomnessProvider
from nostrkit.security.schnorr import SchnorrEngine, generate_private_key, public_key_from_private

logger = logging.getLogger(__name__)

_ALG = "bip340-secp256k1"
_FILE_VERSION = 1
_DEFAULT_ITERATIONS = IdentityConfig().kdf_iterations


def _derive_fernet_key(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))


def _password() -> str | None:
    return os.environ.get("NOSTRKIT_MASTER_PASSWORD") or None


def _dev_mode() -> bool:
    return os.environ.get("NOSTRKIT_DEV_MODE", "").lower() in ("1", "true", "yes")


@dataclass
class NodeIdentity:
    public_key: str     # x-only, hex
    private_key: str    # scalar, hex (in-memory; encrypted at rest)
    created_at: str

    def sign_event(self, event: Event, *, engine: SchnorrEngine | None = None) -> Event:
        event.sign(self.private_key, engine=engine)
        return event

    def new_event(self, *, kind: int, content: str = "", tags: list[list[str]] | None = None) -> Event:
        """Unsigned event authored by this identity."""

        return Event(pubkey=self.public_key, kind=kind, content=content, tags=tags or [])

    def save(self, path: str | Path, *, iterations: int = _DEFAULT_ITERATIONS) -> None:
        """Write identity JSON; the private key is encrypted unless in dev mode."""

        path = Path(path)
        blob: dict[str, Any] = {
            "alg": _ALG,
            "version": _FILE_VERSION,
            "created_at": self.created_at,
            "public_key": self.public_key,
        }

        pw = _password()
        if pw:
            salt = os.urandom(16)
            f = Fernet(_derive_fernet_key(pw, salt, iterations))
            blob["private_key_enc"] = f.encrypt(bytes.fromhex(self.private_key)).decode("ascii")
            blob["kdf"] = {
                "name": "pbkdf2_hmac_sha256",
                "iterations": iterations,
                "salt_b64": base64.b64encode(salt).decode("ascii"),
            }
        elif _dev_mode():
            blob["private_key"] = self.private_key
            blob["warning"] = "DEVELOPMENT MODE: private key stored unencrypted"
        else:
            raise IdentityError(
                "Refusing to write a plaintext private key. "
                "Set NOSTRKIT_MASTER_PASSWORD, or NOSTRKIT_DEV_MODE=1 for development."
            )

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(blob, indent=2, sort_keys=True), encoding="utf-8")
        with contextlib.suppress(OSError):
            os.chmod(path, 0o600)
        logger.info("identity_saved", extra={"path": str(path), "public_key": self.public_key})

    @classmethod
    def load(cls, path: str | Path) -> NodeIdentity:
        path = Path(path)
        try:
            blob = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise IdentityError(f"Cannot read identity file {path}: {e}") from e

        if blob.get("alg") != _ALG:
            raise IdentityError(f"Unsupported identity alg: {blob.get('alg')!r}")

        try:
            private_key = _read_private_key(blob)
        except (KeyError, TypeError, ValueError) as e:
            raise IdentityError(f"Malformed identity file {path}: {e!r}") from e

        try:
            public_key = public_key_from_private(private_key)
        except SecurityError as e:
            raise IdentityError(f"Identity file holds an unusable private key: {e}") from e
        if public_key != blob.get("public_key"):
            raise IdentityError("Identity file public key does not match its private key")

        return cls(public_key=public_key, private_key=private_key, created_at=str(blob.get("created_at", "")))


@dataclass
class IdentityHandle:
    path: Path
    identity: NodeIdentity


def generate_node_identity(
    *, private_key: str | None = None, randomness: RandomnessProvider | None = None
) -> NodeIdentity:
    """New identity, from ``private_key`` if given, else fresh randomness."""

    secret = private_key or generate_private_key(randomness)
    ident = NodeIdentity(
        public_key=public_key_from_private(secret),
        private_key=secret,
        created_at=utc_now().isoformat(),
    )
    logger.info("identity_generated", extra={"public_key": ident.public_key})
    return ident


def ensure_identity(cfg: IdentityConfig | None = None) -> IdentityHandle:
    """Load identity from disk or generate + persist."""

    cfg = cfg or IdentityConfig()
    if cfg.path.exists():
        return IdentityHandle(path=cfg.path, identity=NodeIdentity.load(cfg.path))

    ident = generate_node_identity()
    ident.save(cfg.path, iterations=cfg.kdf_iterations)
    return IdentityHandle(path=cfg.path, identity=ident)


def identity_status(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {"present": False, "path": str(p)}

    try:
        ident = NodeIdentity.load(p)
    except IdentityError as e:
        return {"present": False, "path": str(p), "error": str(e)}
    return {
        "present": True,
        "path": str(p),
        "created_at": ident.created_at,
        "public_key": ident.public_key,
    }


def _read_private_key(blob: dict[str, Any]) -> str:
    if "private_key_enc" not in blob:
        return str(blob["private_key"])

    pw = _password()
    if not pw:
        raise IdentityError("Identity file is encrypted; set NOSTRKIT_MASTER_PASSWORD")
    kdf = blob["kdf"]
    f = Fernet(_derive_fernet_key(pw, base64.b64decode(kdf["salt_b64"]), int(kdf["iterations"])))
    try:
        return f.decrypt(blob["private_key_enc"].encode("ascii")).hex()
    except InvalidToken as e:
        raise IdentityError("Invalid password or corrupted identity file") from e

from __future__ import annotations

import hashlib

import pytest

from nostrkit.core.exceptions import (
    InvalidPrivateKeyError,
    InvalidPublicKeyError,
    InvalidSignatureEncodingError,
    RandomnessUnavailableError,
)
from nostrkit.security.randomness import FixedRandomness
from nostrkit.security.schnorr import (
    SchnorrEngine,
    generate_private_key,
    public_key_from_private,
    sign_digest,
    verify_digest,
)
from tests.unit._vectors import OTHER_PUBLIC_KEY, OTHER_SECRET_KEY, PUBLIC_KEY, SECRET_KEY

# BIP-340 test vectors 0 and 1 (secret key, aux_rand, message, signature).
VECTOR_0_SIG = (
    "e907831f80848d1069a5371b402410364bdf1c5f8307b0084c55f1ce2dca8215"
    "25f66a4a85ea8b71e482a74f382d2ce5ebeee8fdb2172f477df4900d310536c0"
)
VECTOR_1_AUX = bytes.fromhex("00" * 31 + "01")
VECTOR_1_MSG = bytes.fromhex("243f6a8885a308d313198a2e03707344a4093822299f31d0082efa98ec4e6c89")
VECTOR_1_SIG = (
    "6896bd60eeae296db48a229ff71dfe071bde413e6d43f917dc8dcf8c78de3341"
    "8906d11ac976abccb20b091292bff4ea897efcb639ea871cfa95f6de339e4b0a"
)

DIGEST = hashlib.sha256(b"nostrkit").digest()


def test_public_key_derivation_matches_bip340_vectors() -> None:
    assert public_key_from_private(SECRET_KEY) == PUBLIC_KEY
    assert public_key_from_private(OTHER_SECRET_KEY) == OTHER_PUBLIC_KEY


def test_sign_matches_bip340_vector_0() -> None:
    engine = SchnorrEngine(FixedRandomness(bytes(32)))
    assert engine.sign(SECRET_KEY, bytes(32)).hex() == VECTOR_0_SIG


def test_sign_matches_bip340_vector_1() -> None:
    engine = SchnorrEngine(FixedRandomness(VECTOR_1_AUX))
    assert engine.sign(OTHER_SECRET_KEY, VECTOR_1_MSG).hex() == VECTOR_1_SIG


def test_verify_accepts_bip340_vectors() -> None:
    engine = SchnorrEngine()
    assert engine.verify(PUBLIC_KEY, bytes(32), VECTOR_0_SIG) is True
    assert engine.verify(OTHER_PUBLIC_KEY, VECTOR_1_MSG, VECTOR_1_SIG) is True


def test_verify_accepts_uppercase_signature_hex() -> None:
    assert SchnorrEngine().verify(PUBLIC_KEY, bytes(32), VECTOR_0_SIG.upper()) is True


def test_roundtrip_with_system_randomness() -> None:
    sig = sign_digest(SECRET_KEY, DIGEST)
    assert len(sig) == 128
    assert verify_digest(PUBLIC_KEY, DIGEST, sig) is True


def test_fresh_randomness_gives_distinct_valid_signatures() -> None:
    a = sign_digest(SECRET_KEY, DIGEST)
    b = sign_digest(SECRET_KEY, DIGEST)
    assert a != b
    assert verify_digest(PUBLIC_KEY, DIGEST, a) and verify_digest(PUBLIC_KEY, DIGEST, b)


def test_signature_from_other_key_is_false_not_error() -> None:
    sig = sign_digest(OTHER_SECRET_KEY, DIGEST)
    assert verify_digest(PUBLIC_KEY, DIGEST, sig) is False


def test_wrong_digest_is_false() -> None:
    sig = sign_digest(SECRET_KEY, DIGEST)
    assert verify_digest(PUBLIC_KEY, hashlib.sha256(b"other").digest(), sig) is False


def test_flipped_bit_is_false() -> None:
    sig = bytearray.fromhex(sign_digest(SECRET_KEY, DIGEST))
    sig[40] ^= 0x01
    assert verify_digest(PUBLIC_KEY, DIGEST, sig.hex()) is False


@pytest.mark.parametrize("size", [63, 65, 0])
def test_signature_wrong_length_raises(size: int) -> None:
    with pytest.raises(InvalidSignatureEncodingError) as e:
        verify_digest(PUBLIC_KEY, DIGEST, "ab" * size)
    assert e.value.field == "signature"
    assert e.value.expected == 64
    assert e.value.actual == size


@pytest.mark.parametrize("sig", ["zz" * 64, "a" * 127, "0x" + "00" * 63, " " + "00" * 64])
def test_signature_bad_hex_raises(sig: str) -> None:
    with pytest.raises(InvalidSignatureEncodingError):
        verify_digest(PUBLIC_KEY, DIGEST, sig)


@pytest.mark.parametrize(
    "pub",
    [
        "",
        "00" * 31,
        "00" * 33,
        "nothex" * 10 + "abcd",
        "02" + PUBLIC_KEY,
        # x >= field prime
        "ff" * 32,
    ],
)
def test_malformed_public_key_raises(pub: str) -> None:
    with pytest.raises(InvalidPublicKeyError) as e:
        verify_digest(pub, DIGEST, VECTOR_0_SIG)
    assert e.value.field == "public_key"


def test_public_key_error_precedes_signature_error() -> None:
    with pytest.raises(InvalidPublicKeyError):
        verify_digest("00" * 31, DIGEST, "00")


@pytest.mark.parametrize(
    "key",
    [
        "",
        "00" * 31,
        "00" * 33,
        "g" * 64,
        # zero and the group order are outside [1, n-1]
        "00" * 32,
        "fffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141",
    ],
)
def test_invalid_private_key_raises(key: str) -> None:
    with pytest.raises(InvalidPrivateKeyError) as e:
        sign_digest(key, DIGEST)
    assert e.value.field == "private_key"


def test_private_key_is_never_echoed_in_errors() -> None:
    secret = "fffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141"
    with pytest.raises(InvalidPrivateKeyError) as e:
        sign_digest(secret, DIGEST)
    assert secret not in str(e.value)


def test_largest_scalar_is_valid() -> None:
    key = "fffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364140"
    sig = sign_digest(key, DIGEST)
    assert verify_digest(public_key_from_private(key), DIGEST, sig)


def test_digest_must_be_32_bytes() -> None:
    with pytest.raises(ValueError):
        SchnorrEngine().sign(SECRET_KEY, b"short")


class _DeadSource:
    def read(self, n: int) -> bytes:
        raise RandomnessUnavailableError("entropy pool gone")


def test_randomness_failure_aborts_signing() -> None:
    with pytest.raises(RandomnessUnavailableError):
        SchnorrEngine(_DeadSource()).sign(SECRET_KEY, DIGEST)


class _Returns:
    def __init__(self, value: object) -> None:
        self.value = value

    def read(self, n: int) -> object:
        return self.value


@pytest.mark.parametrize("returned", [b"", None, bytes(16), bytes(33)])
def test_malformed_provider_output_aborts_signing(returned: object) -> None:
    with pytest.raises(RandomnessUnavailableError) as excinfo:
        SchnorrEngine(_Returns(returned)).sign(SECRET_KEY, DIGEST)  # type: ignore[arg-type]
    assert excinfo.value.expected == 32


def test_engine_draws_randomness_on_every_sign() -> None:
    calls: list[int] = []

    class _Counting:
        def read(self, n: int) -> bytes:
            calls.append(n)
            return bytes(n)

    engine = SchnorrEngine(_Counting())
    engine.sign(SECRET_KEY, DIGEST)
    engine.sign(SECRET_KEY, DIGEST)
    assert calls == [32, 32]


def test_generate_private_key_is_valid_and_fresh() -> None:
    a = generate_private_key()
    b = generate_private_key()
    assert a != b
    assert len(a) == 64
    assert len(public_key_from_private(a)) == 64


def test_generate_private_key_gives_up_on_stuck_source() -> None:
    with pytest.raises(RandomnessUnavailableError):
        generate_private_key(FixedRandomness(bytes(32)))

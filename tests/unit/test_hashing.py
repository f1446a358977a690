from __future__ import annotations

import hashlib

from nostrkit.core.canonical import serialize_event
from nostrkit.core.hashing import DIGEST_SIZE, event_digest, event_id

GOLDEN_MINIMAL_ID = "2bee8ad7d8d21a7738a41c8c3e71b3f902b5a448b24971c58bd6bff878ee0a3f"
GOLDEN_TAGGED_ID = "7ef49b98c231a8832684ee7a004c54c7ba01c510700ac4b9a9ace979db211285"
PUBKEY = "f9308a019258c31049344f85f89d5229b531c845836f99b08601f113bce036f9"


def test_minimal_event_golden_id() -> None:
    assert event_id(serialize_event("0" * 64, 0, 1, [], "")) == GOLDEN_MINIMAL_ID


def test_tagged_event_golden_id() -> None:
    serialized = serialize_event(
        PUBKEY,
        1700000000,
        1,
        [["e", "abc"], ["p", "def", "wss://relay.example.com"]],
        'hello "world"\n\tback\\slash é 日本 \x01',
    )
    assert event_id(serialized) == GOLDEN_TAGGED_ID


def test_swapping_tag_order_changes_id() -> None:
    serialized = serialize_event(
        PUBKEY,
        1700000000,
        1,
        [["p", "def", "wss://relay.example.com"], ["e", "abc"]],
        'hello "world"\n\tback\\slash é 日本 \x01',
    )
    assert event_id(serialized) == "6605cd636116dd4c2833a49c276ab3cd72d55f31f784a8184de14a13cd605cec"


def test_digest_and_id_agree() -> None:
    data = b"[0]"
    digest = event_digest(data)
    assert len(digest) == DIGEST_SIZE
    assert event_id(data) == digest.hex() == hashlib.sha256(data).hexdigest()
    assert event_id(data) == event_id(data).lower()

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from nostrkit.core.events import Event  # noqa: E402
from nostrkit.security.randomness import FixedRandomness  # noqa: E402
from nostrkit.security.schnorr import SchnorrEngine  # noqa: E402
from tests.unit._vectors import PUBLIC_KEY  # noqa: E402


@pytest.fixture()
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture()
def fixed_engine() -> SchnorrEngine:
    """Engine with all-zero auxiliary randomness; signatures are reproducible."""

    return SchnorrEngine(FixedRandomness(bytes(32)))


@pytest.fixture()
def sample_event() -> Event:
    return Event(
        pubkey=PUBLIC_KEY,
        created_at=1700000000,
        kind=1,
        tags=[["e", "abc"], ["p", "def", "wss://relay.example.com"]],
        content='hello "world"\n\tback\\slash é 日本 \x01',
    )

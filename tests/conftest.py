"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`radix_tribes` package without requiring an editable install in CI, and
provides small worlds shared by the unit tests.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from radix_tribes.domain.enums import TerrainType  # noqa: E402
from radix_tribes.domain.models import Hex, MapSettings, TribeStats, UserID, World  # noqa: E402
from radix_tribes.domain.world import TribeProfile  # noqa: E402


def make_world(starting_locations=("000.000", "004.000", "000.004", "-004.000"), radius=6):
    """Small all-plains world with the given starting locations."""

    hexes = [
        Hex(q=q, r=r, terrain=TerrainType.PLAINS)
        for q in range(-radius, radius + 1)
        for r in range(-radius, radius + 1)
        if abs(q) + abs(r) <= radius
    ]
    return World(
        turn=1,
        map_seed=1234,
        map_settings=MapSettings(biases={TerrainType.PLAINS: 1.0}),
        map_hexes=hexes,
        starting_locations=list(starting_locations),
    )


def make_profile(name="Ash Walkers", player_id="user-1"):
    return TribeProfile(
        player_id=UserID(player_id),
        player_name=f"player of {name}",
        tribe_name=name,
        icon="flag",
        color="#FF0000",
        stats=TribeStats(charisma=5, intelligence=5, leadership=5, strength=5),
    )


@pytest.fixture
def world() -> World:
    return make_world()

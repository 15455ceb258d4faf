"""Static catalog data: palettes, rosters, chiefs and assets."""

from __future__ import annotations

from radix_tribes.domain.enums import TerrainType
from radix_tribes.domain.models import Chief, TribeStats

SECURITY_QUESTIONS: tuple[str, ...] = (
    "What was your first pet's name?",
    "What city were you born in?",
    "What is your mother's maiden name?",
    "What was the model of your first car?",
    "What is the name of your favorite childhood friend?",
)

TRIBE_COLORS: tuple[str, ...] = (
    "#F56565",  # red
    "#4299E1",  # blue
    "#48BB78",  # green
    "#ED8936",  # orange
    "#9F7AEA",  # purple
    "#ECC94B",  # yellow
    "#38B2AC",  # teal
    "#ED64A6",  # pink
    "#A0AEC0",  # gray
    "#667EEA",  # indigo
    "#F687B3",  # fuchsia
    "#D69E2E",  # brown
    "#319795",  # pine
    "#6B46C1",  # violet
    "#C53030",  # dark red
    "#059669",  # dark green
)

AI_TRIBE_NAMES: tuple[str, ...] = (
    "Ravagers",
    "Scrap Hounds",
    "Dust Devils",
    "Iron Fists",
    "Rust Raiders",
    "Wasteland Wolves",
    "Toxic Avengers",
    "Shadow Walkers",
)

AI_TRIBE_ICON = "skull"
AI_TYPE_WANDERER = "Wanderer"

DEFAULT_TERRAIN_BIASES: dict[TerrainType, float] = {
    TerrainType.PLAINS: 1.0,
    TerrainType.DESERT: 1.0,
    TerrainType.MOUNTAINS: 1.0,
    TerrainType.FOREST: 1.0,
    TerrainType.RUINS: 0.8,
    TerrainType.WASTELAND: 1.0,
    TerrainType.WATER: 1.0,
    TerrainType.RADIATION: 0.5,
    TerrainType.CRATER: 0.7,
    TerrainType.SWAMP: 0.9,
}

CHIEFS: dict[str, Chief] = {
    chief.name: chief
    for chief in (
        Chief(
            name="Warlord Kain",
            description="A fierce leader known for tactical brilliance",
            stats=TribeStats(charisma=3, intelligence=5, leadership=7, strength=6),
        ),
        Chief(
            name="Scout Lyra",
            description="Master of stealth and reconnaissance",
            stats=TribeStats(charisma=4, intelligence=6, leadership=3, strength=4),
        ),
    )
}

ASSETS: dict[str, str] = {
    "Ancient Codex": "Knowledge from the old world",
    "Fusion Cell": "Powerful energy source",
    "Satellite Uplink": "Communication device",
}


def get_chief(name: str) -> Chief | None:
    return CHIEFS.get(name)


def get_asset(name: str) -> str | None:
    """Return the asset description, or None when the asset is unknown."""

    return ASSETS.get(name)

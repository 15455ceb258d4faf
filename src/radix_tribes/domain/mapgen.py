"""Procedural map generation."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass

from radix_tribes.domain.enums import PoiType, TerrainType
from radix_tribes.domain.models import Hex, MapSettings
from radix_tribes.domain.rules_config import DEFAULT_RULES, RulesConfig
from radix_tribes.utils.hex_math import encode_coord
from radix_tribes.utils.rng import generate_seed, make_rng, weighted_choice

logger = logging.getLogger(__name__)

FALLBACK_LOCATION = encode_coord(0, 0)


@dataclass(slots=True)
class GeneratedMap:
    """Result of a map generation run."""

    hexes: list[Hex]
    starting_locations: list[str]
    fallback: bool = False


def generate_map(
    radius: int,
    seed: int,
    settings: MapSettings,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> GeneratedMap:
    """Build the hex grid and candidate starting locations.

    The grid covers every ``(q, r)`` in ``[-radius, radius]`` with
    ``|q| + |r| <= radius * bounds_factor``.  Each hex draws one terrain kind
    with probability proportional to its bias weight.  Output depends only on
    ``radius``, ``seed`` and ``settings``.

    Raises:
        ValueError: If the radius is not positive or the bias table has no
            positive weight.
    """

    if isinstance(radius, bool) or not isinstance(radius, int) or radius <= 0:
        raise ValueError(f"radius must be a positive integer, got {radius!r}")

    terrains = list(TerrainType)
    weights = [float(settings.biases.get(terrain, 0.0)) for terrain in terrains]

    terrain_rng = make_rng(generate_seed(seed, 0, "terrain"))
    poi_rng = make_rng(generate_seed(seed, 0, "poi"))
    start_rng = make_rng(generate_seed(seed, 0, "starting_locations"))
    poi_kinds = list(PoiType)

    bound = radius * rules.map.bounds_factor
    zone = radius * rules.map.start_zone_fraction

    hexes: list[Hex] = []
    starting_locations: list[str] = []
    for q in range(-radius, radius + 1):
        for r in range(-radius, radius + 1):
            if abs(q) + abs(r) > bound:
                continue
            terrain = weighted_choice(terrain_rng, terrains, weights)
            poi = poi_rng.choice(poi_kinds) if poi_rng.random() < rules.map.poi_chance else None
            hexes.append(Hex(q=q, r=r, terrain=terrain, poi=poi))

            if abs(q) < zone and abs(r) < zone and start_rng.random() < rules.map.start_pick_chance:
                starting_locations.append(encode_coord(q, r))

    _top_up_starting_locations(hexes, starting_locations, radius, start_rng, rules)

    logger.debug(
        "map generated with %d hexes and %d starting locations",
        len(hexes),
        len(starting_locations),
    )
    return GeneratedMap(hexes=hexes, starting_locations=starting_locations)


def _top_up_starting_locations(
    hexes: list[Hex],
    starting_locations: list[str],
    radius: int,
    rng: random.Random,
    rules: RulesConfig,
) -> None:
    """Add uniform-random starting locations until the minimum is reached."""

    needed = rules.map.min_starting_locations - len(starting_locations)
    if needed <= 0:
        return

    taken = set(starting_locations)
    limit = math.floor(radius * rules.map.fallback_zone_fraction)
    near = [h.coord for h in hexes if abs(h.q) <= limit and abs(h.r) <= limit]
    anywhere = [h.coord for h in hexes]

    for pool in (near, anywhere):
        candidates = [coord for coord in pool if coord not in taken]
        rng.shuffle(candidates)
        for coord in candidates[:needed]:
            starting_locations.append(coord)
            taken.add(coord)
        needed = rules.map.min_starting_locations - len(starting_locations)
        if needed <= 0:
            return


def fallback_map() -> GeneratedMap:
    """Minimal valid map: one Plains hex at the origin, one starting location."""

    return GeneratedMap(
        hexes=[Hex(q=0, r=0, terrain=TerrainType.PLAINS)],
        starting_locations=[FALLBACK_LOCATION],
        fallback=True,
    )


def build_map(
    radius: int,
    seed: int,
    settings: MapSettings,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> GeneratedMap:
    """Generate a map, degrading to :func:`fallback_map` on any failure."""

    logger.info("generating map with radius %s, seed %s", radius, seed)
    try:
        return generate_map(radius, seed, settings, rules=rules)
    except Exception:
        logger.exception("map generation failed; using minimal fallback map")
        return fallback_map()

"""AI tribe creation and per-turn action back-fill."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from uuid import uuid4

from radix_tribes.domain import catalog, diplomacy
from radix_tribes.domain.enums import ActionType, DiplomaticStatus, TerrainType
from radix_tribes.domain.errors import NoAvailableStartLocation
from radix_tribes.domain.models import (
    GameAction,
    Garrison,
    GlobalResources,
    Hex,
    Tribe,
    TribeID,
    TribeStats,
    UserID,
    World,
)
from radix_tribes.domain.rules_config import DEFAULT_RULES, RulesConfig
from radix_tribes.utils.hex_math import hexes_in_range, parse_coord
from radix_tribes.utils.rng import generate_seed, make_rng

logger = logging.getLogger(__name__)

_ROMAN = ("II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X")


def _pick_name(existing_names: Iterable[str], rng: random.Random) -> str:
    taken = set(existing_names)
    free = [name for name in catalog.AI_TRIBE_NAMES if name not in taken]
    if free:
        return rng.choice(free)
    # Roster exhausted: fall back to numbered names.
    for suffix in _ROMAN:
        free = [f"{name} {suffix}" for name in catalog.AI_TRIBE_NAMES]
        free = [name for name in free if name not in taken]
        if free:
            return rng.choice(free)
    return f"{rng.choice(catalog.AI_TRIBE_NAMES)} {uuid4().hex[:4]}"


def _pick_color(used_colors: Iterable[str], rng: random.Random) -> str:
    used = set(used_colors)
    free = [color for color in catalog.TRIBE_COLORS if color not in used]
    return rng.choice(free or list(catalog.TRIBE_COLORS))


def generate_ai_tribe(
    start_location: str,
    existing_names: Sequence[str],
    *,
    rng: random.Random,
    used_colors: Sequence[str] = (),
    rules: RulesConfig = DEFAULT_RULES,
) -> Tribe:
    """Build an AI tribe with baseline stats at ``start_location``.

    The tribe has no relations yet; :func:`add_ai_tribe` seeds them.

    Raises:
        MalformedCoordinate: If ``start_location`` is not a coordinate key.
    """

    start = parse_coord(start_location)
    token = uuid4().hex[:12]
    base = rules.tribe.ai_base_stat
    tribe = Tribe(
        id=TribeID(f"ai-tribe-{token}"),
        player_id=UserID(f"ai-{token}"),
        player_name="AI",
        tribe_name=_pick_name(existing_names, rng),
        icon=catalog.AI_TRIBE_ICON,
        color=_pick_color(used_colors, rng),
        stats=TribeStats(charisma=base, intelligence=base, leadership=base, strength=base),
        location=start_location,
        is_ai=True,
        ai_type=catalog.AI_TYPE_WANDERER,
        garrisons={
            start_location: Garrison(
                troops=rules.tribe.initial_troops,
                weapons=rules.tribe.initial_weapons,
            )
        },
        global_resources=GlobalResources(
            food=rules.tribe.initial_food,
            scrap=rules.tribe.initial_scrap,
            morale=rules.tribe.initial_morale,
        ),
    )
    tribe.explore(hexes_in_range(start, rules.tribe.explore_radius))
    return tribe


def add_ai_tribe(world: World, *, rules: RulesConfig = DEFAULT_RULES) -> Tribe:
    """Place a new AI tribe on the first free starting location.

    The newcomer is at war with every existing tribe, human and AI alike.

    Raises:
        NoAvailableStartLocation: If every starting location is occupied.
    """

    start = world.free_starting_location()
    if start is None:
        raise NoAvailableStartLocation()

    rng = make_rng(generate_seed(world.map_seed, world.turn, f"ai_tribe:{len(world.tribes)}"))
    tribe = generate_ai_tribe(
        start,
        [t.tribe_name for t in world.tribes],
        rng=rng,
        used_colors=[t.color for t in world.tribes],
        rules=rules,
    )
    diplomacy.establish_relations(world, tribe, default_status=DiplomaticStatus.WAR)
    world.tribes.append(tribe)
    logger.info("AI tribe added: %s at %s", tribe.tribe_name, tribe.location)
    return tribe


def _plan_actions(
    tribe: Tribe,
    map_hexes: Sequence[Hex],
    rng: random.Random,
    rules: RulesConfig,
) -> list[GameAction]:
    home = tribe.garrisons.get(tribe.location)
    if home is None or home.troops <= 0:
        return [GameAction(id=f"action-{uuid4().hex[:12]}", action_type=ActionType.REST)]

    origin = parse_coord(tribe.location)
    frontier: dict[int, list[str]] = {}
    for h in map_hexes:
        if h.terrain == TerrainType.WATER or h.coord in tribe.explored_hexes:
            continue
        distance = abs(h.q - origin.q) + abs(h.r - origin.r)
        frontier.setdefault(distance, []).append(h.coord)
    if not frontier:
        return [GameAction(id=f"action-{uuid4().hex[:12]}", action_type=ActionType.REST)]

    return [
        GameAction(
            id=f"action-{uuid4().hex[:12]}",
            action_type=ActionType.SCOUT,
            action_data={
                "start": tribe.location,
                "target": rng.choice(frontier[min(frontier)]),
                "troops": min(home.troops, rules.tribe.ai_scout_troops),
            },
        )
    ]


def generate_ai_actions(
    tribe: Tribe,
    all_tribes: Sequence[Tribe],
    map_hexes: Sequence[Hex],
    *,
    rng: random.Random,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[GameAction]:
    """Plan an AI tribe's actions for the current turn.

    Scouts the nearest unexplored, passable hex when the home garrison
    has troops, otherwise rests.  Never raises: any failure is logged and
    yields an empty plan so turn advance is never interrupted.
    """

    try:
        return _plan_actions(tribe, map_hexes, rng, rules)
    except Exception:
        logger.exception(
            "failed to generate AI actions for tribe %s (%d tribes known)",
            tribe.id,
            len(all_tribes),
        )
        return []

"""Turn submission and global turn orchestration.

Each tribe moves through two states per turn:

* planning (``turn_submitted`` is False): actions may be (re)submitted
* submitted (``turn_submitted`` is True): actions are locked until advance

:func:`advance_turn` back-fills AI plans and resolves the turn on a copy of
the world, so a failure leaves the caller's world untouched.
:func:`process_global_turn` is the only code path that changes
``World.turn``.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable

from radix_tribes.domain import ai, diplomacy
from radix_tribes.domain.errors import TurnProcessingError, UnknownTribe
from radix_tribes.domain.models import (
    GameAction,
    JourneyResponse,
    Tribe,
    TribeTurnRecord,
    TurnHistoryEntry,
    World,
)
from radix_tribes.domain.rules_config import DEFAULT_RULES, RulesConfig
from radix_tribes.utils.rng import generate_seed, make_rng

logger = logging.getLogger(__name__)


def submit_turn(
    world: World,
    tribe_id: str,
    actions: Iterable[GameAction],
    journey_responses: Iterable[JourneyResponse] = (),
) -> Tribe:
    """Record a tribe's plan for this turn and lock it.

    A second submission before the turn advances replaces the first.

    Raises:
        UnknownTribe: If no tribe has ``tribe_id``.
    """

    tribe = world.find_tribe(tribe_id)
    if tribe is None:
        raise UnknownTribe(tribe_id)
    tribe.actions = list(actions)
    tribe.journey_responses = list(journey_responses)
    tribe.turn_submitted = True
    logger.info("turn %d submitted for tribe %s", world.turn, tribe.tribe_name)
    return tribe


def backfill_ai_actions(world: World, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Plan and lock every AI tribe that has not submitted yet.

    Returns the number of tribes back-filled.
    """

    filled = 0
    for tribe in world.tribes:
        if not tribe.is_ai or tribe.turn_submitted:
            continue
        rng = make_rng(generate_seed(world.map_seed, world.turn, f"ai_actions:{tribe.id}"))
        tribe.actions = ai.generate_ai_actions(
            tribe, world.tribes, world.map_hexes, rng=rng, rules=rules
        )
        tribe.turn_submitted = True
        filled += 1
    return filled


def _history_entry(world: World) -> TurnHistoryEntry:
    records = [
        TribeTurnRecord(
            tribe_id=tribe.id,
            tribe_name=tribe.tribe_name,
            location=tribe.location,
            troops=sum(g.troops for g in tribe.garrisons.values()),
            garrison_count=len(tribe.garrisons),
            resources=copy.copy(tribe.global_resources),
        )
        for tribe in world.tribes
    ]
    return TurnHistoryEntry(turn=world.turn, tribe_records=records)


def process_global_turn(world: World, *, rules: RulesConfig = DEFAULT_RULES) -> World:
    """Resolve the current turn in place and move to the next one."""

    world.history.append(_history_entry(world))

    for tribe in world.tribes:
        tribe.last_turn_results = tribe.actions
        tribe.actions = []
        tribe.turn_submitted = False

    world.turn += 1

    for tribe in world.tribes:
        tribe.global_resources.apply(
            food=rules.turn.food_per_turn,
            scrap=rules.turn.scrap_per_turn,
            morale=rules.turn.morale_per_turn,
        )

    diplomacy.purge_expired_proposals(world)
    return world


def advance_turn(world: World, *, rules: RulesConfig = DEFAULT_RULES) -> World:
    """Back-fill AI plans and resolve the turn, returning the new world.

    The input world is never modified.

    Raises:
        TurnProcessingError: If anything fails while resolving the turn.
    """

    logger.info("processing turn %d", world.turn)
    try:
        advanced = copy.deepcopy(world)
        backfill_ai_actions(advanced, rules=rules)
        process_global_turn(advanced, rules=rules)
    except Exception as exc:
        logger.exception("failed to process turn %d; keeping previous world", world.turn)
        raise TurnProcessingError(f"Failed to process turn {world.turn}: {exc}") from exc
    logger.info("turn %d processed", advanced.turn)
    return advanced

"""Declarative rule configuration for the turn engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TurnRules:
    """Baseline per-turn resource accrual."""

    food_per_turn: int = 5
    scrap_per_turn: int = 2
    morale_per_turn: int = 0


@dataclass(frozen=True, slots=True)
class DiplomacyRules:
    """Proposal lifetime."""

    proposal_lifetime_turns: int = 3


@dataclass(frozen=True, slots=True)
class MapRules:
    """Procedural map generation constants."""

    default_radius: int = 40
    bounds_factor: float = 1.5
    min_starting_locations: int = 5
    start_zone_fraction: float = 1 / 3
    start_pick_chance: float = 0.2
    fallback_zone_fraction: float = 0.5
    poi_chance: float = 0.05


@dataclass(frozen=True, slots=True)
class TribeRules:
    """Starting values for new tribes."""

    initial_food: int = 100
    initial_scrap: int = 20
    initial_morale: int = 50
    initial_troops: int = 20
    initial_weapons: int = 10
    explore_radius: int = 2
    ai_base_stat: int = 5
    max_stat_points: int = 25
    min_stat_value: int = 1
    ai_scout_troops: int = 5


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Aggregate rule configuration passed to engine functions."""

    turn: TurnRules = TurnRules()
    diplomacy: DiplomacyRules = DiplomacyRules()
    map: MapRules = MapRules()
    tribe: TribeRules = TribeRules()


DEFAULT_RULES = RulesConfig()

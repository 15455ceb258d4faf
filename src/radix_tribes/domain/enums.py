"""Enumerations used across the Radix Tribes domain."""

from __future__ import annotations

from enum import StrEnum


class TerrainType(StrEnum):
    """Closed set of terrain kinds a hex can carry."""

    PLAINS = "Plains"
    DESERT = "Desert"
    MOUNTAINS = "Mountains"
    FOREST = "Forest"
    RUINS = "Ruins"
    WASTELAND = "Wasteland"
    WATER = "Water"
    RADIATION = "Radiation"
    CRATER = "Crater"
    SWAMP = "Swamp"


class PoiType(StrEnum):
    """Point-of-interest kinds that may sit on a hex."""

    SCRAPYARD = "Scrapyard"
    FOOD_SOURCE = "Food Source"
    WEAPONS_CACHE = "WeaponsCache"
    RESEARCH_LAB = "Research Lab"
    SETTLEMENT = "Settlement"
    OUTPOST = "Outpost"
    RUINS = "Ruins POI"
    BANDIT_CAMP = "Bandit Camp"
    MINE = "Mine"
    VAULT = "Vault"
    BATTLEFIELD = "Battlefield"
    FACTORY = "Factory"
    CRATER = "Crater POI"
    RADIATION = "Radiation Zone"


class DiplomaticStatus(StrEnum):
    """Relation states between two tribes."""

    WAR = "War"
    NEUTRAL = "Neutral"
    ALLIANCE = "Alliance"


class RequestStatus(StrEnum):
    """Lifecycle of chief and asset requests."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class UserRole(StrEnum):
    PLAYER = "player"
    ADMIN = "admin"


class RationLevel(StrEnum):
    HARD = "Hard"
    NORMAL = "Normal"
    GENEROUS = "Generous"


class ActionType(StrEnum):
    """Action kinds the built-in AI emits."""

    SCOUT = "Scout"
    MOVE = "Move"
    REST = "Rest"
    RECRUIT = "Recruit"


class LoadSource(StrEnum):
    """Where a loaded game state came from."""

    PRIMARY = "primary"
    BACKUP = "backup"
    DEFAULT = "default"

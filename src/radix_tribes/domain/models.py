"""Dataclasses describing every Radix Tribes game entity.

The world is a plain in-memory aggregate owned by the game server.  Engine
functions receive it explicitly and mutate (or copy) it; persistence is a
thin adapter that serialises these dataclasses through pydantic.

Coordinates are stored as canonical ``"QQQ.RRR"`` keys (see
:mod:`radix_tribes.utils.hex_math`) wherever the world refers to a hex.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from radix_tribes.utils.hex_math import encode_coord

from .enums import (
    DiplomaticStatus,
    PoiType,
    RationLevel,
    RequestStatus,
    TerrainType,
    UserRole,
)

# --- Strongly typed identifiers -------------------------------------------------

TribeID = NewType("TribeID", str)
UserID = NewType("UserID", str)
ProposalID = NewType("ProposalID", str)
RequestID = NewType("RequestID", str)
JourneyID = NewType("JourneyID", str)


# --- Map ------------------------------------------------------------------------


@dataclass(slots=True)
class Hex:
    """Map hex tile."""

    q: int
    r: int
    terrain: TerrainType
    poi: PoiType | None = None

    @property
    def coord(self) -> str:
        return encode_coord(self.q, self.r)


@dataclass(slots=True)
class MapSettings:
    """Terrain bias weights used by the map generator."""

    biases: dict[TerrainType, float] = field(default_factory=dict)


# --- Tribes ---------------------------------------------------------------------


@dataclass(slots=True)
class TribeStats:
    charisma: int
    intelligence: int
    leadership: int
    strength: int

    @property
    def total(self) -> int:
        return self.charisma + self.intelligence + self.leadership + self.strength


@dataclass(slots=True)
class Chief:
    """Named leader that can be stationed in a garrison."""

    name: str
    description: str
    stats: TribeStats
    key_image_url: str = ""


@dataclass(slots=True)
class Garrison:
    """Troops, weapons and chiefs a tribe keeps at one hex."""

    troops: int = 0
    weapons: int = 0
    chiefs: list[Chief] = field(default_factory=list)


@dataclass(slots=True)
class GlobalResources:
    """Tribe-wide resource pool; no value ever drops below zero."""

    food: int = 0
    scrap: int = 0
    morale: int = 0

    def __post_init__(self) -> None:
        self.food = max(0, self.food)
        self.scrap = max(0, self.scrap)
        self.morale = max(0, self.morale)

    def apply(self, *, food: int = 0, scrap: int = 0, morale: int = 0) -> None:
        """Add (or subtract) amounts, clamping each pool at zero."""

        self.food = max(0, self.food + food)
        self.scrap = max(0, self.scrap + scrap)
        self.morale = max(0, self.morale + morale)


@dataclass(slots=True)
class ResearchProject:
    tech_id: str
    progress: int = 0
    assigned_troops: int = 0
    location: str | None = None


@dataclass(slots=True)
class GameAction:
    """One planned action submitted for the current turn."""

    id: str
    action_type: str
    action_data: dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class JourneyResponse:
    journey_id: JourneyID
    response: str


@dataclass(slots=True)
class DiplomaticRelation:
    status: DiplomaticStatus


@dataclass(slots=True)
class Tribe:
    """Player- or AI-controlled faction."""

    id: TribeID
    player_id: UserID
    player_name: str
    tribe_name: str
    icon: str
    color: str
    stats: TribeStats
    location: str
    is_ai: bool = False
    ai_type: str | None = None
    garrisons: dict[str, Garrison] = field(default_factory=dict)
    global_resources: GlobalResources = field(default_factory=GlobalResources)
    explored_hexes: set[str] = field(default_factory=set)
    ration_level: RationLevel = RationLevel.NORMAL
    completed_techs: list[str] = field(default_factory=list)
    assets: list[str] = field(default_factory=list)
    current_research: ResearchProject | None = None
    actions: list[GameAction] = field(default_factory=list)
    turn_submitted: bool = False
    last_turn_results: list[GameAction] = field(default_factory=list)
    journey_responses: list[JourneyResponse] = field(default_factory=list)
    diplomacy: dict[TribeID, DiplomaticRelation] = field(default_factory=dict)

    def explore(self, keys: set[str]) -> None:
        """Mark hexes as explored; the explored set only ever grows."""

        self.explored_hexes |= keys


# --- Diplomacy & requests -------------------------------------------------------


@dataclass(slots=True)
class Reparations:
    food: int = 0
    scrap: int = 0
    weapons: int = 0


@dataclass(slots=True)
class DiplomaticProposal:
    """Time-boxed offer to change the relation between two tribes."""

    id: ProposalID
    from_tribe_id: TribeID
    to_tribe_id: TribeID
    status_change_to: DiplomaticStatus
    created_on_turn: int
    expires_on_turn: int
    from_tribe_name: str
    reparations: Reparations | None = None


@dataclass(slots=True)
class ChiefRequest:
    id: RequestID
    tribe_id: TribeID
    chief_name: str
    status: RequestStatus = RequestStatus.PENDING


@dataclass(slots=True)
class AssetRequest:
    id: RequestID
    tribe_id: TribeID
    asset_name: str
    status: RequestStatus = RequestStatus.PENDING


@dataclass(slots=True)
class Journey:
    """Force travelling across the map on behalf of a tribe."""

    id: JourneyID
    owner_tribe_id: TribeID
    journey_type: str
    origin: str
    destination: str
    path: list[str] = field(default_factory=list)
    current_location: str | None = None
    force: Garrison = field(default_factory=Garrison)
    payload: dict[str, int] = field(default_factory=dict)
    arrival_turn: int | None = None
    status: str = "en_route"


# --- History --------------------------------------------------------------------


@dataclass(slots=True)
class TribeTurnRecord:
    tribe_id: TribeID
    tribe_name: str
    location: str
    troops: int
    garrison_count: int
    resources: GlobalResources


@dataclass(slots=True)
class TurnHistoryEntry:
    """Snapshot summary appended when a turn is resolved."""

    turn: int
    tribe_records: list[TribeTurnRecord] = field(default_factory=list)


# --- Aggregates -----------------------------------------------------------------


@dataclass(slots=True)
class World:
    """Root aggregate holding the whole shared game world."""

    turn: int
    map_seed: int
    map_settings: MapSettings
    map_hexes: list[Hex] = field(default_factory=list)
    starting_locations: list[str] = field(default_factory=list)
    tribes: list[Tribe] = field(default_factory=list)
    diplomatic_proposals: list[DiplomaticProposal] = field(default_factory=list)
    chief_requests: list[ChiefRequest] = field(default_factory=list)
    asset_requests: list[AssetRequest] = field(default_factory=list)
    journeys: list[Journey] = field(default_factory=list)
    history: list[TurnHistoryEntry] = field(default_factory=list)

    def find_tribe(self, tribe_id: str) -> Tribe | None:
        for tribe in self.tribes:
            if tribe.id == tribe_id:
                return tribe
        return None

    def occupied_locations(self) -> set[str]:
        return {tribe.location for tribe in self.tribes}

    def free_starting_location(self) -> str | None:
        """Return the first starting location no tribe occupies yet."""

        occupied = self.occupied_locations()
        for location in self.starting_locations:
            if location not in occupied:
                return location
        return None


@dataclass(slots=True)
class User:
    """Account record; verifiers use the placeholder hashing scheme."""

    id: UserID
    username: str
    password_hash: str
    role: UserRole
    security_question: str
    security_answer_hash: str


@dataclass(slots=True)
class GameState:
    """World plus account store, persisted and restored as one unit."""

    world: World
    users: list[User] = field(default_factory=list)

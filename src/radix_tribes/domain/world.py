"""World construction and administrative commands."""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeVar
from uuid import uuid4

from radix_tribes.domain import accounts, catalog, diplomacy
from radix_tribes.domain.enums import DiplomaticStatus, RequestStatus
from radix_tribes.domain.errors import (
    NoAvailableStartLocation,
    RequestAlreadyResolved,
    UnknownCatalogItem,
    UnknownRequest,
    UnknownTribe,
)
from radix_tribes.domain.mapgen import build_map
from radix_tribes.domain.models import (
    AssetRequest,
    ChiefRequest,
    GameState,
    Garrison,
    GlobalResources,
    Hex,
    MapSettings,
    RequestID,
    Tribe,
    TribeID,
    TribeStats,
    UserID,
    World,
)
from radix_tribes.domain.rules_config import DEFAULT_RULES, RulesConfig
from radix_tribes.utils.hex_math import hexes_in_range, parse_coord

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", ChiefRequest, AssetRequest)


@dataclass(slots=True)
class TribeProfile:
    """Player-chosen attributes of a new tribe."""

    player_id: UserID
    player_name: str
    tribe_name: str
    icon: str
    color: str
    stats: TribeStats


def default_map_settings() -> MapSettings:
    return MapSettings(biases=dict(catalog.DEFAULT_TERRAIN_BIASES))


def default_world(
    *,
    radius: int = DEFAULT_RULES.map.default_radius,
    seed: int | None = None,
    settings: MapSettings | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> World:
    """Build a fresh turn-1 world with a generated map.

    Map generation failures degrade to the single-hex fallback map, so this
    always returns a usable world.
    """

    map_seed = seed if seed is not None else int(time.time() * 1000)
    map_settings = settings or default_map_settings()
    generated = build_map(radius, map_seed, map_settings, rules=rules)
    return World(
        turn=1,
        map_seed=map_seed,
        map_settings=map_settings,
        map_hexes=generated.hexes,
        starting_locations=generated.starting_locations,
    )


def default_state(
    *,
    admin_username: str = "Admin",
    admin_password: str = "snoopy",
    radius: int = DEFAULT_RULES.map.default_radius,
    seed: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameState:
    """Fresh world plus an admin-only account store."""

    return GameState(
        world=default_world(radius=radius, seed=seed, rules=rules),
        users=[accounts.seed_admin(admin_username, admin_password)],
    )


def create_tribe(
    world: World,
    profile: TribeProfile,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> Tribe:
    """Place a human tribe on the first unoccupied starting location.

    Raises:
        NoAvailableStartLocation: If every starting location is taken; the
            world is left unchanged.
    """

    start = world.free_starting_location()
    if start is None:
        raise NoAvailableStartLocation()

    tribe = Tribe(
        id=TribeID(f"tribe-{uuid4().hex[:12]}"),
        player_id=profile.player_id,
        player_name=profile.player_name,
        tribe_name=profile.tribe_name,
        icon=profile.icon,
        color=profile.color,
        stats=copy.copy(profile.stats),
        location=start,
        garrisons={
            start: Garrison(troops=rules.tribe.initial_troops, weapons=rules.tribe.initial_weapons)
        },
        global_resources=GlobalResources(
            food=rules.tribe.initial_food,
            scrap=rules.tribe.initial_scrap,
            morale=rules.tribe.initial_morale,
        ),
    )
    tribe.explore(hexes_in_range(parse_coord(start), rules.tribe.explore_radius))
    diplomacy.establish_relations(world, tribe, default_status=DiplomaticStatus.NEUTRAL)
    world.tribes.append(tribe)
    logger.info("new tribe created: %s at %s", tribe.tribe_name, tribe.location)
    return tribe


# --- Chief & asset requests -----------------------------------------------------


def _require_tribe(world: World, tribe_id: str) -> Tribe:
    tribe = world.find_tribe(tribe_id)
    if tribe is None:
        raise UnknownTribe(tribe_id)
    return tribe


def _pending(requests: Iterable[RequestT], request_id: str) -> RequestT:
    for request in requests:
        if request.id == request_id:
            if request.status != RequestStatus.PENDING:
                raise RequestAlreadyResolved(f"Request {request_id} is already {request.status}.")
            return request
    raise UnknownRequest(request_id)


def request_chief(world: World, tribe_id: str, chief_name: str) -> ChiefRequest:
    """Queue a request for a catalog chief; an admin approves or denies it.

    Raises:
        UnknownTribe: If the tribe does not exist.
        UnknownCatalogItem: If no chief has that name.
    """

    tribe = _require_tribe(world, tribe_id)
    if catalog.get_chief(chief_name) is None:
        raise UnknownCatalogItem(chief_name)
    request = ChiefRequest(
        id=RequestID(f"req-{uuid4().hex[:12]}"), tribe_id=tribe.id, chief_name=chief_name
    )
    world.chief_requests.append(request)
    logger.info("chief requested for tribe %s: %s", tribe.tribe_name, chief_name)
    return request


def approve_chief(world: World, request_id: str) -> ChiefRequest:
    """Station the requested chief in the garrison at the tribe's location."""

    request = _pending(world.chief_requests, request_id)
    tribe = _require_tribe(world, request.tribe_id)
    chief = catalog.get_chief(request.chief_name)
    if chief is None:
        raise UnknownCatalogItem(request.chief_name)

    garrison = tribe.garrisons.setdefault(tribe.location, Garrison())
    garrison.chiefs.append(copy.deepcopy(chief))
    request.status = RequestStatus.APPROVED
    logger.info("chief approved: %s for tribe %s", chief.name, tribe.tribe_name)
    return request


def deny_chief(world: World, request_id: str) -> ChiefRequest:
    request = _pending(world.chief_requests, request_id)
    request.status = RequestStatus.DENIED
    logger.info("chief request denied: %s", request_id)
    return request


def request_asset(world: World, tribe_id: str, asset_name: str) -> AssetRequest:
    """Queue a request for a catalog asset.

    Raises:
        UnknownTribe: If the tribe does not exist.
        UnknownCatalogItem: If no asset has that name.
    """

    tribe = _require_tribe(world, tribe_id)
    if catalog.get_asset(asset_name) is None:
        raise UnknownCatalogItem(asset_name)
    request = AssetRequest(
        id=RequestID(f"asset-req-{uuid4().hex[:12]}"), tribe_id=tribe.id, asset_name=asset_name
    )
    world.asset_requests.append(request)
    logger.info("asset requested for tribe %s: %s", tribe.tribe_name, asset_name)
    return request


def approve_asset(world: World, request_id: str) -> AssetRequest:
    request = _pending(world.asset_requests, request_id)
    tribe = _require_tribe(world, request.tribe_id)
    tribe.assets.append(request.asset_name)
    request.status = RequestStatus.APPROVED
    logger.info("asset approved: %s for tribe %s", request.asset_name, tribe.tribe_name)
    return request


def deny_asset(world: World, request_id: str) -> AssetRequest:
    request = _pending(world.asset_requests, request_id)
    request.status = RequestStatus.DENIED
    logger.info("asset request denied: %s", request_id)
    return request


# --- Game administration --------------------------------------------------------


def update_map(world: World, hexes: list[Hex], starting_locations: list[str]) -> None:
    """Replace the map and its starting locations.

    Raises:
        MalformedCoordinate: If a starting location is not a coordinate key;
            the world is left unchanged.
    """

    for location in starting_locations:
        parse_coord(location)
    world.map_hexes = list(hexes)
    world.starting_locations = list(dict.fromkeys(starting_locations))
    logger.info(
        "map updated: %d hexes, %d starting locations",
        len(world.map_hexes),
        len(world.starting_locations),
    )


def start_new_game(world: World) -> None:
    """Clear every tribe and turn artefact, keeping the current map."""

    world.tribes = []
    world.chief_requests = []
    world.asset_requests = []
    world.journeys = []
    world.diplomatic_proposals = []
    world.history = []
    world.turn = 1
    logger.info("new game started")


def load_backup(state: GameState, snapshot: GameState) -> None:
    """Replace the live world and accounts with a restored snapshot."""

    state.world = snapshot.world
    state.users = snapshot.users
    if not diplomacy.relations_symmetric(state.world):
        logger.warning("restored backup has asymmetric diplomatic relations")
    logger.info(
        "backup loaded: %d users, %d tribes", len(state.users), len(state.world.tribes)
    )

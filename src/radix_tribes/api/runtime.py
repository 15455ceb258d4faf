"""Runtime primitives backing the Radix Tribes server.

:class:`GameServer` owns the single in-memory :class:`GameState`.  Commands
are applied strictly one at a time under an ``asyncio.Lock``; each
successful mutation schedules a save and pushes a full world snapshot to
every connected observer.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol, assert_never

from pydantic import TypeAdapter

from radix_tribes.api.commands import (
    AcceptProposal,
    AddAITribe,
    AdvanceTurn,
    ApproveAsset,
    ApproveChief,
    Command,
    CommandResult,
    CreateTribe,
    DeclareWar,
    DenyAsset,
    DenyChief,
    LoadBackup,
    ProposeAlliance,
    RejectProposal,
    RemovePlayer,
    RequestAsset,
    RequestChief,
    StartNewGame,
    SubmitTurn,
    SueForPeace,
    UpdateMap,
)
from radix_tribes.config import Settings, get_settings
from radix_tribes.domain import accounts, ai, diplomacy, turn
from radix_tribes.domain import world as world_rules
from radix_tribes.domain.enums import LoadSource
from radix_tribes.domain.errors import RadixTribesError, ServerShuttingDown
from radix_tribes.domain.models import (
    GameAction,
    GameState,
    Hex,
    JourneyID,
    JourneyResponse,
    Reparations,
    TribeStats,
    User,
    UserID,
    World,
)
from radix_tribes.domain.rules_config import DEFAULT_RULES, RulesConfig
from radix_tribes.repository import LoadResult, PersistenceManager, decode_state

logger = logging.getLogger(__name__)

WORLD_ADAPTER: TypeAdapter[World] = TypeAdapter(World)


class Observer(Protocol):
    """Anything that can receive pushed JSON messages (e.g. a WebSocket)."""

    async def send_json(self, data: Any) -> None: ...


class ConnectionHub:
    """Set of connected observers receiving snapshot pushes."""

    def __init__(self) -> None:
        self._observers: set[Observer] = set()

    def __len__(self) -> int:
        return len(self._observers)

    def register(self, observer: Observer) -> None:
        self._observers.add(observer)

    def unregister(self, observer: Observer) -> None:
        self._observers.discard(observer)

    async def send(self, observer: Observer, event: str, data: Any) -> None:
        await observer.send_json({"event": event, "data": data})

    async def broadcast(self, event: str, data: Any) -> None:
        for observer in list(self._observers):
            try:
                await self.send(observer, event, data)
            except Exception:
                logger.warning("dropping observer after failed %s push", event, exc_info=True)
                self._observers.discard(observer)

    async def close_all(self) -> None:
        for observer in list(self._observers):
            close = getattr(observer, "close", None)
            if close is not None:
                try:
                    await close()
                except Exception:
                    logger.debug("observer already closed", exc_info=True)
        self._observers.clear()


def world_snapshot(world: World) -> dict[str, Any]:
    """JSON-compatible full world snapshot, as pushed to clients."""

    return WORLD_ADAPTER.dump_python(world, mode="json")


class GameServer:
    """Authoritative owner of the game state."""

    def __init__(
        self,
        persistence: PersistenceManager,
        *,
        hub: ConnectionHub | None = None,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self.persistence = persistence
        self.hub = hub or ConnectionHub()
        self.rules = rules
        self._state: GameState | None = None
        self._lock = asyncio.Lock()
        self._accepting = True

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("GameServer.start() has not been called")
        return self._state

    @property
    def world(self) -> World:
        return self.state.world

    @property
    def accepting(self) -> bool:
        return self._accepting

    # --- Lifecycle --------------------------------------------------------------

    def start(self) -> LoadResult:
        """Load the persisted state (or defaults) into memory."""

        result = self.persistence.load()
        self._state = result.state
        if not diplomacy.relations_symmetric(result.state.world):
            logger.warning("loaded world has asymmetric diplomatic relations")
        logger.info(
            "game state ready from %s: turn %d, %d tribes",
            result.source,
            result.state.world.turn,
            len(result.state.world.tribes),
        )
        return result

    async def startup(self) -> LoadResult:
        result = self.start()
        if result.source == LoadSource.DEFAULT:
            self.persistence.schedule_save(self.state, immediate=True)
        return result

    async def shutdown(self, *, timeout: float) -> bool:
        """Stop accepting commands, close observers and save one last time."""

        async with self._lock:
            self._accepting = False
        logger.info("shutting down; rejecting new commands")
        await self.hub.close_all()
        if self._state is None:
            return True
        return await self.persistence.shutdown(self._state, timeout=timeout)

    # --- Commands ---------------------------------------------------------------

    async def execute(self, command: Command) -> CommandResult:
        """Apply one command, then save and broadcast on success.

        Engine errors leave the world unchanged and come back as
        ``ok=False`` results.
        """

        async with self._lock:
            try:
                if not self._accepting:
                    raise ServerShuttingDown()
                immediate = self._apply(command)
            except RadixTribesError as exc:
                logger.warning("command %s failed: %s", command.type, exc)
                return CommandResult(
                    ok=False, command=command.type, detail=str(exc), turn=self.world.turn
                )
            self.persistence.schedule_save(self.state, immediate=immediate)
            await self.broadcast_state()
            return CommandResult(ok=True, command=command.type, turn=self.world.turn)

    def _apply(self, command: Command) -> bool:
        """Mutate the state for ``command``; returns True when the save is urgent."""

        state = self.state
        world = state.world
        match command:
            case SubmitTurn():
                turn.submit_turn(
                    world,
                    command.tribe_id,
                    [
                        GameAction(
                            id=action.id,
                            action_type=action.action_type,
                            action_data=dict(action.action_data),
                        )
                        for action in command.actions
                    ],
                    [
                        JourneyResponse(journey_id=JourneyID(r.journey_id), response=r.response)
                        for r in command.journey_responses
                    ],
                )
            case AdvanceTurn():
                state.world = turn.advance_turn(world, rules=self.rules)
                return True
            case CreateTribe():
                profile = command.profile
                world_rules.create_tribe(
                    world,
                    world_rules.TribeProfile(
                        player_id=UserID(profile.player_id),
                        player_name=profile.player_name,
                        tribe_name=profile.tribe_name,
                        icon=profile.icon,
                        color=profile.color,
                        stats=TribeStats(**profile.stats.model_dump()),
                    ),
                    rules=self.rules,
                )
            case ProposeAlliance():
                diplomacy.propose_alliance(
                    world, command.from_tribe_id, command.to_tribe_id, rules=self.rules
                )
            case SueForPeace():
                reparations = (
                    Reparations(**command.reparations.model_dump())
                    if command.reparations is not None
                    else None
                )
                diplomacy.sue_for_peace(
                    world,
                    command.from_tribe_id,
                    command.to_tribe_id,
                    reparations,
                    rules=self.rules,
                )
            case DeclareWar():
                diplomacy.declare_war(world, command.from_tribe_id, command.to_tribe_id)
            case AcceptProposal():
                diplomacy.accept_proposal(world, command.proposal_id)
            case RejectProposal():
                diplomacy.reject_proposal(world, command.proposal_id)
            case RequestChief():
                world_rules.request_chief(world, command.tribe_id, command.chief_name)
            case ApproveChief():
                world_rules.approve_chief(world, command.request_id)
            case DenyChief():
                world_rules.deny_chief(world, command.request_id)
            case RequestAsset():
                world_rules.request_asset(world, command.tribe_id, command.asset_name)
            case ApproveAsset():
                world_rules.approve_asset(world, command.request_id)
            case DenyAsset():
                world_rules.deny_asset(world, command.request_id)
            case AddAITribe():
                ai.add_ai_tribe(world, rules=self.rules)
            case UpdateMap():
                world_rules.update_map(
                    world,
                    [Hex(q=h.q, r=h.r, terrain=h.terrain, poi=h.poi) for h in command.map_hexes],
                    command.starting_locations,
                )
            case StartNewGame():
                world_rules.start_new_game(world)
            case LoadBackup():
                world_rules.load_backup(state, decode_state(command.snapshot))
                return True
            case RemovePlayer():
                accounts.remove_player(state, command.user_id)
            case _:
                assert_never(command)
        return False

    # --- Accounts ---------------------------------------------------------------

    async def register_user(
        self,
        username: str,
        password: str,
        *,
        security_question: str | None = None,
        security_answer: str | None = None,
    ) -> User:
        async with self._lock:
            if not self._accepting:
                raise ServerShuttingDown()
            user = accounts.register_user(
                self.state.users,
                username,
                password,
                security_question=security_question,
                security_answer=security_answer,
            )
            self.persistence.schedule_save(self.state)
            await self.broadcast_users()
        return user

    async def reset_password(self, username: str, new_password: str) -> User:
        async with self._lock:
            if not self._accepting:
                raise ServerShuttingDown()
            user = accounts.reset_password(self.state.users, username, new_password)
            self.persistence.schedule_save(self.state)
        return user

    def authenticate(self, username: str, password: str) -> User:
        return accounts.authenticate(self.state.users, username, password)

    def security_question(self, username: str) -> str:
        return accounts.get_security_question(self.state.users, username)

    def verify_security_answer(self, username: str, answer: str) -> bool:
        return accounts.verify_security_answer(self.state.users, username, answer)

    # --- Observers --------------------------------------------------------------

    async def attach(self, observer: Observer) -> None:
        """Send ``initial_state`` and start pushing updates to ``observer``.

        Runs under the command lock so no mutation lands between the snapshot
        and the registration.
        """

        async with self._lock:
            await self.hub.send(observer, "initial_state", self.initial_state())
            self.hub.register(observer)

    def detach(self, observer: Observer) -> None:
        self.hub.unregister(observer)

    # --- Snapshots --------------------------------------------------------------

    def initial_state(self) -> dict[str, Any]:
        return {
            "game_state": world_snapshot(self.world),
            "users": accounts.public_users(self.state.users),
        }

    async def broadcast_state(self) -> None:
        await self.hub.broadcast("gamestate_updated", world_snapshot(self.world))
        await self.broadcast_users()

    async def broadcast_users(self) -> None:
        await self.hub.broadcast("users_updated", accounts.public_users(self.state.users))


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, rules: RulesConfig = DEFAULT_RULES
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.persistence = PersistenceManager(
            self.settings.primary_path,
            self.settings.backup_path,
            default_factory=self._default_state,
            debounce_seconds=self.settings.save_debounce_seconds,
        )
        self.server = GameServer(self.persistence, rules=rules)

    def _default_state(self) -> GameState:
        return world_rules.default_state(
            admin_username=self.settings.admin_username,
            admin_password=self.settings.admin_password,
            radius=self.settings.map_radius,
            seed=self.settings.map_seed,
            rules=self.rules,
        )

    async def startup(self) -> None:
        await self.server.startup()

    async def shutdown(self) -> None:
        await self.server.shutdown(timeout=self.settings.shutdown_timeout_seconds)


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()

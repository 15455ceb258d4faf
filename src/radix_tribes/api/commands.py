"""Client commands as a closed, tagged union.

Every command carries a literal ``type`` tag; :data:`COMMAND_ADAPTER`
validates raw JSON into exactly one of the command models, and the server
dispatches over them with an exhaustive ``match``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, model_validator

from radix_tribes.domain.enums import PoiType, TerrainType
from radix_tribes.domain.rules_config import DEFAULT_RULES


class ActionPayload(BaseModel):
    id: str = Field(min_length=1)
    action_type: str = Field(min_length=1)
    action_data: dict[str, Any] = Field(default_factory=dict)


class JourneyResponsePayload(BaseModel):
    journey_id: str
    response: str


class StatsPayload(BaseModel):
    charisma: int = Field(ge=DEFAULT_RULES.tribe.min_stat_value)
    intelligence: int = Field(ge=DEFAULT_RULES.tribe.min_stat_value)
    leadership: int = Field(ge=DEFAULT_RULES.tribe.min_stat_value)
    strength: int = Field(ge=DEFAULT_RULES.tribe.min_stat_value)

    @model_validator(mode="after")
    def _check_total(self) -> StatsPayload:
        total = self.charisma + self.intelligence + self.leadership + self.strength
        if total > DEFAULT_RULES.tribe.max_stat_points:
            raise ValueError(
                f"stat total {total} exceeds {DEFAULT_RULES.tribe.max_stat_points} points"
            )
        return self


class TribeProfilePayload(BaseModel):
    player_id: str = Field(min_length=1)
    player_name: str = Field(min_length=1)
    tribe_name: str = Field(min_length=1)
    icon: str = "skull"
    color: str = "#A0AEC0"
    stats: StatsPayload


class ReparationsPayload(BaseModel):
    food: int = Field(default=0, ge=0)
    scrap: int = Field(default=0, ge=0)
    weapons: int = Field(default=0, ge=0)


class HexPayload(BaseModel):
    q: int
    r: int
    terrain: TerrainType
    poi: PoiType | None = None


# --- Commands -------------------------------------------------------------------


class SubmitTurn(BaseModel):
    type: Literal["submit_turn"] = "submit_turn"
    tribe_id: str
    actions: list[ActionPayload] = Field(default_factory=list)
    journey_responses: list[JourneyResponsePayload] = Field(default_factory=list)


class AdvanceTurn(BaseModel):
    type: Literal["advance_turn"] = "advance_turn"


class CreateTribe(BaseModel):
    type: Literal["create_tribe"] = "create_tribe"
    profile: TribeProfilePayload


class ProposeAlliance(BaseModel):
    type: Literal["propose_alliance"] = "propose_alliance"
    from_tribe_id: str
    to_tribe_id: str


class SueForPeace(BaseModel):
    type: Literal["sue_for_peace"] = "sue_for_peace"
    from_tribe_id: str
    to_tribe_id: str
    reparations: ReparationsPayload | None = None


class DeclareWar(BaseModel):
    type: Literal["declare_war"] = "declare_war"
    from_tribe_id: str
    to_tribe_id: str


class AcceptProposal(BaseModel):
    type: Literal["accept_proposal"] = "accept_proposal"
    proposal_id: str


class RejectProposal(BaseModel):
    type: Literal["reject_proposal"] = "reject_proposal"
    proposal_id: str


class RequestChief(BaseModel):
    type: Literal["request_chief"] = "request_chief"
    tribe_id: str
    chief_name: str


class ApproveChief(BaseModel):
    type: Literal["approve_chief"] = "approve_chief"
    request_id: str


class DenyChief(BaseModel):
    type: Literal["deny_chief"] = "deny_chief"
    request_id: str


class RequestAsset(BaseModel):
    type: Literal["request_asset"] = "request_asset"
    tribe_id: str
    asset_name: str


class ApproveAsset(BaseModel):
    type: Literal["approve_asset"] = "approve_asset"
    request_id: str


class DenyAsset(BaseModel):
    type: Literal["deny_asset"] = "deny_asset"
    request_id: str


class AddAITribe(BaseModel):
    type: Literal["add_ai_tribe"] = "add_ai_tribe"


class UpdateMap(BaseModel):
    type: Literal["update_map"] = "update_map"
    map_hexes: list[HexPayload]
    starting_locations: list[str]


class StartNewGame(BaseModel):
    type: Literal["start_new_game"] = "start_new_game"


class LoadBackup(BaseModel):
    type: Literal["load_backup"] = "load_backup"
    snapshot: dict[str, Any]


class RemovePlayer(BaseModel):
    type: Literal["remove_player"] = "remove_player"
    user_id: str


Command = Annotated[
    SubmitTurn
    | AdvanceTurn
    | CreateTribe
    | ProposeAlliance
    | SueForPeace
    | DeclareWar
    | AcceptProposal
    | RejectProposal
    | RequestChief
    | ApproveChief
    | DenyChief
    | RequestAsset
    | ApproveAsset
    | DenyAsset
    | AddAITribe
    | UpdateMap
    | StartNewGame
    | LoadBackup
    | RemovePlayer,
    Field(discriminator="type"),
]

COMMAND_ADAPTER: TypeAdapter[Command] = TypeAdapter(Command)


class CommandResult(BaseModel):
    """Outcome reported to the client that issued a command."""

    ok: bool
    command: str
    detail: str | None = None
    turn: int

"""Diplomacy rules: relations between tribes and the proposal lifecycle.

Relations are stored on both tribes (``tribe.diplomacy[other_id]``) and are
always written in pairs, so ``a.diplomacy[b].status`` equals
``b.diplomacy[a].status`` at every observable point.  Alliance and peace
only come about through accepted proposals; war is declared unilaterally.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from radix_tribes.domain.enums import DiplomaticStatus
from radix_tribes.domain.errors import (
    InvalidDiplomaticAction,
    UnknownProposal,
    UnknownTribe,
)
from radix_tribes.domain.models import (
    DiplomaticProposal,
    DiplomaticRelation,
    ProposalID,
    Reparations,
    Tribe,
    World,
)
from radix_tribes.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


def _require_tribe(world: World, tribe_id: str) -> Tribe:
    tribe = world.find_tribe(tribe_id)
    if tribe is None:
        raise UnknownTribe(tribe_id)
    return tribe


def _require_pair(world: World, from_tribe_id: str, to_tribe_id: str) -> tuple[Tribe, Tribe]:
    if from_tribe_id == to_tribe_id:
        raise InvalidDiplomaticAction("A tribe cannot negotiate with itself.")
    return _require_tribe(world, from_tribe_id), _require_tribe(world, to_tribe_id)


def set_relation(a: Tribe, b: Tribe, status: DiplomaticStatus) -> None:
    """Write the same status on both sides of a tribe pair."""

    a.diplomacy[b.id] = DiplomaticRelation(status=status)
    b.diplomacy[a.id] = DiplomaticRelation(status=status)


def establish_relations(
    world: World,
    newcomer: Tribe,
    *,
    default_status: DiplomaticStatus = DiplomaticStatus.NEUTRAL,
) -> None:
    """Seed mutual relations between a new tribe and every existing tribe.

    AI tribes on either side always start at war; human pairs start at
    ``default_status``.
    """

    for existing in world.tribes:
        if existing.id == newcomer.id:
            continue
        if existing.is_ai or newcomer.is_ai:
            status = DiplomaticStatus.WAR
        else:
            status = default_status
        set_relation(newcomer, existing, status)


def drop_relations(world: World, tribe_id: str) -> None:
    """Remove every relation entry that points at ``tribe_id``."""

    for tribe in world.tribes:
        tribe.diplomacy.pop(tribe_id, None)


def _create_proposal(
    world: World,
    from_tribe: Tribe,
    to_tribe: Tribe,
    status: DiplomaticStatus,
    rules: RulesConfig,
    reparations: Reparations | None = None,
) -> DiplomaticProposal:
    proposal = DiplomaticProposal(
        id=ProposalID(f"proposal-{uuid4().hex[:12]}"),
        from_tribe_id=from_tribe.id,
        to_tribe_id=to_tribe.id,
        status_change_to=status,
        created_on_turn=world.turn,
        expires_on_turn=world.turn + rules.diplomacy.proposal_lifetime_turns,
        from_tribe_name=from_tribe.tribe_name,
        reparations=reparations,
    )
    world.diplomatic_proposals.append(proposal)
    return proposal


def propose_alliance(
    world: World,
    from_tribe_id: str,
    to_tribe_id: str,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> DiplomaticProposal:
    """Offer an alliance; the target tribe may accept until the proposal expires."""

    from_tribe, to_tribe = _require_pair(world, from_tribe_id, to_tribe_id)
    proposal = _create_proposal(world, from_tribe, to_tribe, DiplomaticStatus.ALLIANCE, rules)
    logger.info("alliance proposed: %s -> %s", from_tribe.tribe_name, to_tribe.tribe_name)
    return proposal


def sue_for_peace(
    world: World,
    from_tribe_id: str,
    to_tribe_id: str,
    reparations: Reparations | None = None,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> DiplomaticProposal:
    """Offer peace (a return to ``Neutral``), optionally with reparations."""

    from_tribe, to_tribe = _require_pair(world, from_tribe_id, to_tribe_id)
    proposal = _create_proposal(
        world, from_tribe, to_tribe, DiplomaticStatus.NEUTRAL, rules, reparations
    )
    logger.info("peace proposed: %s -> %s", from_tribe.tribe_name, to_tribe.tribe_name)
    return proposal


def declare_war(world: World, from_tribe_id: str, to_tribe_id: str) -> None:
    """Set both sides of the pair to ``War`` immediately."""

    from_tribe, to_tribe = _require_pair(world, from_tribe_id, to_tribe_id)
    set_relation(from_tribe, to_tribe, DiplomaticStatus.WAR)
    logger.info("war declared: %s against %s", from_tribe.tribe_name, to_tribe.tribe_name)


def _find_proposal(world: World, proposal_id: str) -> DiplomaticProposal:
    for proposal in world.diplomatic_proposals:
        if proposal.id == proposal_id:
            return proposal
    raise UnknownProposal(proposal_id)


def accept_proposal(world: World, proposal_id: str) -> DiplomaticProposal:
    """Apply a proposal's status to both tribes and remove it."""

    proposal = _find_proposal(world, proposal_id)
    from_tribe = _require_tribe(world, proposal.from_tribe_id)
    to_tribe = _require_tribe(world, proposal.to_tribe_id)

    set_relation(from_tribe, to_tribe, proposal.status_change_to)
    world.diplomatic_proposals = [p for p in world.diplomatic_proposals if p.id != proposal.id]
    logger.info(
        "proposal %s accepted: %s and %s are now %s",
        proposal.id,
        from_tribe.tribe_name,
        to_tribe.tribe_name,
        proposal.status_change_to,
    )
    return proposal


def reject_proposal(world: World, proposal_id: str) -> DiplomaticProposal:
    """Remove a proposal without changing any relation."""

    proposal = _find_proposal(world, proposal_id)
    world.diplomatic_proposals = [p for p in world.diplomatic_proposals if p.id != proposal.id]
    logger.info("proposal %s rejected", proposal.id)
    return proposal


def purge_expired_proposals(world: World) -> list[DiplomaticProposal]:
    """Drop proposals past their expiry turn or referencing a missing tribe.

    Returns the purged proposals.
    """

    tribe_ids = {tribe.id for tribe in world.tribes}
    kept: list[DiplomaticProposal] = []
    purged: list[DiplomaticProposal] = []
    for proposal in world.diplomatic_proposals:
        inert = proposal.from_tribe_id not in tribe_ids or proposal.to_tribe_id not in tribe_ids
        if inert or proposal.expires_on_turn < world.turn:
            purged.append(proposal)
        else:
            kept.append(proposal)
    world.diplomatic_proposals = kept
    if purged:
        logger.debug("purged %d diplomatic proposals", len(purged))
    return purged


def relations_symmetric(world: World) -> bool:
    """Return True when every tribe pair has matching entries on both sides."""

    for a in world.tribes:
        for b in world.tribes:
            if a.id == b.id:
                continue
            left = a.diplomacy.get(b.id)
            right = b.diplomacy.get(a.id)
            if left is None or right is None or left.status != right.status:
                return False
    return True

"""Tests for turn submission and global turn processing."""

import copy

import pytest
from conftest import make_profile

from radix_tribes.domain import ai, diplomacy, turn
from radix_tribes.domain.enums import ActionType, DiplomaticStatus
from radix_tribes.domain.errors import TurnProcessingError, UnknownTribe
from radix_tribes.domain.models import GameAction, JourneyID, JourneyResponse
from radix_tribes.domain.world import create_tribe


def _scout(action_id: str = "a-1") -> GameAction:
    return GameAction(
        id=action_id,
        action_type=ActionType.SCOUT,
        action_data={"start": "000.000", "target": "003.000", "troops": 2},
    )


class TestSubmitTurn:
    def test_records_and_locks(self, world) -> None:
        tribe = create_tribe(world, make_profile())
        turn.submit_turn(
            world,
            tribe.id,
            [_scout()],
            [JourneyResponse(journey_id=JourneyID("j-1"), response="accept")],
        )
        assert tribe.turn_submitted is True
        assert tribe.actions == [_scout()]
        assert tribe.journey_responses[0].response == "accept"

    def test_resubmission_replaces_plan(self, world) -> None:
        tribe = create_tribe(world, make_profile())
        turn.submit_turn(world, tribe.id, [_scout("first")])
        turn.submit_turn(world, tribe.id, [_scout("second")])
        assert [a.id for a in tribe.actions] == ["second"]

    def test_unknown_tribe(self, world) -> None:
        with pytest.raises(UnknownTribe):
            turn.submit_turn(world, "tribe-missing", [])


class TestAdvanceTurn:
    def test_increments_turn_and_unlocks(self, world) -> None:
        tribe = create_tribe(world, make_profile())
        turn.submit_turn(world, tribe.id, [_scout()])

        advanced = turn.advance_turn(world)

        assert advanced.turn == world.turn + 1
        moved = advanced.find_tribe(tribe.id)
        assert moved.turn_submitted is False
        assert moved.actions == []
        assert moved.last_turn_results == [_scout()]

    def test_input_world_untouched(self, world) -> None:
        tribe = create_tribe(world, make_profile())
        turn.submit_turn(world, tribe.id, [_scout()])
        before = copy.deepcopy(world)

        turn.advance_turn(world)

        assert world == before

    def test_accrues_resources(self, world) -> None:
        tribe = create_tribe(world, make_profile())
        food, scrap = tribe.global_resources.food, tribe.global_resources.scrap

        advanced = turn.advance_turn(world)

        resources = advanced.find_tribe(tribe.id).global_resources
        assert resources.food == food + 5
        assert resources.scrap == scrap + 2

    def test_history_records_the_resolved_turn(self, world) -> None:
        create_tribe(world, make_profile())
        advanced = turn.advance_turn(world)
        assert [entry.turn for entry in advanced.history] == [1]
        assert advanced.history[0].tribe_records[0].troops == 20

    def test_ai_tribes_are_backfilled(self, world) -> None:
        raider = ai.add_ai_tribe(world)
        advanced = turn.advance_turn(world)
        archived = advanced.find_tribe(raider.id).last_turn_results
        assert len(archived) == 1
        assert archived[0].action_type in {ActionType.SCOUT, ActionType.REST}

    def test_submitted_ai_plan_is_kept(self, world) -> None:
        raider = ai.add_ai_tribe(world)
        turn.submit_turn(world, raider.id, [_scout("manual")])
        advanced = turn.advance_turn(world)
        assert [a.id for a in advanced.find_tribe(raider.id).last_turn_results] == ["manual"]

    def test_failure_leaves_world_unchanged(self, world, monkeypatch) -> None:
        create_tribe(world, make_profile())
        before = copy.deepcopy(world)

        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(turn.diplomacy, "purge_expired_proposals", explode)
        with pytest.raises(TurnProcessingError):
            turn.advance_turn(world)
        assert world == before

    def test_unanswered_alliance_lapses_after_four_advances(self, world) -> None:
        a = create_tribe(world, make_profile("Ash Walkers", "user-1"))
        b = create_tribe(world, make_profile("Glass Eaters", "user-2"))
        world.turn = 5
        proposal = diplomacy.propose_alliance(world, a.id, b.id)
        assert proposal.expires_on_turn == 8

        for _ in range(4):
            world = turn.advance_turn(world)

        assert world.turn == 9
        assert world.diplomatic_proposals == []
        a_after, b_after = world.find_tribe(a.id), world.find_tribe(b.id)
        assert a_after.diplomacy[b.id].status == DiplomaticStatus.NEUTRAL
        assert b_after.diplomacy[a.id].status == DiplomaticStatus.NEUTRAL

"""Tests for command payload validation."""

import pytest
from pydantic import ValidationError

from radix_tribes.api.commands import (
    COMMAND_ADAPTER,
    AdvanceTurn,
    CreateTribe,
    SubmitTurn,
    SueForPeace,
)


def test_discriminator_selects_model() -> None:
    assert isinstance(COMMAND_ADAPTER.validate_python({"type": "advance_turn"}), AdvanceTurn)
    command = COMMAND_ADAPTER.validate_python(
        {
            "type": "submit_turn",
            "tribe_id": "tribe-1",
            "actions": [{"id": "a", "action_type": "Rest"}],
        }
    )
    assert isinstance(command, SubmitTurn)
    assert command.actions[0].action_data == {}


def test_unknown_command_type_rejected() -> None:
    with pytest.raises(ValidationError):
        COMMAND_ADAPTER.validate_python({"type": "launch_nukes"})


def test_reparations_are_optional_and_non_negative() -> None:
    command = COMMAND_ADAPTER.validate_python(
        {"type": "sue_for_peace", "from_tribe_id": "a", "to_tribe_id": "b"}
    )
    assert isinstance(command, SueForPeace)
    assert command.reparations is None
    with pytest.raises(ValidationError):
        COMMAND_ADAPTER.validate_python(
            {
                "type": "sue_for_peace",
                "from_tribe_id": "a",
                "to_tribe_id": "b",
                "reparations": {"food": -1},
            }
        )


def _create(stats: dict) -> dict:
    return {
        "type": "create_tribe",
        "profile": {
            "player_id": "user-1",
            "player_name": "Rook",
            "tribe_name": "Ash Walkers",
            "stats": stats,
        },
    }


def test_create_tribe_stats_within_budget() -> None:
    command = COMMAND_ADAPTER.validate_python(
        _create({"charisma": 10, "intelligence": 5, "leadership": 5, "strength": 5})
    )
    assert isinstance(command, CreateTribe)
    assert command.profile.icon == "skull"


@pytest.mark.parametrize(
    "stats",
    [
        {"charisma": 10, "intelligence": 6, "leadership": 5, "strength": 5},
        {"charisma": 0, "intelligence": 5, "leadership": 5, "strength": 5},
    ],
)
def test_create_tribe_stats_out_of_budget(stats: dict) -> None:
    with pytest.raises(ValidationError):
        COMMAND_ADAPTER.validate_python(_create(stats))

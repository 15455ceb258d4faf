"""Tests for the account store."""

import pytest
from conftest import make_profile

from radix_tribes.domain import accounts, catalog
from radix_tribes.domain.enums import UserRole
from radix_tribes.domain.errors import InvalidCredentials, UnknownUser, UsernameTaken
from radix_tribes.domain.models import GameState
from radix_tribes.domain.world import create_tribe


@pytest.fixture
def users():
    return [accounts.seed_admin("Admin", "snoopy")]


def test_mock_hash_format() -> None:
    assert accounts.mock_hash("abc") == "hashed_abc_salted_v1"


def test_register_and_login(users) -> None:
    user = accounts.register_user(
        users, "Rook", "secret", security_question="What city were you born in?", security_answer="Dust"
    )
    assert user.role == UserRole.PLAYER
    assert user.password_hash != "secret"
    assert accounts.authenticate(users, "rook", "secret") is user


def test_usernames_are_case_insensitive(users) -> None:
    with pytest.raises(UsernameTaken):
        accounts.register_user(users, "admin", "other")


def test_bad_password(users) -> None:
    with pytest.raises(InvalidCredentials):
        accounts.authenticate(users, "Admin", "wrong")
    with pytest.raises(InvalidCredentials):
        accounts.authenticate(users, "Ghost", "snoopy")


def test_security_question_flow(users) -> None:
    accounts.register_user(users, "Rook", "secret", security_answer="  Fluffy ")
    assert accounts.get_security_question(users, "Rook") == catalog.SECURITY_QUESTIONS[0]
    assert accounts.verify_security_answer(users, "Rook", "fluffy") is True
    assert accounts.verify_security_answer(users, "Rook", "rex") is False
    assert accounts.verify_security_answer(users, "Ghost", "fluffy") is False

    accounts.reset_password(users, "Rook", "new-secret")
    assert accounts.authenticate(users, "Rook", "new-secret").username == "Rook"


def test_unknown_user_question(users) -> None:
    with pytest.raises(UnknownUser):
        accounts.get_security_question(users, "Ghost")


def test_public_users_strip_verifiers(users) -> None:
    view = accounts.public_users(users)
    assert view == [
        {
            "id": "user-admin",
            "username": "Admin",
            "role": "admin",
            "security_question": catalog.SECURITY_QUESTIONS[0],
        }
    ]


def test_remove_player_drops_tribes_and_relations(world, users) -> None:
    rook = accounts.register_user(users, "Rook", "secret")
    state = GameState(world=world, users=users)
    keeper = create_tribe(world, make_profile("Keepers", "user-admin"))
    leaver = create_tribe(world, make_profile("Leavers", rook.id))

    accounts.remove_player(state, rook.id)

    assert [u.username for u in state.users] == ["Admin"]
    assert [t.id for t in state.world.tribes] == [keeper.id]
    assert leaver.id not in keeper.diplomacy


def test_remove_unknown_player(world, users) -> None:
    with pytest.raises(UnknownUser):
        accounts.remove_player(GameState(world=world, users=users), "user-ghost")

"""Account store rules.

Password and security-answer verifiers use a placeholder scheme; real
credential hashing is out of scope for this server.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from radix_tribes.domain import catalog, diplomacy
from radix_tribes.domain.enums import UserRole
from radix_tribes.domain.errors import InvalidCredentials, UnknownUser, UsernameTaken
from radix_tribes.domain.models import GameState, User, UserID

logger = logging.getLogger(__name__)


def mock_hash(data: str) -> str:
    return f"hashed_{data}_salted_v1"


def _normalise_answer(answer: str | None) -> str:
    return (answer or "").lower().strip()


def find_user(users: list[User], username: str) -> User | None:
    """Case-insensitive username lookup."""

    wanted = username.lower()
    for user in users:
        if user.username.lower() == wanted:
            return user
    return None


def _require_user(users: list[User], username: str) -> User:
    user = find_user(users, username)
    if user is None:
        raise UnknownUser(username)
    return user


def seed_admin(username: str, password: str) -> User:
    """Build the administrator account used for fresh installs."""

    return User(
        id=UserID("user-admin"),
        username=username,
        password_hash=mock_hash(password),
        role=UserRole.ADMIN,
        security_question=catalog.SECURITY_QUESTIONS[0],
        security_answer_hash=mock_hash(_normalise_answer(password)),
    )


def register_user(
    users: list[User],
    username: str,
    password: str,
    *,
    security_question: str | None = None,
    security_answer: str | None = None,
) -> User:
    """Create a player account.

    Raises:
        UsernameTaken: If the username exists, compared case-insensitively.
    """

    if find_user(users, username) is not None:
        raise UsernameTaken("Username is already taken.")
    user = User(
        id=UserID(f"user-{uuid4().hex[:12]}"),
        username=username,
        password_hash=mock_hash(password),
        role=UserRole.PLAYER,
        security_question=security_question or catalog.SECURITY_QUESTIONS[0],
        security_answer_hash=mock_hash(_normalise_answer(security_answer)),
    )
    users.append(user)
    logger.info("new user registered: %s", username)
    return user


def authenticate(users: list[User], username: str, password: str) -> User:
    user = find_user(users, username)
    if user is None or user.password_hash != mock_hash(password):
        logger.info("failed login attempt for username: %s", username)
        raise InvalidCredentials("Invalid username or password.")
    logger.info("user logged in: %s", user.username)
    return user


def get_security_question(users: list[User], username: str) -> str:
    return _require_user(users, username).security_question


def verify_security_answer(users: list[User], username: str, answer: str) -> bool:
    user = find_user(users, username)
    if user is None:
        return False
    return user.security_answer_hash == mock_hash(_normalise_answer(answer))


def reset_password(users: list[User], username: str, new_password: str) -> User:
    user = _require_user(users, username)
    user.password_hash = mock_hash(new_password)
    logger.info("password reset for user: %s", user.username)
    return user


def remove_player(state: GameState, user_id: str) -> None:
    """Delete a user together with every tribe it owns.

    Relations pointing at the removed tribes are dropped from the remaining
    tribes; proposals naming them become inert and are purged on the next
    turn advance.

    Raises:
        UnknownUser: If no user has ``user_id``.
    """

    if not any(user.id == user_id for user in state.users):
        raise UnknownUser(user_id)

    world = state.world
    removed = [tribe for tribe in world.tribes if tribe.player_id == user_id]
    world.tribes = [tribe for tribe in world.tribes if tribe.player_id != user_id]
    for tribe in removed:
        diplomacy.drop_relations(world, tribe.id)
    state.users = [user for user in state.users if user.id != user_id]
    logger.info("player removed: %s (%d tribes)", user_id, len(removed))


def public_view(user: User) -> dict[str, str]:
    """User fields safe to send to clients (no verifiers)."""

    return {
        "id": user.id,
        "username": user.username,
        "role": str(user.role),
        "security_question": user.security_question,
    }


def public_users(users: list[User]) -> list[dict[str, str]]:
    return [public_view(user) for user in users]

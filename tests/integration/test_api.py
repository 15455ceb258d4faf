"""Integration tests for the FastAPI layer."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from radix_tribes.api.app import create_app
from radix_tribes.api.runtime import ApiState
from radix_tribes.config import Settings
from radix_tribes.repository import decode_state


def _make_app(tmp_path):
    def factory() -> ApiState:
        settings = Settings(
            data_dir=tmp_path,
            map_radius=4,
            map_seed=17,
            save_debounce_seconds=0.05,
        )
        return ApiState(settings=settings)

    app = create_app(state_factory=factory)
    transport = ASGITransport(app=app)
    return app, transport


def _create_tribe(name: str, player_id: str) -> dict:
    return {
        "type": "create_tribe",
        "profile": {
            "player_id": player_id,
            "player_name": name,
            "tribe_name": name,
            "stats": {"charisma": 5, "intelligence": 5, "leadership": 5, "strength": 5},
        },
    }


@pytest.mark.asyncio
async def test_game_lifecycle_via_api(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/health")
        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "ok"
        assert payload["turn"] == 1

        response = await client.post("/commands", json=_create_tribe("Ash Walkers", "user-admin"))
        assert response.status_code == 200
        assert response.json()["ok"] is True

        response = await client.post("/commands", json={"type": "add_ai_tribe"})
        assert response.json()["ok"] is True

        response = await client.get("/state")
        state = response.json()
        assert [t["is_ai"] for t in state["tribes"]] == [False, True]
        human, raider = state["tribes"]

        response = await client.post(
            "/commands",
            json={
                "type": "submit_turn",
                "tribe_id": human["id"],
                "actions": [{"id": "a-1", "action_type": "Rest"}],
            },
        )
        assert response.json()["ok"] is True

        response = await client.post("/commands", json={"type": "advance_turn"})
        result = response.json()
        assert result == {"ok": True, "command": "advance_turn", "detail": None, "turn": 2}

        response = await client.get("/state")
        state = response.json()
        assert state["turn"] == 2
        assert state["tribes"][0]["last_turn_results"][0]["id"] == "a-1"
        assert state["tribes"][0]["diplomacy"][raider["id"]]["status"] == "War"

    stored = decode_state((tmp_path / "game-data.json").read_bytes())
    assert stored.world.turn == 2
    assert len(stored.world.tribes) == 2


@pytest.mark.asyncio
async def test_engine_errors_are_reported_not_raised(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post(
            "/commands", json={"type": "accept_proposal", "proposal_id": "proposal-nope"}
        )
        assert response.status_code == 200
        result = response.json()
        assert result["ok"] is False
        assert "proposal-nope" in result["detail"]

        response = await client.post("/commands", json={"type": "no_such_command"})
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_account_routes(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post(
            "/auth/register",
            json={"username": "Rook", "password": "secret", "security_answer": "Fluffy"},
        )
        assert response.status_code == 201
        user = response.json()
        assert user["username"] == "Rook"
        assert user["role"] == "player"
        assert "password_hash" not in user

        response = await client.post("/auth/register", json={"username": "rook", "password": "x"})
        assert response.status_code == 409

        response = await client.post("/auth/login", json={"username": "Rook", "password": "bad"})
        assert response.status_code == 401

        response = await client.post(
            "/auth/login", json={"username": "Admin", "password": "snoopy"}
        )
        assert response.status_code == 200
        assert response.json()["role"] == "admin"

        response = await client.get("/auth/security-question/Rook")
        assert response.status_code == 200
        assert response.json()["question"]

        response = await client.get("/auth/security-question/Ghost")
        assert response.status_code == 404

        response = await client.post(
            "/auth/verify-answer", json={"username": "Rook", "answer": " fluffy"}
        )
        assert response.json() == {"valid": True}

        response = await client.post(
            "/auth/reset-password",
            json={"username": "Rook", "answer": "wrong", "new_password": "new"},
        )
        assert response.status_code == 403

        response = await client.post(
            "/auth/reset-password",
            json={"username": "Rook", "answer": "Fluffy", "new_password": "new"},
        )
        assert response.status_code == 200

        response = await client.post("/auth/login", json={"username": "Rook", "password": "new"})
        assert response.status_code == 200

        response = await client.get("/users")
        assert [u["username"] for u in response.json()] == ["Admin", "Rook"]


def test_websocket_pushes_snapshots(tmp_path):
    app, _ = _make_app(tmp_path)

    with TestClient(app) as client:
        with client.websocket_connect("/ws") as websocket:
            initial = websocket.receive_json()
            assert initial["event"] == "initial_state"
            assert initial["data"]["game_state"]["turn"] == 1
            assert [u["username"] for u in initial["data"]["users"]] == ["Admin"]

            websocket.send_json({"type": "add_ai_tribe"})
            assert websocket.receive_json()["event"] == "gamestate_updated"
            assert websocket.receive_json()["event"] == "users_updated"
            result = websocket.receive_json()
            assert result["event"] == "command_result"
            assert result["data"]["ok"] is True

            websocket.send_json({"type": "reject_proposal", "proposal_id": "missing"})
            result = websocket.receive_json()
            assert result["event"] == "command_result"
            assert result["data"]["ok"] is False
            alert = websocket.receive_json()
            assert alert["event"] == "alert"

            websocket.send_json({"type": "bogus"})
            alert = websocket.receive_json()
            assert alert["event"] == "alert"
            assert "Invalid command" in alert["data"]

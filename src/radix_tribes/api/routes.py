"""HTTP and WebSocket routes for the Radix Tribes server."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import (
    APIRouter,
    Body,
    Depends,
    HTTPException,
    Request,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from pydantic import BaseModel, Field, ValidationError

from radix_tribes import __version__
from radix_tribes.api.commands import COMMAND_ADAPTER, Command, CommandResult
from radix_tribes.api.runtime import ApiState, GameServer, world_snapshot
from radix_tribes.domain import accounts
from radix_tribes.domain.errors import (
    InvalidCredentials,
    ServerShuttingDown,
    UnknownUser,
    UsernameTaken,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


def _server(state: ApiState) -> GameServer:
    return state.server


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    security_question: str | None = None
    security_answer: str | None = None


class LoginRequest(BaseModel):
    username: str
    password: str


class VerifyAnswerRequest(BaseModel):
    username: str
    answer: str


class ResetPasswordRequest(BaseModel):
    username: str
    answer: str
    new_password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: str
    username: str
    role: str
    security_question: str


class SecurityQuestionResponse(BaseModel):
    username: str
    question: str


class VerifyAnswerResponse(BaseModel):
    valid: bool


@router.get("/health")
async def healthcheck(state: ApiStateDep) -> dict[str, Any]:
    server = _server(state)
    return {
        "status": "ok",
        "version": __version__,
        "turn": server.world.turn,
        "accepting_commands": server.accepting,
        "observers": len(server.hub),
    }


@router.get("/state")
async def get_game_state(state: ApiStateDep) -> dict[str, Any]:
    return world_snapshot(_server(state).world)


@router.get("/users")
async def list_users(state: ApiStateDep) -> list[dict[str, str]]:
    return accounts.public_users(_server(state).state.users)


def _parse_command(payload: Any) -> Command:
    try:
        return COMMAND_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc


@router.post("/commands", response_model=CommandResult)
async def run_command(
    payload: Annotated[dict[str, Any], Body()], state: ApiStateDep
) -> CommandResult:
    return await _server(state).execute(_parse_command(payload))


# --- Accounts -------------------------------------------------------------------


@router.post("/auth/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, state: ApiStateDep) -> UserResponse:
    try:
        user = await _server(state).register_user(
            payload.username,
            payload.password,
            security_question=payload.security_question,
            security_answer=payload.security_answer,
        )
    except UsernameTaken as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ServerShuttingDown as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return UserResponse(**accounts.public_view(user))


@router.post("/auth/login", response_model=UserResponse)
async def login(payload: LoginRequest, state: ApiStateDep) -> UserResponse:
    try:
        user = _server(state).authenticate(payload.username, payload.password)
    except InvalidCredentials as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return UserResponse(**accounts.public_view(user))


@router.get("/auth/security-question/{username}", response_model=SecurityQuestionResponse)
async def security_question(username: str, state: ApiStateDep) -> SecurityQuestionResponse:
    try:
        question = _server(state).security_question(username)
    except UnknownUser as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.") from exc
    return SecurityQuestionResponse(username=username, question=question)


@router.post("/auth/verify-answer", response_model=VerifyAnswerResponse)
async def verify_answer(payload: VerifyAnswerRequest, state: ApiStateDep) -> VerifyAnswerResponse:
    valid = _server(state).verify_security_answer(payload.username, payload.answer)
    return VerifyAnswerResponse(valid=valid)


@router.post("/auth/reset-password", response_model=UserResponse)
async def reset_password(payload: ResetPasswordRequest, state: ApiStateDep) -> UserResponse:
    server = _server(state)
    if not server.verify_security_answer(payload.username, payload.answer):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Incorrect security answer."
        )
    try:
        user = await server.reset_password(payload.username, payload.new_password)
    except UnknownUser as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.") from exc
    except ServerShuttingDown as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return UserResponse(**accounts.public_view(user))


# --- Live updates ---------------------------------------------------------------


@router.websocket("/ws")
async def game_socket(websocket: WebSocket) -> None:
    state: ApiState = websocket.app.state.api_state
    server = _server(state)
    hub = server.hub

    await websocket.accept()
    await server.attach(websocket)
    logger.info("observer connected (%d total)", len(hub))
    try:
        while True:
            message = await websocket.receive_text()
            try:
                command = COMMAND_ADAPTER.validate_json(message)
            except ValidationError as exc:
                await hub.send(
                    websocket, "alert", f"Invalid command: {exc.error_count()} validation errors"
                )
                continue
            result = await server.execute(command)
            await hub.send(websocket, "command_result", result.model_dump(mode="json"))
            if not result.ok:
                await hub.send(websocket, "alert", result.detail)
    except WebSocketDisconnect:
        logger.info("observer disconnected")
    finally:
        server.detach(websocket)

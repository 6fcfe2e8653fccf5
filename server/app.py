from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from monodeal.exceptions import (
    DealError,
    GameAlreadyStartedError,
    InvalidActionError,
    PlayerNotFoundError,
    RoomFullError,
    RoomNotFoundError,
    ValidationError,
)

from .registry import RoomRegistry
from .room import Room
from .schemas import (
    ActionRequest,
    ActionResponse,
    CreateRoomRequest,
    JoinRoomRequest,
    LegalActionsResponse,
    LobbyResponse,
    ReadyRequest,
    RenameRequest,
    RoomListResponse,
    RoomSummary,
    SeatResponse,
)
from .settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Deal Arena server (max %d players per room)", settings.max_players)

    yield

    logger.info("Shutting down Deal Arena server")


app = FastAPI(
    title="Deal Arena Server",
    version="0.1.0",
    lifespan=lifespan,
)
registry = RoomRegistry()


# ---- Error mapping ----

_STATUS_BY_ERROR = [
    ((RoomNotFoundError, PlayerNotFoundError), 404),
    ((RoomFullError, GameAlreadyStartedError, InvalidActionError), 409),
    ((ValidationError,), 422),
]


def _status_for(exc: DealError) -> int:
    for error_types, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_types):
            return status
    return 400


@app.exception_handler(DealError)
async def deal_error_handler(request: Request, exc: DealError):
    return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc)})


async def _get_room(room_id: str) -> Room:
    room = await registry.get(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


# ---- Rooms ----

@app.get("/rooms", response_model=RoomListResponse)
async def list_rooms():
    rooms = await registry.list_available()
    return RoomListResponse(rooms=[RoomSummary(**room.summary()) for room in rooms])


@app.post("/rooms", response_model=SeatResponse)
async def create_room(req: CreateRoomRequest):
    room, player_id = await registry.create_room(req.name, req.client_id)
    return SeatResponse(room_id=room.room_id, player_id=player_id)


@app.post("/rooms/{room_id}/join", response_model=SeatResponse)
async def join_room(room_id: str, req: JoinRoomRequest):
    room, player_id = await registry.join_room(room_id, req.name, req.client_id)
    return SeatResponse(room_id=room.room_id, player_id=player_id)


@app.get("/rooms/{room_id}/lobby", response_model=LobbyResponse)
async def get_lobby(room_id: str):
    room = await _get_room(room_id)
    return room.lobby()


@app.post("/rooms/{room_id}/ready")
async def toggle_ready(room_id: str, req: ReadyRequest):
    room = await _get_room(room_id)
    ready = await room.toggle_ready(req.player_id)
    return {"room_id": room_id, "player_id": req.player_id, "is_ready": ready, "is_started": room.is_started}


@app.post("/rooms/{room_id}/rename")
async def rename_player(room_id: str, req: RenameRequest):
    room = await _get_room(room_id)
    await room.rename(req.player_id, req.name)
    return {"room_id": room_id, "player_id": req.player_id, "name": req.name.strip()}


@app.delete("/rooms/{room_id}")
async def remove_room(room_id: str):
    if not await registry.remove(room_id):
        raise HTTPException(status_code=404, detail="Room not found")
    return {"room_id": room_id, "removed": True}


# ---- Game ----

@app.get("/rooms/{room_id}/snapshot")
async def get_snapshot(room_id: str, viewer_id: Optional[str] = None):
    room = await _get_room(room_id)
    return room.snapshot(viewer_id)


@app.get("/rooms/{room_id}/legal_actions", response_model=LegalActionsResponse)
async def legal_actions(room_id: str, player_id: str):
    room = await _get_room(room_id)
    return LegalActionsResponse(room_id=room_id, player_id=player_id, actions=room.get_legal_actions(player_id))


@app.post("/rooms/{room_id}/actions", response_model=ActionResponse)
async def apply_action(room_id: str, req: ActionRequest):
    room = await _get_room(room_id)
    result = await room.apply_action_request(req.player_id, req.action_type, req.params)
    return ActionResponse(
        accepted=result.success,
        notification_type=result.notification_type,
        message=result.message,
        reason=None if result.success else result.reason,
    )


async def _handle_ws_message(room: Room, raw: str) -> Dict[str, Any]:
    """Handle one inbound websocket message and build the reply for the sender."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return {"type": "error", "detail": "message is not valid JSON"}
    if not isinstance(msg, dict):
        return {"type": "error", "detail": "message must be an object"}

    msg_type = msg.get("type")
    try:
        if msg_type == "action":
            result = await room.apply_action_request(
                str(msg.get("player_id")), str(msg.get("action_type")), msg.get("params") or {}
            )
            return {
                "type": "action_result",
                "accepted": result.success,
                "notification_type": result.notification_type,
                "message": result.message,
                "reason": None if result.success else result.reason,
            }
        if msg_type == "ready":
            ready = await room.toggle_ready(str(msg.get("player_id")))
            return {"type": "ready_result", "is_ready": ready, "is_started": room.is_started}
        if msg_type == "rename":
            await room.rename(str(msg.get("player_id")), str(msg.get("name") or ""))
            return {"type": "rename_result", "accepted": True}
    except DealError as exc:
        return {"type": "error", "detail": str(exc), "status": _status_for(exc)}
    return {"type": "error", "detail": f"unknown message type: {msg_type}"}


@app.websocket("/ws/rooms/{room_id}")
async def ws_room(websocket: WebSocket, room_id: str):
    await websocket.accept()
    room = await registry.get(room_id)
    if not room:
        await websocket.close(code=4404)
        return

    # ?player_id=<id> limits hand visibility to that player's own hand
    viewer_id = websocket.query_params.get("player_id")
    queue = await room.subscribe(viewer_id)

    # Support backlog catch-up via query param ?since=<index>
    since_raw = websocket.query_params.get("since")
    if since_raw is not None and since_raw.lstrip("-").isdigit():
        delta = room.get_events_since(int(since_raw))
        if delta["events"]:
            await queue.put({"type": "events", "room_id": room_id, **delta})

    # Start a task to forward outbound messages
    async def sender():
        while True:
            msg = await queue.get()
            await websocket.send_json(msg)

    # Heartbeat pings to keep connection alive (every 5s)
    async def heartbeat():
        while True:
            await asyncio.sleep(5)
            await queue.put({"type": "heartbeat"})

    sender_task = asyncio.create_task(sender())
    hb_task = asyncio.create_task(heartbeat())
    try:
        while True:
            try:
                raw = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            await queue.put(await _handle_ws_message(room, raw))
    finally:
        await room.unsubscribe(queue)
        sender_task.cancel()
        hb_task.cancel()


if __name__ == "__main__":
    # Convenience entrypoint for running directly: python -m server.app
    import uvicorn

    settings = get_settings()
    uvicorn.run("server.app:app", host=settings.host, port=settings.port)

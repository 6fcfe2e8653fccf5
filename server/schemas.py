from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RoomSummary(BaseModel):
    room_id: str
    player_count: int
    max_players: int
    creator_name: Optional[str] = None
    is_started: bool


class RoomListResponse(BaseModel):
    rooms: List[RoomSummary]


class CreateRoomRequest(BaseModel):
    name: str = Field(min_length=1, max_length=32)
    client_id: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Stable client identity; rejoining with it returns the same seat.",
    )


class JoinRoomRequest(BaseModel):
    name: str = Field(min_length=1, max_length=32)
    client_id: Optional[str] = Field(default=None, max_length=64)


class SeatResponse(BaseModel):
    room_id: str
    player_id: str


class ReadyRequest(BaseModel):
    player_id: str


class RenameRequest(BaseModel):
    player_id: str
    name: str = Field(min_length=1, max_length=32)


class LobbyPlayer(BaseModel):
    player_id: str
    name: str
    is_ready: bool


class LobbyResponse(BaseModel):
    room_id: str
    is_started: bool
    players: List[LobbyPlayer]


class ActionRequest(BaseModel):
    player_id: str
    action_type: str
    params: Dict[str, Any] = Field(default_factory=dict)


class ActionResponse(BaseModel):
    accepted: bool
    notification_type: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None


class LegalActionsResponse(BaseModel):
    room_id: str
    player_id: str
    actions: List[Dict[str, Any]]

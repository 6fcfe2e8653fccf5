from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, List, Optional, Tuple

from monodeal.exceptions import RoomNotFoundError, ValidationError

from server.room import Room
from server.settings import ServerSettings, get_settings

logger = logging.getLogger(__name__)


class RoomRegistry:
    """In-memory registry of rooms, one GameState per room."""

    def __init__(self, settings: Optional[ServerSettings] = None):
        self.settings = settings or get_settings()
        self._rooms: Dict[str, Room] = {}
        self._creators: Dict[str, str] = {}  # client_id -> room_id
        self._lock = asyncio.Lock()

    async def create_room(self, name: str, client_id: Optional[str] = None) -> Tuple[Room, str]:
        """Open a room seated with its creator. A client may own one room at a time."""
        async with self._lock:
            if client_id is not None:
                owned = self._creators.get(client_id)
                if owned is not None and owned in self._rooms:
                    raise ValidationError("You already have an active room")

            room_id = uuid.uuid4().hex[:12]
            room = Room(
                room_id,
                self.settings.build_game_config(),
                max_players=self.settings.max_players,
                event_log_dir=self.settings.event_log_dir,
            )
            self._rooms[room_id] = room
            if client_id is not None:
                self._creators[client_id] = room_id

        try:
            player_id = await room.join(name, client_id)
        except ValidationError:
            await self.remove(room_id)
            raise
        logger.info("Room %s created by %s", room_id, name)
        return room, player_id

    async def join_room(self, room_id: str, name: str, client_id: Optional[str] = None) -> Tuple[Room, str]:
        room = await self.require(room_id)
        player_id = await room.join(name, client_id)
        return room, player_id

    async def list_available(self) -> List[Room]:
        """Rooms still in the lobby."""
        return [room for room in self._rooms.values() if not room.is_started]

    async def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    async def require(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(f"Room {room_id} not found")
        return room

    async def remove(self, room_id: str) -> bool:
        async with self._lock:
            room = self._rooms.pop(room_id, None)
            if room is None:
                return False
            for client_id, owned in list(self._creators.items()):
                if owned == room_id:
                    del self._creators[client_id]
            logger.info("Room %s removed", room_id)
            return True

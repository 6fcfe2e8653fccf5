from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

from events.mapper import map_events
from game_logger import GameLogger
from monodeal.config import GameConfig
from monodeal.exceptions import (
    GameAlreadyStartedError,
    InvalidActionError,
    PlayerNotFoundError,
    RoomFullError,
    ValidationError,
)
from monodeal.game import ActionResult, GameState, create_game
from monodeal.money import EventType
from monodeal.player import Player
from monodeal.rules import Action, ActionType, apply_action, get_legal_actions
from snapshot import serialize_snapshot

logger = logging.getLogger(__name__)


class Room:
    """Owns one lobby and, once everyone is ready, its GameState.

    Responsibilities:
    - Seat players and track their ready flags until the game starts
    - Serialize every mutation of the game behind one lock
    - Flush internal engine events to JSONL via GameLogger
    - Broadcast snapshots, mapped events and notifications to subscribers
    """

    def __init__(
        self,
        room_id: str,
        config: GameConfig,
        max_players: int = 5,
        event_log_dir: Optional[str] = None,
    ):
        self.room_id = room_id
        self.config = config
        self.max_players = max_players
        self.game: Optional[GameState] = None
        self.logger: Optional[GameLogger] = None
        self._event_log_dir = event_log_dir
        self._seats: List[Player] = []
        self._ready: Dict[str, bool] = {}
        self._client_seats: Dict[str, str] = {}  # client_id -> player_id
        self._lock = asyncio.Lock()
        self._clients: Dict[asyncio.Queue, Optional[str]] = {}  # queue -> viewer player_id
        self._last_engine_idx = 0

    @property
    def is_started(self) -> bool:
        return self.game is not None

    @property
    def player_count(self) -> int:
        return len(self._seats)

    @property
    def creator_name(self) -> Optional[str]:
        if not self._seats:
            return None
        return self._player_name(self._seats[0].player_id)

    def has_player(self, player_id: str) -> bool:
        return player_id in self._ready

    def seat_for_client(self, client_id: Optional[str]) -> Optional[str]:
        if client_id is None:
            return None
        return self._client_seats.get(client_id)

    def _player_name(self, player_id: str) -> str:
        if self.game is not None:
            return self.game.players[player_id].name
        for seat in self._seats:
            if seat.player_id == player_id:
                return seat.name
        raise PlayerNotFoundError(player_id)

    def _require_player(self, player_id: str) -> None:
        if not self.has_player(player_id):
            raise PlayerNotFoundError(f"Player {player_id} is not in room {self.room_id}")

    # ---- Lobby ----

    async def join(self, name: str, client_id: Optional[str] = None) -> str:
        """Seat a player and return their player id. A known client gets its old seat back."""
        async with self._lock:
            existing = self.seat_for_client(client_id)
            if existing is not None:
                return existing
            if self.is_started:
                raise GameAlreadyStartedError(f"Room {self.room_id} has already started")
            if len(self._seats) >= self.max_players:
                raise RoomFullError(f"Room {self.room_id} is full")
            name = name.strip()
            if not name:
                raise ValidationError("Player name must not be empty")

            player_id = uuid.uuid4().hex
            self._seats.append(Player(player_id, name))
            self._ready[player_id] = False
            if client_id is not None:
                self._client_seats[client_id] = player_id
            logger.info("Player %s (%s) joined room %s", name, player_id, self.room_id)
            await self._broadcast({"type": "lobby", "room_id": self.room_id, "lobby": self.lobby()})
            return player_id

    async def toggle_ready(self, player_id: str) -> bool:
        """Flip a player's ready flag. The game starts once all of two or more players are ready.

        Returns the player's new ready state.
        """
        async with self._lock:
            self._require_player(player_id)
            if self.is_started:
                raise GameAlreadyStartedError(f"Room {self.room_id} has already started")
            self._ready[player_id] = not self._ready[player_id]
            ready = self._ready[player_id]

            if len(self._seats) >= 2 and all(self._ready.values()):
                self._start_game()
                await self.flush_and_broadcast()
            else:
                await self._broadcast({"type": "lobby", "room_id": self.room_id, "lobby": self.lobby()})
            return ready

    def _start_game(self) -> None:
        self.game = create_game(self.config, list(self._seats), room_id=self.room_id)
        for pid, ready in self._ready.items():
            self.game.players[pid].is_ready = ready
        if self._event_log_dir:
            self.logger = GameLogger(room_id=self.room_id, log_dir=self._event_log_dir)
        logger.info("Room %s started with %d players", self.room_id, len(self._seats))

    async def rename(self, player_id: str, name: str) -> None:
        """Change a player's display name, before or during the game."""
        async with self._lock:
            self._require_player(player_id)
            if self.game is not None:
                result = self.game.rename_player(player_id, name)
                if not result:
                    raise ValidationError(result.reason)
                await self.flush_and_broadcast()
                return
            name = name.strip()
            if not name:
                raise ValidationError("Player name must not be empty")
            for seat in self._seats:
                if seat.player_id == player_id:
                    seat.name = name
            await self._broadcast({"type": "lobby", "room_id": self.room_id, "lobby": self.lobby()})

    def lobby(self) -> Dict[str, Any]:
        return {
            "room_id": self.room_id,
            "is_started": self.is_started,
            "players": [
                {
                    "player_id": seat.player_id,
                    "name": self._player_name(seat.player_id),
                    "is_ready": self._ready[seat.player_id],
                }
                for seat in self._seats
            ],
        }

    # ---- Game ----

    def snapshot(self, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        if self.game is None:
            return {"room_id": self.room_id, "is_started": False, "lobby": self.lobby()}
        return serialize_snapshot(self.game, viewer_id=viewer_id)

    def get_legal_actions(self, player_id: str) -> List[Dict[str, Any]]:
        """Return legal actions for the given player."""
        self._require_player(player_id)
        if self.game is None:
            return []
        return [a.to_dict() for a in get_legal_actions(self.game, player_id)]

    async def apply_action_request(
        self, player_id: str, action_type: str, params: Optional[Dict[str, Any]] = None
    ) -> ActionResult:
        """Apply one inbound action. Rule violations come back as a failed ActionResult."""
        try:
            atype = ActionType(action_type)
        except ValueError:
            raise ValidationError(f"unknown action_type: {action_type}") from None
        params = {} if params is None else params
        if not isinstance(params, dict):
            raise ValidationError("params must be an object")
        if "action_type" in params:
            raise ValidationError("params must not contain action_type")

        async with self._lock:
            self._require_player(player_id)
            if self.game is None:
                raise InvalidActionError(f"Room {self.room_id} has not started")

            result = apply_action(self.game, Action(atype, **params), player_id)
            if result:
                if result.notification_type or result.message:
                    await self._broadcast(
                        {
                            "type": "notification",
                            "room_id": self.room_id,
                            "player_id": player_id,
                            "player_name": self._player_name(player_id),
                            "notification_type": result.notification_type,
                            "message": result.message,
                        }
                    )
                await self.flush_and_broadcast()
            return result

    # ---- Subscriptions ----

    async def subscribe(self, viewer_id: Optional[str] = None) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue()
        self._clients[q] = viewer_id
        # Send initial snapshot
        await q.put(self._snapshot_message(viewer_id))
        return q

    async def unsubscribe(self, q: asyncio.Queue) -> None:
        self._clients.pop(q, None)

    def _snapshot_message(self, viewer_id: Optional[str]) -> Dict[str, Any]:
        return {
            "type": "snapshot",
            "room_id": self.room_id,
            "snapshot": self.snapshot(viewer_id),
            "last_event_index": self._last_engine_idx - 1,
        }

    async def _broadcast(self, payload: Dict[str, Any]) -> None:
        for q in list(self._clients):
            self._deliver(q, payload)

    def _deliver(self, q: asyncio.Queue, payload: Dict[str, Any]) -> None:
        try:
            q.put_nowait(payload)
        except asyncio.QueueFull:
            # Drop client if it cannot keep up
            logger.warning("Dropping slow subscriber from room %s", self.room_id)
            self._clients.pop(q, None)

    async def flush_and_broadcast(self) -> None:
        """Broadcast engine events generated since the last flush, then a fresh snapshot."""
        if self.game is None:
            return
        evs = self.game.event_log.get_events()
        new_events = evs[self._last_engine_idx :]
        if new_events:
            mapped = map_events(
                new_events,
                player_names={pid: p.name for pid, p in self.game.players.items()},
                start_seq=self._last_engine_idx,
            )
            await self._broadcast(
                {
                    "type": "events",
                    "room_id": self.room_id,
                    "events": mapped,
                    "from_index": self._last_engine_idx,
                    "to_index": self._last_engine_idx + len(mapped) - 1,
                }
            )
            self._last_engine_idx = len(evs)

        if self.logger is not None:
            self.logger.flush_engine_events(self.game)
            if any(ev.event_type == EventType.TURN_START for ev in new_events):
                self.logger.log_turn_snapshot(self.game)

        for q, viewer_id in list(self._clients.items()):
            self._deliver(q, self._snapshot_message(viewer_id))

    def get_events_since(self, since_index: int) -> Dict[str, Any]:
        if self.game is None:
            return {"events": [], "from_index": 0, "to_index": -1}
        evs = self.game.event_log.get_events()
        start = max(since_index + 1, 0)
        if start >= len(evs):
            return {"events": [], "from_index": start, "to_index": start - 1}
        mapped = map_events(
            evs[start:],
            player_names={pid: p.name for pid, p in self.game.players.items()},
            start_seq=start,
        )
        return {"events": mapped, "from_index": start, "to_index": len(evs) - 1}

    def summary(self) -> Dict[str, Any]:
        return {
            "room_id": self.room_id,
            "player_count": self.player_count,
            "max_players": self.max_players,
            "creator_name": self.creator_name,
            "is_started": self.is_started,
        }

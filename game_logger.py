"""
JSONL logger for game events.

Writes every engine event of one room to a JSONL file, one mapped event per
line, plus optional per-turn player summaries.
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, Optional

from events.mapper import map_events


class GameLogger:
    """Logger that writes game events to a JSONL file."""

    def __init__(self, log_file: Optional[str] = None, room_id: Optional[str] = None, log_dir: Optional[str] = None):
        """
        Initialize game logger.

        Args:
            log_file: Path to log file. If None, generates a filename from the
                room id (or a timestamp) inside log_dir.
            room_id: Room the events belong to
            log_dir: Directory for generated filenames
        """
        if log_file is None:
            stem = room_id or datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = f"deal_game_{stem}.jsonl"
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
                log_file = os.path.join(log_dir, log_file)

        self.log_file = log_file
        self.room_id = room_id
        self.event_count = 0
        self._engine_last_idx = 0  # last flushed index from engine's internal EventLog

        # Create/clear log file
        with open(self.log_file, "w"):
            pass

    def log_event(self, event_type: str, **kwargs: Any) -> None:
        """
        Log a game event to JSONL file.

        Args:
            event_type: Type of event (e.g., "game_start", "charge_rent", "payment")
            **kwargs: Additional event data
        """
        event = {
            "event_id": self.event_count,
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            **kwargs,
        }
        if self.room_id is not None:
            event["room_id"] = self.room_id

        with open(self.log_file, "a") as f:
            f.write(json.dumps(event) + "\n")

        self.event_count += 1

    def flush_engine_events(self, game) -> int:
        """Flush new internal engine events to JSONL using the event mapper.

        Returns the number of events written.
        """
        events = game.event_log.events
        if self._engine_last_idx >= len(events):
            return 0

        new_events = events[self._engine_last_idx :]
        mapped = map_events(
            new_events,
            player_names={pid: p.name for pid, p in game.players.items()},
            start_seq=self._engine_last_idx,
        )

        wrote = 0
        for m in mapped:
            if "turn_number" not in m:
                m["turn_number"] = game.turn_number

            if m.get("event_type") == "game_end":
                m["final_standings"] = [
                    {
                        "player_id": pid,
                        "player_name": game.players[pid].name,
                        "completed_sets": game.players[pid].properties.completed_set_count(),
                        "property_value": game.players[pid].properties.total_value(),
                    }
                    for pid in game.player_order
                ]

            etype = m.pop("event_type")
            self.log_event(etype, **m)
            wrote += 1

        self._engine_last_idx = len(events)
        return wrote

    def log_turn_snapshot(self, game) -> None:
        """Log a state summary for every player at the start of a turn."""
        for pid in game.player_order:
            player = game.players[pid]
            sets: Dict[str, Any] = {}
            for prop_set in player.properties.iter_sets():
                sets.setdefault(prop_set.color.value, []).append(
                    {
                        "cards": len(prop_set.cards),
                        "complete": prop_set.is_complete(),
                        "houses": prop_set.houses,
                        "hotels": prop_set.hotels,
                    }
                )
            self.log_event(
                "player_state",
                turn_number=game.turn_number,
                player_id=pid,
                player_name=player.name,
                hand_count=len(player.hand),
                bank_total=sum(c.value for c in player.money_pile),
                completed_sets=player.properties.completed_set_count(),
                properties=sets,
            )

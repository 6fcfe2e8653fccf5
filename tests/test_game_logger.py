"""
Tests for the JSONL game logger.
"""

import json

from helpers import complete_set
from game_logger import GameLogger
from monodeal.config import PropertyColor


def _read(path):
    with open(path) as f:
        return [json.loads(line) for line in f]


def test_flush_writes_new_events_once(basic_game, tmp_path):
    """Each engine event is written exactly once across flushes."""
    logger = GameLogger(log_file=str(tmp_path / "game.jsonl"), room_id="room1")

    first = logger.flush_engine_events(basic_game)
    assert first == len(basic_game.event_log.events)
    assert logger.flush_engine_events(basic_game) == 0

    basic_game.request_end_turn("p1")
    second = logger.flush_engine_events(basic_game)
    assert second > 0

    lines = _read(logger.log_file)
    assert len(lines) == first + second
    assert [line["event_id"] for line in lines] == list(range(len(lines)))
    assert lines[0]["event_type"] == "game_start"
    assert all(line["room_id"] == "room1" for line in lines)
    assert all("turn_number" in line for line in lines)


def test_game_end_carries_final_standings(empty_game, cards, tmp_path):
    """The game_end line lists every player's standing."""
    for color in (PropertyColor.BROWN, PropertyColor.BLUE, PropertyColor.UTILITY):
        complete_set(empty_game, cards, "p1", color)
    empty_game.request_end_turn("p1")
    logger = GameLogger(log_file=str(tmp_path / "end.jsonl"))

    logger.flush_engine_events(empty_game)

    end = _read(logger.log_file)[-1]
    assert end["event_type"] == "game_end"
    assert end["winner_id"] == "p1"
    assert [s["player_id"] for s in end["final_standings"]] == ["p1", "p2"]
    assert end["final_standings"][0]["completed_sets"] == 3


def test_generated_filename_uses_room_id(tmp_path):
    """Without a file name the room id names the log inside log_dir."""
    logger = GameLogger(room_id="abc123", log_dir=str(tmp_path / "logs"))

    assert logger.log_file == str(tmp_path / "logs" / "deal_game_abc123.jsonl")
    assert (tmp_path / "logs" / "deal_game_abc123.jsonl").exists()


def test_turn_snapshot(basic_game, tmp_path):
    """A turn snapshot logs one line per player."""
    logger = GameLogger(log_file=str(tmp_path / "snap.jsonl"))

    logger.log_turn_snapshot(basic_game)

    lines = _read(logger.log_file)
    assert [line["player_id"] for line in lines] == ["p1", "p2"]
    assert lines[0]["hand_count"] == 7
    assert all(line["event_type"] == "player_state" for line in lines)

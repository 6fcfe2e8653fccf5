"""
Public snapshot serialization of GameState.

Produces a UI-friendly view of the current game. Deck order is never
exposed. Hands are included in full unless a viewer is named, in which
case only the viewer's own hand is shown and the rest are reduced to counts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from monodeal.cards import total_value
from monodeal.game import GameState


def serialize_snapshot(game: GameState, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """Serialize a GameState into a stable JSON dict.

    The snapshot includes:
    - room, turn number, current player, winner
    - players with hand, money pile and property sets
    - the pending action, if any
    - deck and discard counts, plus the top discard
    """
    players: List[Dict[str, Any]] = []
    for pid in game.player_order:
        pstate = game.players[pid]
        entry: Dict[str, Any] = {
            "player_id": pid,
            "name": pstate.name,
            "is_ready": pstate.is_ready,
            "hand_count": len(pstate.hand),
            "money_pile": [c.to_dict() for c in pstate.money_pile],
            "bank_total": total_value(pstate.money_pile),
            "properties": pstate.properties.to_dict(),
            "completed_sets": pstate.properties.completed_set_count(),
        }
        if viewer_id is None or viewer_id == pid:
            entry["hand"] = [c.to_dict() for c in pstate.hand]
        players.append(entry)

    snapshot: Dict[str, Any] = {
        "room_id": game.room_id,
        "is_started": game.is_started,
        "turn_number": game.turn_number,
        "current_player_id": game.get_current_player().player_id,
        "cards_played_this_turn": game.cards_played_this_turn,
        "wildcard_reassigned_this_turn": game.wildcard_reassigned_this_turn,
        "winner_id": game.winner_id,
        "pending_action": game.pending_action.to_dict(),
        "players": players,
        "deck": {
            "cards_remaining": len(game.deck),
            "discard_count": len(game.discard_pile),
            "top_discard": game.discard_pile[-1].to_dict() if game.discard_pile else None,
        },
    }

    return snapshot

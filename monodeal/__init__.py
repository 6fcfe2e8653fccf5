"""
Monopoly Deal Rules Engine

A deterministic implementation of the property-card game rules, including
rent, debts, theft, forced trades and the Just Say No counter.
"""

from .game import ActionResult, GameState, create_game
from .player import Player, PlayerState
from .config import GameConfig, PropertyColor
from .rules import Action, ActionType, apply_action, get_legal_actions

__all__ = [
    "ActionResult",
    "GameState",
    "create_game",
    "Player",
    "PlayerState",
    "GameConfig",
    "PropertyColor",
    "Action",
    "ActionType",
    "apply_action",
    "get_legal_actions",
]

"""
Custom exception hierarchy for the room and API layers.

The rules engine itself never raises for rule violations; these are used
where a request cannot even reach the engine (unknown room, full lobby,
malformed input).
"""


class DealError(Exception):
    """Base exception for all game-related errors."""


class RoomNotFoundError(DealError):
    """Room does not exist."""


class RoomFullError(DealError):
    """Room has no free seats."""


class GameAlreadyStartedError(DealError):
    """Lobby operation attempted after the game started."""


class PlayerNotFoundError(DealError):
    """Player is not seated in the room."""


class InvalidActionError(DealError):
    """Action is not legal in the current state."""


class ValidationError(DealError):
    """Input validation failed."""

"""Shared test fixtures for the rules engine tests."""

import itertools

import pytest

from monodeal import GameConfig, Player, create_game
from monodeal.cards import ActionCard, ActionCardName, MoneyCard, PropertyCard, RentCard
from monodeal.config import PropertyColor


class CardFactory:
    """Builds cards with short, predictable ids."""

    def __init__(self):
        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids)}"

    def money(self, value: int = 1) -> MoneyCard:
        return MoneyCard(self._next_id("m"), value, f"${value}M")

    def prop(self, color: PropertyColor, value: int = 3) -> PropertyCard:
        card_id = self._next_id("p")
        return PropertyCard(card_id, value, f"{color.value} {card_id}", color)

    def wild(self) -> PropertyCard:
        card_id = self._next_id("w")
        return PropertyCard(card_id, 4, f"Wildcard {card_id}", is_wildcard=True)

    def action(self, name: ActionCardName) -> ActionCard:
        return ActionCard(self._next_id("a"), 1, name)

    def rent(self, first: PropertyColor, second: PropertyColor) -> RentCard:
        return RentCard(self._next_id("r"), 1, f"{first.value}/{second.value} Rent", (first, second))


@pytest.fixture
def cards():
    """Card factory for hand-built game states."""
    return CardFactory()


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def two_players():
    """Two test players."""
    return [Player("p1", "Alice"), Player("p2", "Bob")]


@pytest.fixture
def three_players():
    """Three test players."""
    return [Player("p1", "Alice"), Player("p2", "Bob"), Player("p3", "Charlie")]


@pytest.fixture
def basic_game(game_config, two_players):
    """Basic game with two players and a seeded shuffled deck."""
    return create_game(game_config, two_players)


@pytest.fixture
def empty_game(game_config, two_players):
    """Started two-player game with an empty deck and empty hands; Alice to play."""
    return create_game(game_config, two_players, deck=[])


@pytest.fixture
def three_player_game(game_config, three_players):
    """Started three-player game with an empty deck and empty hands; Alice to play."""
    return create_game(game_config, three_players, deck=[])

"""
Game configuration settings and card data tables.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class PropertyColor(str, Enum):
    """Property colour groups."""

    BROWN = "Brown"
    BLUE = "Blue"
    GREEN = "Green"
    YELLOW = "Yellow"
    RED = "Red"
    ORANGE = "Orange"
    PURPLE = "Purple"
    LIGHT_BLUE = "LightBlue"
    RAILROAD = "Railroad"
    UTILITY = "Utility"


@dataclass
class GameConfig:
    """Configuration for a game."""

    hand_limit: int = 7
    max_cards_per_turn: int = 3
    sets_to_win: int = 3

    opening_hand_size: int = 5
    turn_draw: int = 2
    empty_hand_draw: int = 5
    pass_go_draw: int = 2

    debt_collector_amount: int = 5
    birthday_amount: int = 2

    house_rent_bonus: int = 3
    hotel_rent_bonus: int = 4

    seed: Optional[int] = None


REQUIRED_SET_SIZE: Dict[PropertyColor, int] = {
    PropertyColor.BROWN: 2,
    PropertyColor.BLUE: 2,
    PropertyColor.UTILITY: 2,
    PropertyColor.RAILROAD: 4,
    PropertyColor.GREEN: 3,
    PropertyColor.YELLOW: 3,
    PropertyColor.RED: 3,
    PropertyColor.ORANGE: 3,
    PropertyColor.PURPLE: 3,
    PropertyColor.LIGHT_BLUE: 3,
}

# Rent by number of cards in the set (index 0 = one card).
RENT_TABLE: Dict[PropertyColor, List[int]] = {
    PropertyColor.BROWN: [1, 2],
    PropertyColor.LIGHT_BLUE: [1, 2, 3],
    PropertyColor.PURPLE: [1, 2, 4],
    PropertyColor.ORANGE: [1, 3, 5],
    PropertyColor.RED: [2, 3, 6],
    PropertyColor.YELLOW: [2, 4, 6],
    PropertyColor.GREEN: [2, 4, 7],
    PropertyColor.BLUE: [3, 8],
    PropertyColor.RAILROAD: [1, 2, 3, 4],
    PropertyColor.UTILITY: [1, 2],
}


def required_set_size(color: PropertyColor) -> int:
    """Number of cards that make a complete set of this colour."""
    return REQUIRED_SET_SIZE[color]


def base_rent(color: PropertyColor, card_count: int) -> int:
    """Base rent for a set holding card_count cards, capped at a full set."""
    if card_count <= 0:
        return 0
    index = min(card_count, required_set_size(color)) - 1
    return RENT_TABLE[color][index]


def parse_color(value: object) -> Optional[PropertyColor]:
    """Return the PropertyColor for a value, or None if it is not a colour."""
    if isinstance(value, PropertyColor):
        return value
    if not isinstance(value, str):
        return None
    try:
        return PropertyColor(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class PropertyData:
    """Data for one named property card."""

    name: str
    color: PropertyColor
    value: int


PROPERTY_NAMES: Dict[PropertyColor, List[str]] = {
    PropertyColor.BROWN: ["Mediterranean Avenue", "Baltic Avenue"],
    PropertyColor.BLUE: ["Boardwalk", "Park Place"],
    PropertyColor.GREEN: ["Pacific Avenue", "North Carolina Avenue", "Pennsylvania Avenue"],
    PropertyColor.YELLOW: ["Atlantic Avenue", "Ventnor Avenue", "Marvin Gardens"],
    PropertyColor.RED: ["Kentucky Avenue", "Indiana Avenue", "Illinois Avenue"],
    PropertyColor.ORANGE: ["St. James Place", "Tennessee Avenue", "New York Avenue"],
    PropertyColor.PURPLE: ["St. Charles Place", "Virginia Avenue", "States Avenue"],
    PropertyColor.LIGHT_BLUE: ["Connecticut Avenue", "Vermont Avenue", "Oriental Avenue"],
    PropertyColor.RAILROAD: [
        "Reading Railroad",
        "Pennsylvania Railroad",
        "B&O Railroad",
        "Short Line",
    ],
    PropertyColor.UTILITY: ["Electric Company", "Water Works"],
}


def property_data() -> List[PropertyData]:
    """All fixed-colour property cards in the deck."""
    cards: List[PropertyData] = []
    for color in PropertyColor:
        value = 2 if color in (PropertyColor.RAILROAD, PropertyColor.UTILITY) else 3
        for name in PROPERTY_NAMES[color]:
            cards.append(PropertyData(name, color, value))
    return cards


# (colour pair, copies in the deck)
RENT_CARD_GROUPS: List[Tuple[Tuple[PropertyColor, PropertyColor], int]] = [
    ((PropertyColor.BROWN, PropertyColor.LIGHT_BLUE), 2),
    ((PropertyColor.PURPLE, PropertyColor.ORANGE), 2),
    ((PropertyColor.RED, PropertyColor.YELLOW), 2),
    ((PropertyColor.GREEN, PropertyColor.BLUE), 2),
    ((PropertyColor.RAILROAD, PropertyColor.UTILITY), 2),
]

RENT_CARD_VALUE = 1
ACTION_CARD_VALUE = 1
WILDCARD_VALUE = 4
WILDCARD_COUNT = 4

MONEY_VALUES: List[int] = [1, 1, 1, 1, 2, 2, 2, 3, 3, 4, 4, 5, 5]

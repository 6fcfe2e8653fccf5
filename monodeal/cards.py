"""
Card definitions and deck construction.
"""

import random
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from monodeal.config import (
    ACTION_CARD_VALUE,
    MONEY_VALUES,
    RENT_CARD_GROUPS,
    RENT_CARD_VALUE,
    WILDCARD_COUNT,
    WILDCARD_VALUE,
    PropertyColor,
    property_data,
)


class CardType(Enum):
    """The four card families."""

    PROPERTY = "PROPERTY"
    MONEY = "MONEY"
    ACTION = "ACTION"
    RENT = "RENT"


class ActionCardName(str, Enum):
    """Named action card effects."""

    DEAL_BREAKER = "Deal Breaker"
    JUST_SAY_NO = "Just Say No"
    SLY_DEAL = "Sly Deal"
    FORCED_DEAL = "Forced Deal"
    DEBT_COLLECTOR = "Debt Collector"
    ITS_MY_BIRTHDAY = "It's My Birthday"
    DOUBLE_THE_RENT = "Double The Rent"
    HOUSE = "House"
    HOTEL = "Hotel"
    PASS_GO = "Pass Go"
    RENT = "Rent"


@dataclass(frozen=True)
class Card:
    """Base card. Every card has a stable id and a money value."""

    id: str
    value: int

    card_type = None  # set on each variant

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.value, "type": self.card_type.value}


@dataclass(frozen=True)
class MoneyCard(Card):
    name: str

    card_type = CardType.MONEY

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["name"] = self.name
        return data


@dataclass(frozen=True)
class PropertyCard(Card):
    """A property. Wildcards have no printed colour."""

    name: str
    color: Optional[PropertyColor] = None
    is_wildcard: bool = False

    card_type = CardType.PROPERTY

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["name"] = self.name
        data["color"] = self.color.value if self.color else None
        data["is_wildcard"] = self.is_wildcard
        return data


@dataclass(frozen=True)
class ActionCard(Card):
    name: ActionCardName

    card_type = CardType.ACTION

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["name"] = self.name.value
        return data


@dataclass(frozen=True)
class RentCard(Card):
    """Rent usable against either of two colours."""

    name: str
    rent_colors: Tuple[PropertyColor, PropertyColor]

    card_type = CardType.RENT

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["name"] = self.name
        data["rent_colors"] = [c.value for c in self.rent_colors]
        return data


def is_action(card: Card, name: ActionCardName) -> bool:
    """Check whether card is the named action card."""
    return isinstance(card, ActionCard) and card.name == name


def total_value(cards: Iterable[Card]) -> int:
    """Sum of card values."""
    return sum(card.value for card in cards)


def _new_id() -> str:
    return uuid.uuid4().hex


def create_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """
    Create a shuffled deck.

    Cards are drawn by popping from the end of the returned list.
    """
    deck: List[Card] = []

    for data in property_data():
        deck.append(PropertyCard(_new_id(), data.value, data.name, data.color))

    for colors, count in RENT_CARD_GROUPS:
        for _ in range(count):
            name = f"{colors[0].value}/{colors[1].value} Rent"
            deck.append(RentCard(_new_id(), RENT_CARD_VALUE, name, colors))

    for i in range(WILDCARD_COUNT):
        deck.append(
            PropertyCard(_new_id(), WILDCARD_VALUE, f"Multi-Color Property {i + 1}", is_wildcard=True)
        )

    for value in MONEY_VALUES:
        deck.append(MoneyCard(_new_id(), value, f"${value}M"))

    for name in ActionCardName:
        if name == ActionCardName.RENT:
            continue
        deck.append(ActionCard(_new_id(), ACTION_CARD_VALUE, name))

    (rng or random.Random()).shuffle(deck)
    return deck

"""
Player state and property ownership.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from monodeal.cards import ActionCardName, Card, PropertyCard, is_action, total_value
from monodeal.config import PropertyColor, base_rent, required_set_size


@dataclass(eq=False)
class PropertySet:
    """Cards of one colour grouped together, plus building upgrades."""

    color: PropertyColor
    cards: List[Card] = field(default_factory=list)
    houses: int = 0
    hotels: int = 0

    @property
    def required_size(self) -> int:
        return required_set_size(self.color)

    def is_complete(self) -> bool:
        """A set is complete once it holds the colour's required number of cards."""
        return len(self.cards) >= self.required_size

    def base_rent(self) -> int:
        return base_rent(self.color, len(self.cards))

    def index_of(self, card_id: str) -> int:
        for i, card in enumerate(self.cards):
            if card.id == card_id:
                return i
        return -1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color.value,
            "cards": [c.to_dict() for c in self.cards],
            "houses": self.houses,
            "hotels": self.hotels,
            "is_complete": self.is_complete(),
        }


class PropertyHoldings:
    """
    A player's property sets, keyed by colour.

    A colour may hold several independent sets at once. Colours are always
    walked in PropertyColor declaration order, and within a colour sets keep
    the order they were created in.

    Placement policy: a new card joins the first set of its colour that is not
    yet complete; if every set of that colour is complete (or there is none),
    a new set is appended.
    """

    def __init__(self):
        self._sets: Dict[PropertyColor, List[PropertySet]] = {color: [] for color in PropertyColor}

    def colors(self) -> List[PropertyColor]:
        """Colours the player holds at least one set of."""
        return [color for color in PropertyColor if self._sets[color]]

    def sets(self, color: PropertyColor) -> List[PropertySet]:
        return list(self._sets[color])

    def iter_sets(self) -> Iterator[PropertySet]:
        for color in PropertyColor:
            yield from self._sets[color]

    def has_color(self, color: PropertyColor) -> bool:
        return bool(self._sets[color])

    def add_card(self, color: PropertyColor, card: Card) -> PropertySet:
        """File a property card under a colour and return the set it joined."""
        for prop_set in self._sets[color]:
            if not prop_set.is_complete():
                prop_set.cards.append(card)
                return prop_set
        prop_set = PropertySet(color, [card])
        self._sets[color].append(prop_set)
        return prop_set

    def add_set(self, prop_set: PropertySet) -> None:
        """Adopt a whole set (cards and buildings) as a new entry."""
        self._sets[prop_set.color].append(prop_set)

    def locate(self, card_id: str) -> Optional[PropertySet]:
        """Find the set that holds a card."""
        for prop_set in self.iter_sets():
            if prop_set.index_of(card_id) != -1:
                return prop_set
        return None

    def find_card(self, card_id: str) -> Optional[Card]:
        prop_set = self.locate(card_id)
        if prop_set is None:
            return None
        return prop_set.cards[prop_set.index_of(card_id)]

    def remove_card(self, card_id: str) -> Optional[Tuple[PropertyColor, Card]]:
        """
        Take a card out of its set.

        Returns (colour it was filed under, card). A set left empty is dropped
        along with any buildings on it.
        """
        prop_set = self.locate(card_id)
        if prop_set is None:
            return None
        card = prop_set.cards.pop(prop_set.index_of(card_id))
        if not prop_set.cards:
            self._sets[prop_set.color].remove(prop_set)
        return prop_set.color, card

    def remove_set(self, prop_set: PropertySet) -> None:
        self._sets[prop_set.color].remove(prop_set)

    def first_complete_set(self, color: PropertyColor) -> Optional[PropertySet]:
        for prop_set in self._sets[color]:
            if prop_set.is_complete():
                return prop_set
        return None

    def completed_set_count(self) -> int:
        """Every complete set counts, including several of one colour."""
        return sum(1 for prop_set in self.iter_sets() if prop_set.is_complete())

    def all_cards(self) -> List[Card]:
        return [card for prop_set in self.iter_sets() for card in prop_set.cards]

    def loose_cards(self) -> List[Card]:
        """Cards that sit in incomplete sets and may be stolen or traded."""
        return [
            card
            for prop_set in self.iter_sets()
            if not prop_set.is_complete()
            for card in prop_set.cards
        ]

    def wildcards(self) -> List[PropertyCard]:
        return [
            card
            for card in self.all_cards()
            if isinstance(card, PropertyCard) and card.is_wildcard
        ]

    def total_value(self) -> int:
        return total_value(self.all_cards())

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            color.value: [s.to_dict() for s in self._sets[color]]
            for color in self.colors()
        }

    def __repr__(self) -> str:
        return f"PropertyHoldings({self.to_dict()})"


class PlayerState:
    """Represents the complete state of a player in the game."""

    def __init__(self, player_id: str, name: str):
        self.player_id = player_id
        self.name = name
        self.hand: List[Card] = []
        self.properties = PropertyHoldings()
        self.money_pile: List[Card] = []
        self.is_ready = False

    def find_in_hand(self, card_id: str) -> Optional[Card]:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def remove_from_hand(self, card_id: str) -> Optional[Card]:
        card = self.find_in_hand(card_id)
        if card is not None:
            self.hand.remove(card)
        return card

    def find_in_money_pile(self, card_id: str) -> Optional[Card]:
        for card in self.money_pile:
            if card.id == card_id:
                return card
        return None

    def just_say_no_card(self) -> Optional[Card]:
        """The first Just Say No in hand, if any."""
        for card in self.hand:
            if is_action(card, ActionCardName.JUST_SAY_NO):
                return card
        return None

    def eligible_payment_cards(self) -> List[Card]:
        """Cards that can settle a debt: money pile plus every property."""
        return list(self.money_pile) + self.properties.all_cards()

    def __repr__(self) -> str:
        return (
            f"PlayerState(id={self.player_id!r}, name='{self.name}', "
            f"hand={len(self.hand)}, bank={total_value(self.money_pile)}, "
            f"sets={self.properties.completed_set_count()})"
        )


class Player:
    """
    Convenience wrapper for player information.
    This is primarily for the external API.
    """

    def __init__(self, player_id: str, name: str):
        self.player_id = player_id
        self.name = name

    def __repr__(self) -> str:
        return f"Player(id={self.player_id!r}, name='{self.name}')"

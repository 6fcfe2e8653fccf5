"""
Tests for card definitions, deck construction and rent tables.
"""

import random
from collections import Counter

from monodeal.cards import ActionCardName, CardType, PropertyCard, create_deck, is_action
from monodeal.config import (
    MONEY_VALUES,
    PropertyColor,
    base_rent,
    parse_color,
    property_data,
    required_set_size,
)


def test_deck_composition():
    """The deck holds every property, rent, wildcard, money and action card once."""
    deck = create_deck(random.Random(1))
    counts = Counter(card.card_type for card in deck)

    assert counts[CardType.PROPERTY] == len(property_data()) + 4
    assert counts[CardType.RENT] == 10
    assert counts[CardType.MONEY] == len(MONEY_VALUES)
    assert counts[CardType.ACTION] == len(ActionCardName) - 1
    assert len(deck) == 65


def test_deck_has_no_rent_action_card():
    """Rent is only ever a RentCard; there is no 'Rent' action card."""
    deck = create_deck(random.Random(1))
    assert not any(is_action(card, ActionCardName.RENT) for card in deck)


def test_card_ids_are_unique():
    """Every card gets its own id."""
    deck = create_deck(random.Random(3))
    assert len({card.id for card in deck}) == len(deck)


def test_same_seed_same_order():
    """Shuffling is driven only by the supplied RNG."""
    first = create_deck(random.Random(7))
    second = create_deck(random.Random(7))

    def key(deck):
        return [(c.card_type, c.value, c.to_dict().get("name")) for c in deck]

    assert key(first) == key(second)


def test_wildcards_have_no_printed_colour():
    """Wildcards take the colour of the set they are filed in."""
    deck = create_deck(random.Random(1))
    wildcards = [c for c in deck if isinstance(c, PropertyCard) and c.is_wildcard]
    assert len(wildcards) == 4
    assert all(c.color is None for c in wildcards)
    assert all(c.value == 4 for c in wildcards)


def test_required_set_sizes():
    """Brown, Blue and Utility need 2; Railroad needs 4; the rest need 3."""
    assert required_set_size(PropertyColor.BROWN) == 2
    assert required_set_size(PropertyColor.BLUE) == 2
    assert required_set_size(PropertyColor.UTILITY) == 2
    assert required_set_size(PropertyColor.RAILROAD) == 4
    assert required_set_size(PropertyColor.GREEN) == 3
    assert required_set_size(PropertyColor.LIGHT_BLUE) == 3


def test_base_rent_is_capped_at_full_set():
    """Extra cards beyond a full set do not raise the base rent."""
    assert base_rent(PropertyColor.BROWN, 1) == 1
    assert base_rent(PropertyColor.BROWN, 2) == 2
    assert base_rent(PropertyColor.BROWN, 5) == 2
    assert base_rent(PropertyColor.BLUE, 2) == 8
    assert base_rent(PropertyColor.RAILROAD, 4) == 4
    assert base_rent(PropertyColor.GREEN, 0) == 0


def test_parse_color():
    """Colour names parse to PropertyColor; anything else is None."""
    assert parse_color("LightBlue") == PropertyColor.LIGHT_BLUE
    assert parse_color(PropertyColor.RED) == PropertyColor.RED
    assert parse_color("Pink") is None
    assert parse_color(None) is None
    assert parse_color(3) is None


def test_card_to_dict(cards):
    """Serialized cards carry id, value, type and variant fields."""
    rent = cards.rent(PropertyColor.RED, PropertyColor.YELLOW)
    data = rent.to_dict()
    assert data["type"] == "RENT"
    assert data["rent_colors"] == ["Red", "Yellow"]
    assert data["value"] == 1

    wild = cards.wild().to_dict()
    assert wild["is_wildcard"] is True
    assert wild["color"] is None

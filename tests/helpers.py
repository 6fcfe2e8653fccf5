"""Helpers for building game states card by card."""

from monodeal.config import required_set_size


def give(game, player_id, *cards):
    """Put cards straight into a player's hand."""
    game.players[player_id].hand.extend(cards)
    return cards[0] if len(cards) == 1 else cards


def place(game, player_id, color, *cards):
    """File property cards under a colour in a player's holdings."""
    for card in cards:
        game.players[player_id].properties.add_card(color, card)
    return cards[0] if len(cards) == 1 else cards


def complete_set(game, cards, player_id, color):
    """Give a player a complete set of one colour and return its cards."""
    set_cards = [cards.prop(color) for _ in range(required_set_size(color))]
    place(game, player_id, color, *set_cards)
    return set_cards


def bank(game, player_id, *cards):
    game.players[player_id].money_pile.extend(cards)
    return cards[0] if len(cards) == 1 else cards


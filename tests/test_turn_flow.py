"""
Tests for turn flow: dealing, drawing, the play budget, discards and winning.
"""

import pytest

from helpers import complete_set, give
from monodeal import GameConfig, Player, create_game
from monodeal.cards import ActionCardName
from monodeal.config import PropertyColor
from monodeal.pending import DiscardNeeded, DoubleRentPending, PendingType


def test_create_game_deals_opening_hands(basic_game):
    """Everyone gets 5 cards and the first player draws 2 more."""
    assert basic_game.is_started
    assert basic_game.get_current_player().player_id == "p1"
    assert len(basic_game.players["p1"].hand) == 7
    assert len(basic_game.players["p2"].hand) == 5
    assert len(basic_game.deck) == 65 - 12
    assert basic_game.turn_number == 1


def test_create_game_requires_two_players(game_config):
    """A single player cannot start a game."""
    with pytest.raises(ValueError):
        create_game(game_config, [Player("p1", "Alice")])


def test_create_game_rejects_duplicate_ids(game_config):
    """Player ids must be unique."""
    with pytest.raises(ValueError):
        create_game(game_config, [Player("p1", "Alice"), Player("p1", "Bob")])


def test_seeded_games_deal_identically(two_players):
    """The same seed deals the same hands."""
    first = create_game(GameConfig(seed=5), two_players)
    second = create_game(GameConfig(seed=5), two_players)

    def names(game):
        return [c.to_dict().get("name") for c in game.players["p1"].hand]

    assert names(first) == names(second)


def test_empty_hand_draws_five(empty_game, cards):
    """A player starting a turn with no cards draws 5."""
    empty_game.deck = [cards.money() for _ in range(10)]

    assert empty_game.request_end_turn("p1")

    assert empty_game.get_current_player().player_id == "p2"
    assert len(empty_game.players["p2"].hand) == 5


def test_non_empty_hand_draws_two(empty_game, cards):
    """A player holding cards draws 2."""
    give(empty_game, "p2", cards.money())
    empty_game.deck = [cards.money() for _ in range(10)]

    empty_game.request_end_turn("p1")

    assert len(empty_game.players["p2"].hand) == 3


def test_draw_from_short_deck(empty_game, cards):
    """Drawing past the end of the deck silently yields fewer cards."""
    empty_game.deck = [cards.money()]

    empty_game.request_end_turn("p1")

    assert len(empty_game.players["p2"].hand) == 1
    assert empty_game.deck == []


def test_turn_counters_reset(empty_game, cards):
    """Starting a turn resets the play count and the wildcard flag."""
    give(empty_game, "p1", cards.money())
    empty_game.play_card("p1", empty_game.players["p1"].hand[0].id)
    empty_game.wildcard_reassigned_this_turn = True

    empty_game.request_end_turn("p1")

    assert empty_game.cards_played_this_turn == 0
    assert empty_game.wildcard_reassigned_this_turn is False
    assert empty_game.turn_number == 2


def test_only_current_player_ends_turn(empty_game):
    """Another player cannot end the turn."""
    result = empty_game.request_end_turn("p2")
    assert not result
    assert empty_game.get_current_player().player_id == "p1"


def test_turn_order_wraps(three_player_game):
    """Turns cycle back to the first player."""
    for expected in ("p2", "p3", "p1"):
        current = three_player_game.get_current_player().player_id
        assert three_player_game.request_end_turn(current)
        assert three_player_game.get_current_player().player_id == expected


def test_third_card_ends_turn(empty_game, cards):
    """Playing the third card passes the turn automatically."""
    m1, m2, m3 = give(empty_game, "p1", cards.money(), cards.money(), cards.money())

    assert empty_game.play_card("p1", m1.id)
    assert empty_game.play_card("p1", m2.id)
    assert empty_game.get_current_player().player_id == "p1"
    result = empty_game.play_card("p1", m3.id)

    assert result
    assert empty_game.get_current_player().player_id == "p2"
    assert "3rd card" in result.message
    assert "Bob" in result.message


def test_end_turn_blocked_while_pending(empty_game, cards):
    """The turn cannot end while a pending action awaits a response."""
    debt = give(empty_game, "p1", cards.action(ActionCardName.DEBT_COLLECTOR))
    assert empty_game.play_card("p1", debt.id, play_as_action=True)

    assert not empty_game.request_end_turn("p1")
    assert empty_game.pending_action.pending_type == PendingType.DEBT_COLLECTOR


def test_double_rent_lapses_on_end_turn(empty_game, cards):
    """An unused Double The Rent is dropped when the turn ends."""
    complete_set(empty_game, cards, "p1", PropertyColor.BROWN)
    double, _ = give(
        empty_game,
        "p1",
        cards.action(ActionCardName.DOUBLE_THE_RENT),
        cards.rent(PropertyColor.BROWN, PropertyColor.LIGHT_BLUE),
    )
    assert empty_game.play_card("p1", double.id, play_as_action=True)
    assert isinstance(empty_game.pending_action, DoubleRentPending)

    assert empty_game.request_end_turn("p1")

    assert empty_game.pending_action.is_none
    assert empty_game.get_current_player().player_id == "p2"


def test_hand_limit_requires_discard(empty_game, cards):
    """Ending a turn with more than 7 cards waits for a discard."""
    hand = give(empty_game, "p1", *[cards.money() for _ in range(9)])

    assert empty_game.request_end_turn("p1")

    assert empty_game.pending_action == DiscardNeeded("p1")
    assert empty_game.get_current_player().player_id == "p1"

    # Wrong count, another player's request and unknown cards are all refused
    assert not empty_game.discard_cards("p1", [hand[0].id])
    assert not empty_game.discard_cards("p2", [hand[0].id, hand[1].id])
    assert not empty_game.discard_cards("p1", [hand[0].id, "missing"])
    assert not empty_game.discard_cards("p1", [hand[0].id, hand[0].id])

    result = empty_game.discard_cards("p1", [hand[0].id, hand[1].id])

    assert result
    assert len(empty_game.players["p1"].hand) == 7
    assert empty_game.discard_pile[-2:] == [hand[0], hand[1]]
    assert empty_game.pending_action.is_none
    assert empty_game.get_current_player().player_id == "p2"


def test_no_plays_while_discarding(empty_game, cards):
    """A required discard blocks everything else."""
    give(empty_game, "p1", *[cards.money() for _ in range(8)])
    empty_game.request_end_turn("p1")

    card = empty_game.players["p1"].hand[0]
    assert not empty_game.play_card("p1", card.id)
    assert not empty_game.request_end_turn("p1")


def test_three_complete_sets_win(empty_game, cards):
    """Ending a turn with three complete sets wins the game."""
    complete_set(empty_game, cards, "p1", PropertyColor.BROWN)
    complete_set(empty_game, cards, "p1", PropertyColor.BLUE)
    complete_set(empty_game, cards, "p1", PropertyColor.UTILITY)

    result = empty_game.request_end_turn("p1")

    assert result
    assert empty_game.winner_id == "p1"
    assert empty_game.is_game_over
    assert "wins" in result.message
    assert not empty_game.request_end_turn("p1")


def test_two_sets_of_one_colour_count_towards_win(empty_game, cards):
    """Each complete set counts, even when two share a colour."""
    complete_set(empty_game, cards, "p1", PropertyColor.BROWN)
    complete_set(empty_game, cards, "p1", PropertyColor.BROWN)
    complete_set(empty_game, cards, "p1", PropertyColor.BLUE)

    empty_game.request_end_turn("p1")

    assert empty_game.winner_id == "p1"


def test_win_checked_before_discard(empty_game, cards):
    """A winning player is not asked to discard."""
    complete_set(empty_game, cards, "p1", PropertyColor.BROWN)
    complete_set(empty_game, cards, "p1", PropertyColor.BLUE)
    complete_set(empty_game, cards, "p1", PropertyColor.UTILITY)
    give(empty_game, "p1", *[cards.money() for _ in range(9)])

    empty_game.request_end_turn("p1")

    assert empty_game.winner_id == "p1"
    assert empty_game.pending_action.is_none

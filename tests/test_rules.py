"""
Tests for legal action enumeration and action dispatch.
"""

import logging

from helpers import bank, complete_set, give, place
from monodeal import Action, ActionType, apply_action, get_legal_actions
from monodeal.cards import ActionCardName
from monodeal.config import PropertyColor


def _types(actions):
    return {a.action_type for a in actions}


def test_idle_turn_offers_plays_and_end_turn(empty_game, cards):
    """A money card can be banked and the turn can always be ended."""
    money = give(empty_game, "p1", cards.money(2))

    actions = get_legal_actions(empty_game, "p1")

    assert _types(actions) == {ActionType.PLAY_CARD, ActionType.END_TURN}
    assert actions[0].params == {"card_id": money.id, "play_as_action": False}


def test_wildcard_offers_every_colour(empty_game, cards):
    """A wildcard in hand can be played to any colour."""
    give(empty_game, "p1", cards.wild())

    plays = [a for a in get_legal_actions(empty_game, "p1") if a.action_type == ActionType.PLAY_CARD]

    assert {a.params["chosen_color"] for a in plays} == {c.value for c in PropertyColor}


def test_rent_card_offers_owned_colours(empty_game, cards):
    """Rent plays are offered only for colours the player owns."""
    place(empty_game, "p1", PropertyColor.RED, cards.prop(PropertyColor.RED))
    rent = give(empty_game, "p1", cards.rent(PropertyColor.RED, PropertyColor.YELLOW))

    plays = [a for a in get_legal_actions(empty_game, "p1") if a.params.get("play_as_action")]

    assert [a.params for a in plays] == [
        {"card_id": rent.id, "chosen_color": "Red", "play_as_action": True}
    ]


def test_budget_spent_leaves_only_end_turn(empty_game, cards):
    """With no plays left only ending the turn remains."""
    give(empty_game, "p1", cards.money())
    empty_game.cards_played_this_turn = 3

    assert _types(get_legal_actions(empty_game, "p1")) == {ActionType.END_TURN}


def test_wildcard_reassignment_offered_once(empty_game, cards):
    """Reassigning is offered for every other colour until used."""
    wild = place(empty_game, "p1", PropertyColor.RED, cards.wild())

    moves = [a for a in get_legal_actions(empty_game, "p1") if a.action_type == ActionType.REASSIGN_WILDCARD]
    assert len(moves) == len(PropertyColor) - 1
    assert all(a.params["card_id"] == wild.id for a in moves)

    empty_game.reassign_wildcard("p1", wild.id, "Green")
    assert ActionType.REASSIGN_WILDCARD not in _types(get_legal_actions(empty_game, "p1"))


def test_rent_payers_get_payment_suggestion(three_player_game, cards):
    """Each payer is offered a payment; the collector waits."""
    place(three_player_game, "p1", PropertyColor.RED, cards.prop(PropertyColor.RED))
    rent = give(three_player_game, "p1", cards.rent(PropertyColor.RED, PropertyColor.YELLOW))
    m = bank(three_player_game, "p2", cards.money(3))
    three_player_game.play_card("p1", rent.id, chosen_color="Red", play_as_action=True)

    assert get_legal_actions(three_player_game, "p1") == []
    (pay,) = get_legal_actions(three_player_game, "p2")
    assert pay.action_type == ActionType.PAY_RENT
    assert pay.params == {"amount": 2, "card_ids": [m.id], "bankruptcy": False}
    (broke,) = get_legal_actions(three_player_game, "p3")
    assert broke.params["bankruptcy"] is True


def test_debt_collector_offers_targets(three_player_game, cards):
    """The collector chooses among every other player."""
    card = give(three_player_game, "p1", cards.action(ActionCardName.DEBT_COLLECTOR))
    three_player_game.play_card("p1", card.id, play_as_action=True)

    actions = get_legal_actions(three_player_game, "p1")

    assert [a.params["target_player_id"] for a in actions] == ["p2", "p3"]
    assert all(a.action_type == ActionType.CHOOSE_DEBT_TARGET for a in actions)


def test_just_say_no_response_options(empty_game, cards):
    """The responder may use or decline the counter."""
    give(empty_game, "p2", cards.action(ActionCardName.JUST_SAY_NO))
    target = place(empty_game, "p2", PropertyColor.RED, cards.prop(PropertyColor.RED))
    card = give(empty_game, "p1", cards.action(ActionCardName.SLY_DEAL))
    empty_game.play_card("p1", card.id, play_as_action=True)
    empty_game.execute_property_steal("p1", "p2", target.id)

    actions = get_legal_actions(empty_game, "p2")

    assert [a.params["use_counter"] for a in actions] == [True, False]
    assert get_legal_actions(empty_game, "p1") == []


def test_discard_suggestion(empty_game, cards):
    """The discard action names exactly the surplus cards."""
    give(empty_game, "p1", *[cards.money() for _ in range(9)])
    empty_game.request_end_turn("p1")

    (action,) = get_legal_actions(empty_game, "p1")

    assert action.action_type == ActionType.DISCARD_CARDS
    assert action.params["count"] == 2
    assert apply_action(empty_game, action, "p1")


def test_no_actions_after_game_over(empty_game, cards):
    """A finished game offers nothing."""
    for color in (PropertyColor.BROWN, PropertyColor.BLUE, PropertyColor.UTILITY):
        complete_set(empty_game, cards, "p1", color)
    empty_game.request_end_turn("p1")

    assert get_legal_actions(empty_game, "p1") == []
    assert get_legal_actions(empty_game, "p2") == []
    assert get_legal_actions(empty_game, "nobody") == []


def test_apply_action_dispatches(empty_game, cards):
    """apply_action routes to the matching engine operation."""
    money = give(empty_game, "p1", cards.money(4))

    assert apply_action(empty_game, Action(ActionType.PLAY_CARD, card_id=money.id), "p1")
    assert empty_game.players["p1"].money_pile == [money]

    assert apply_action(empty_game, Action(ActionType.END_TURN), "p1")
    assert empty_game.get_current_player().player_id == "p2"


def test_apply_action_rejects_bad_card_ids(empty_game, cards):
    """Payment and discard card lists must be lists of strings."""
    result = apply_action(empty_game, Action(ActionType.PAY_RENT, card_ids="m1"), "p2")
    assert not result
    assert "card_ids" in result.reason


def test_rejections_are_logged(empty_game, caplog):
    """Rejected actions are logged at debug level."""
    with caplog.at_level(logging.DEBUG, logger="monodeal.rules"):
        result = apply_action(empty_game, Action(ActionType.END_TURN), "p2")

    assert not result
    assert "Rejected" in caplog.text


def test_action_to_dict():
    """Actions serialize to their wire form."""
    action = Action(ActionType.STEAL_PROPERTY, target_player_id="p2", target_card_id="p4")
    assert action.to_dict() == {
        "action_type": "steal_property",
        "params": {"target_player_id": "p2", "target_card_id": "p4"},
    }

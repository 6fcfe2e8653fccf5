"""
High-level rules API for controlling game flow.
This module provides the public interface for game actions and legal move detection.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from monodeal.cards import ActionCard, ActionCardName, MoneyCard, PropertyCard, RentCard
from monodeal.config import PropertyColor
from monodeal.game import ActionResult, GameState
from monodeal.money import suggest_payment
from monodeal.pending import (
    BirthdayPending,
    DealBreakerPending,
    DebtCollectorPending,
    DiscardNeeded,
    DoubleRentPending,
    ForcedDealPending,
    JustSayNoOpportunity,
    RentPending,
    SlyDealPending,
)
from monodeal.player import PlayerState

logger = logging.getLogger(__name__)


class ActionType(Enum):
    """Types of actions a player can take."""

    PLAY_CARD = "play_card"
    REASSIGN_WILDCARD = "reassign_wildcard"
    STEAL_PROPERTY = "steal_property"
    DEAL_BREAKER = "deal_breaker"
    FORCED_DEAL = "forced_deal"
    CHOOSE_DEBT_TARGET = "choose_debt_target"
    PAY_DEBT = "pay_debt"
    PAY_RENT = "pay_rent"
    PAY_BIRTHDAY = "pay_birthday"
    RESPOND_JUST_SAY_NO = "respond_just_say_no"
    DISCARD_CARDS = "discard_cards"
    END_TURN = "end_turn"


class Action:
    """Represents a game action that can be taken."""

    def __init__(self, action_type: ActionType, **params: Any):
        self.action_type = action_type
        self.params = params

    def to_dict(self) -> Dict[str, Any]:
        return {"action_type": self.action_type.value, "params": dict(self.params)}

    def __repr__(self) -> str:
        return f"Action({self.action_type.value}, {self.params})"


def get_legal_actions(game_state: GameState, player_id: str) -> List[Action]:
    """
    Get all legal actions available to a player.

    Parameters are filled in where they can be enumerated. Payment actions
    carry a suggested set of cards rather than every possible combination.

    Args:
        game_state: Current game state
        player_id: Player to get actions for

    Returns:
        List of legal Action objects
    """
    if not game_state.is_started or game_state.is_game_over:
        return []
    player = game_state.get_player(player_id)
    if player is None:
        return []

    pending = game_state.pending_action
    actions: List[Action] = []

    # Responses to a pending action may come from players other than the current one
    if isinstance(pending, JustSayNoOpportunity):
        if pending.player_id == player_id:
            if player.just_say_no_card() is not None:
                actions.append(Action(ActionType.RESPOND_JUST_SAY_NO, use_counter=True))
            actions.append(Action(ActionType.RESPOND_JUST_SAY_NO, use_counter=False))
        return actions

    if isinstance(pending, DiscardNeeded):
        if pending.player_id == player_id:
            count = len(player.hand) - game_state.config.hand_limit
            actions.append(
                Action(
                    ActionType.DISCARD_CARDS,
                    count=count,
                    card_ids=[card.id for card in player.hand[-count:]],
                )
            )
        return actions

    if isinstance(pending, RentPending):
        if player_id in pending.remaining_payers:
            actions.append(_payment_action(ActionType.PAY_RENT, player, pending.amount))
        return actions

    if isinstance(pending, BirthdayPending):
        if player_id in pending.remaining_payers:
            actions.append(_payment_action(ActionType.PAY_BIRTHDAY, player, pending.amount))
        return actions

    if isinstance(pending, DebtCollectorPending):
        if pending.target_player_id == player_id:
            actions.append(_payment_action(ActionType.PAY_DEBT, player, pending.amount))
        elif pending.target_player_id is None and pending.player_id == player_id:
            for other in game_state.other_players(player_id):
                actions.append(Action(ActionType.CHOOSE_DEBT_TARGET, target_player_id=other.player_id))
        return actions

    # Everything below belongs to the current player
    if game_state.get_current_player().player_id != player_id:
        return []

    if isinstance(pending, SlyDealPending):
        for other in game_state.other_players(player_id):
            for card in other.properties.loose_cards():
                actions.append(
                    Action(ActionType.STEAL_PROPERTY, target_player_id=other.player_id, target_card_id=card.id)
                )
        return actions

    if isinstance(pending, DealBreakerPending):
        for other in game_state.other_players(player_id):
            for color in other.properties.colors():
                if other.properties.first_complete_set(color) is not None:
                    actions.append(
                        Action(ActionType.DEAL_BREAKER, target_player_id=other.player_id, color=color.value)
                    )
        return actions

    if isinstance(pending, ForcedDealPending):
        mine = player.properties.loose_cards()
        for other in game_state.other_players(player_id):
            for card in other.properties.loose_cards():
                for my_card in mine:
                    actions.append(
                        Action(
                            ActionType.FORCED_DEAL,
                            target_player_id=other.player_id,
                            target_card_id=card.id,
                            my_card_id=my_card.id,
                        )
                    )
        return actions

    if isinstance(pending, DoubleRentPending):
        for card in player.hand:
            if isinstance(card, RentCard):
                actions.extend(_rent_plays(player, card))
        actions.append(Action(ActionType.END_TURN))
        return actions

    if not pending.is_none:
        return actions

    if game_state.cards_played_this_turn < game_state.config.max_cards_per_turn:
        for card in player.hand:
            actions.extend(_card_plays(game_state, player, card))

    if not game_state.wildcard_reassigned_this_turn:
        for card in player.properties.wildcards():
            current = player.properties.locate(card.id).color
            for color in PropertyColor:
                if color != current:
                    actions.append(Action(ActionType.REASSIGN_WILDCARD, card_id=card.id, new_color=color.value))

    actions.append(Action(ActionType.END_TURN))
    return actions


def _payment_action(action_type: ActionType, player: PlayerState, amount: int) -> Action:
    card_ids, bankruptcy = suggest_payment(player, amount)
    return Action(action_type, amount=amount, card_ids=card_ids, bankruptcy=bankruptcy)


def _rent_plays(player: PlayerState, card: RentCard) -> List[Action]:
    return [
        Action(ActionType.PLAY_CARD, card_id=card.id, chosen_color=color.value, play_as_action=True)
        for color in card.rent_colors
        if player.properties.has_color(color)
    ]


def _card_plays(game_state: GameState, player: PlayerState, card) -> List[Action]:
    """Every legal way to play one card from hand."""
    if isinstance(card, PropertyCard):
        if card.is_wildcard:
            return [
                Action(ActionType.PLAY_CARD, card_id=card.id, chosen_color=color.value)
                for color in PropertyColor
            ]
        return [Action(ActionType.PLAY_CARD, card_id=card.id)]

    plays = [Action(ActionType.PLAY_CARD, card_id=card.id, play_as_action=False)]
    if isinstance(card, MoneyCard):
        return plays
    if isinstance(card, RentCard):
        return plays + _rent_plays(player, card)
    if not isinstance(card, ActionCard):
        return plays

    name = card.name
    others = game_state.other_players(player.player_id)
    as_action = Action(ActionType.PLAY_CARD, card_id=card.id, play_as_action=True)

    if name in (ActionCardName.HOUSE, ActionCardName.HOTEL):
        for color in player.properties.colors():
            if player.properties.first_complete_set(color) is not None:
                plays.append(
                    Action(ActionType.PLAY_CARD, card_id=card.id, chosen_color=color.value, play_as_action=True)
                )
    elif name == ActionCardName.DOUBLE_THE_RENT:
        has_rent = any(
            isinstance(c, RentCard) and any(player.properties.has_color(col) for col in c.rent_colors)
            for c in player.hand
        )
        if has_rent and game_state.cards_played_this_turn <= game_state.config.max_cards_per_turn - 2:
            plays.append(as_action)
    elif name == ActionCardName.SLY_DEAL:
        if any(o.properties.loose_cards() for o in others):
            plays.append(as_action)
    elif name == ActionCardName.DEAL_BREAKER:
        if any(o.properties.completed_set_count() for o in others):
            plays.append(as_action)
    elif name == ActionCardName.FORCED_DEAL:
        if player.properties.loose_cards() and any(o.properties.loose_cards() for o in others):
            plays.append(as_action)
    elif name in (ActionCardName.PASS_GO, ActionCardName.DEBT_COLLECTOR, ActionCardName.ITS_MY_BIRTHDAY):
        plays.append(as_action)
    return plays


def _card_ids(params: Dict[str, Any]) -> Optional[List[str]]:
    value = params.get("card_ids", [])
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        return None
    return list(value)


def apply_action(game_state: GameState, action: Action, player_id: str) -> ActionResult:
    """
    Apply an action to the game state.

    This is the main interface for executing moves.

    Args:
        game_state: Current game state
        action: Action to apply
        player_id: Player executing the action

    Returns:
        ActionResult; a failed result means nothing changed
    """
    result = _dispatch(game_state, action, player_id)
    if not result:
        logger.debug(
            "Rejected %s from %s in room %s: %s",
            action,
            player_id,
            game_state.room_id,
            result.reason,
        )
    return result


def _dispatch(game_state: GameState, action: Action, player_id: str) -> ActionResult:
    params = action.params

    if action.action_type == ActionType.PLAY_CARD:
        return game_state.play_card(
            player_id,
            params.get("card_id"),
            chosen_color=params.get("chosen_color"),
            play_as_action=bool(params.get("play_as_action", False)),
        )

    elif action.action_type == ActionType.REASSIGN_WILDCARD:
        return game_state.reassign_wildcard(player_id, params.get("card_id"), params.get("new_color"))

    elif action.action_type == ActionType.STEAL_PROPERTY:
        return game_state.execute_property_steal(
            player_id, params.get("target_player_id"), params.get("target_card_id")
        )

    elif action.action_type == ActionType.DEAL_BREAKER:
        return game_state.execute_deal_breaker(player_id, params.get("target_player_id"), params.get("color"))

    elif action.action_type == ActionType.FORCED_DEAL:
        return game_state.execute_forced_deal(
            player_id,
            params.get("target_player_id"),
            params.get("target_card_id"),
            params.get("my_card_id"),
        )

    elif action.action_type == ActionType.CHOOSE_DEBT_TARGET:
        return game_state.choose_debt_target(player_id, params.get("target_player_id"))

    elif action.action_type in (ActionType.PAY_DEBT, ActionType.PAY_RENT, ActionType.PAY_BIRTHDAY):
        card_ids = _card_ids(params)
        if card_ids is None:
            return ActionResult.fail("card_ids must be a list of card ids")
        bankruptcy = bool(params.get("bankruptcy", False))
        if action.action_type == ActionType.PAY_DEBT:
            return game_state.collect_debt(player_id, card_ids, bankruptcy)
        if action.action_type == ActionType.PAY_RENT:
            return game_state.collect_rent(player_id, card_ids, bankruptcy)
        return game_state.collect_birthday_payment(player_id, card_ids, bankruptcy)

    elif action.action_type == ActionType.RESPOND_JUST_SAY_NO:
        return game_state.respond_to_just_say_no(player_id, bool(params.get("use_counter", False)))

    elif action.action_type == ActionType.DISCARD_CARDS:
        card_ids = _card_ids(params)
        if card_ids is None:
            return ActionResult.fail("card_ids must be a list of card ids")
        return game_state.discard_cards(player_id, card_ids)

    elif action.action_type == ActionType.END_TURN:
        return game_state.request_end_turn(player_id)

    return ActionResult.fail(f"unsupported action {action.action_type}")

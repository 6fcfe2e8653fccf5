"""
Payments and event logging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from monodeal.cards import Card, PropertyCard, total_value
from monodeal.player import PlayerState


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    TURN_START = "turn_start"
    TURN_END = "turn_end"
    CARD_DRAW = "card_draw"

    PLAY_PROPERTY = "play_property"
    PLAY_MONEY = "play_money"
    PLAY_ACTION = "play_action"
    WILDCARD_REASSIGN = "wildcard_reassign"

    CHARGE_RENT = "charge_rent"
    BUILD_HOUSE = "build_house"
    BUILD_HOTEL = "build_hotel"

    PROPERTY_STEAL = "property_steal"
    DEAL_BREAKER = "deal_breaker"
    FORCED_DEAL = "forced_deal"
    DEBT_TARGET = "debt_target"

    PAYMENT = "payment"
    BANKRUPTCY = "bankruptcy"

    JUST_SAY_NO_OFFERED = "just_say_no_offered"
    JUST_SAY_NO_USED = "just_say_no_used"
    JUST_SAY_NO_DECLINED = "just_say_no_declined"

    DISCARD_REQUIRED = "discard_required"
    DISCARD = "discard"
    PLAYER_RENAMED = "player_renamed"
    GAME_END = "game_end"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        player_str = self.player_id if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


class EventLog:
    """Manages the game event log."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def log(
        self,
        event_type: EventType,
        player_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **extra: Any,
    ) -> None:
        """Log a game event."""
        payload = dict(details or {})
        payload.update(extra)
        event = GameEvent(event_type, player_id, payload)
        self.events.append(event)

    def get_events(self) -> List[GameEvent]:
        """Get all logged events."""
        return self.events.copy()


def validate_payment(
    payer: PlayerState, card_ids: Sequence[str], amount: int, bankruptcy: bool = False
) -> Tuple[bool, str]:
    """
    Check a proposed payment without touching any state.

    Eligible cards are the payer's money pile plus every property card they
    own, complete sets included. An ordinary payment must be worth at least
    the amount owed. A bankruptcy payment is only allowed when the payer is
    genuinely short, and must hand over every eligible card.

    Returns (ok, reason).
    """
    if len(set(card_ids)) != len(card_ids):
        return False, "duplicate card in payment"

    eligible = {card.id: card for card in payer.eligible_payment_cards()}
    for card_id in card_ids:
        if card_id not in eligible:
            return False, f"card {card_id} cannot be used for payment"

    if bankruptcy:
        if total_value(eligible.values()) >= amount:
            return False, "player can afford the payment"
        if set(card_ids) != set(eligible):
            return False, "bankruptcy requires surrendering every card"
        return True, ""

    paid = total_value(eligible[card_id] for card_id in card_ids)
    if paid < amount:
        return False, f"payment of {paid} does not cover {amount}"
    return True, ""


def transfer_payment(payer: PlayerState, collector: PlayerState, card_ids: Sequence[str]) -> List[Card]:
    """
    Move already-validated payment cards from payer to collector.

    Money goes to the collector's money pile. Property cards are filed under
    the colour they were sitting in on the payer's side, so a wildcard keeps
    its current assignment.
    """
    moved: List[Card] = []
    for card_id in card_ids:
        card = payer.find_in_money_pile(card_id)
        if card is not None:
            payer.money_pile.remove(card)
            collector.money_pile.append(card)
            moved.append(card)
            continue
        removed = payer.properties.remove_card(card_id)
        if removed is None:
            continue
        color, card = removed
        collector.properties.add_card(color, card)
        moved.append(card)
    return moved


def suggest_payment(payer: PlayerState, amount: int) -> Tuple[List[str], bool]:
    """
    Propose a payment for amount.

    Money is spent before property, largest first; a property card is only
    used once the money pile runs dry. Returns (card_ids, bankruptcy). When
    the payer cannot cover the amount the suggestion is the full surrender.
    """
    eligible = payer.eligible_payment_cards()
    if total_value(eligible) < amount:
        return [card.id for card in eligible], True

    money = sorted(payer.money_pile, key=lambda c: c.value, reverse=True)
    properties = sorted(
        payer.properties.all_cards(),
        key=lambda c: (isinstance(c, PropertyCard) and c.is_wildcard, -c.value),
    )
    chosen: List[str] = []
    paid = 0
    for card in money + properties:
        if paid >= amount:
            break
        chosen.append(card.id)
        paid += card.value
    return chosen, False

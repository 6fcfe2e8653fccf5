"""
Main game engine and state management.

Every public GameState operation validates the whole request before it
mutates anything and reports the outcome through an ActionResult. Rule
violations never raise.
"""

import random
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence

from monodeal.cards import (
    ActionCard,
    ActionCardName,
    Card,
    MoneyCard,
    PropertyCard,
    RentCard,
    create_deck,
    total_value,
)
from monodeal.config import GameConfig, PropertyColor, parse_color
from monodeal.money import EventLog, EventType, transfer_payment, validate_payment
from monodeal.pending import (
    NO_ACTION,
    BirthdayPending,
    DealBreakerPending,
    DebtCollectorPending,
    DiscardNeeded,
    DoubleRentPending,
    ForcedDealPending,
    JustSayNoOpportunity,
    PendingAction,
    PendingType,
    RentPending,
    SlyDealPending,
)
from monodeal.player import Player, PlayerState, PropertySet


@dataclass
class ActionResult:
    """
    Outcome of an engine operation.

    A failed result guarantees that no state changed. notification_type names
    the card or action worth announcing; message is a short line of text the
    transport can show to every player.
    """

    success: bool
    notification_type: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, notification_type: Optional[str] = None, message: Optional[str] = None) -> "ActionResult":
        return cls(True, notification_type, message)

    @classmethod
    def fail(cls, reason: str) -> "ActionResult":
        return cls(False, reason=reason)


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


class GameState:
    """
    Represents the complete state of one room's game.
    This is the main interface for the game engine.
    """

    def __init__(
        self,
        config: GameConfig,
        players: List[Player],
        room_id: str = "",
        deck: Optional[List[Card]] = None,
    ):
        self.room_id = room_id
        self.config = config
        self.event_log = EventLog()

        # Initialize RNG
        self.rng = random.Random(config.seed)

        # Initialize players, turn order is seating order
        self.players: Dict[str, PlayerState] = {}
        for player in players:
            self.players[player.player_id] = PlayerState(player.player_id, player.name)
        self.player_order: List[str] = [p.player_id for p in players]

        self.deck: List[Card] = create_deck(self.rng) if deck is None else list(deck)
        self.discard_pile: List[Card] = []

        # Game state
        self.current_player_index = 0
        self.turn_number = 0
        self.is_started = False
        self.winner_id: Optional[str] = None
        self.cards_played_this_turn = 0
        self.wildcard_reassigned_this_turn = False
        self.pending_action: PendingAction = NO_ACTION

        self.event_log.log(
            EventType.GAME_START,
            details={
                "room_id": room_id,
                "players": [p.name for p in players],
                "seed": config.seed,
            },
        )

    @property
    def is_game_over(self) -> bool:
        return self.winner_id is not None

    def get_player(self, player_id: str) -> Optional[PlayerState]:
        return self.players.get(player_id)

    def get_current_player(self) -> PlayerState:
        """Get the current active player."""
        current_id = self.player_order[self.current_player_index % len(self.player_order)]
        return self.players[current_id]

    def other_players(self, player_id: str) -> List[PlayerState]:
        """Every other player, in turn order starting after player_id."""
        start = self.player_order.index(player_id)
        count = len(self.player_order)
        return [self.players[self.player_order[(start + i) % count]] for i in range(1, count)]

    def card_value_total(self) -> int:
        """Value of every card in the game, wherever it currently sits."""
        total = total_value(self.deck) + total_value(self.discard_pile)
        for player in self.players.values():
            total += total_value(player.hand)
            total += total_value(player.money_pile)
            total += player.properties.total_value()
        return total

    # === TURN LIFECYCLE ===

    def draw_cards(self, player_id: str, count: int) -> List[Card]:
        """Draw up to count cards from the deck. An empty deck yields fewer."""
        player = self.players[player_id]
        drawn: List[Card] = []
        while self.deck and len(drawn) < count:
            drawn.append(self.deck.pop())
        player.hand.extend(drawn)
        if drawn:
            self.event_log.log(
                EventType.CARD_DRAW,
                player_id=player_id,
                details={"count": len(drawn), "deck_remaining": len(self.deck)},
            )
        return drawn

    def start_turn(self) -> None:
        """Begin the current player's turn: draw, then reset per-turn counters."""
        player = self.get_current_player()
        count = self.config.empty_hand_draw if not player.hand else self.config.turn_draw
        self.turn_number += 1
        self.cards_played_this_turn = 0
        self.wildcard_reassigned_this_turn = False
        self.event_log.log(
            EventType.TURN_START,
            player_id=player.player_id,
            details={"turn": self.turn_number},
        )
        self.draw_cards(player.player_id, count)

    def end_turn(self) -> None:
        """
        Finish the current player's turn.

        A player holding enough complete sets wins and the game stops here.
        A player over the hand limit must discard before the turn moves on.
        """
        player = self.get_current_player()

        if player.properties.completed_set_count() >= self.config.sets_to_win:
            self.winner_id = player.player_id
            self.pending_action = NO_ACTION
            self.event_log.log(
                EventType.GAME_END,
                player_id=player.player_id,
                details={"completed_sets": player.properties.completed_set_count()},
            )
            return

        if len(player.hand) > self.config.hand_limit:
            self.pending_action = DiscardNeeded(player.player_id)
            self.event_log.log(
                EventType.DISCARD_REQUIRED,
                player_id=player.player_id,
                details={"count": len(player.hand) - self.config.hand_limit},
            )
            return

        self._advance_turn()

    def _advance_turn(self) -> None:
        ending = self.get_current_player()
        self.event_log.log(EventType.TURN_END, player_id=ending.player_id, details={"turn": self.turn_number})
        self.current_player_index = (self.current_player_index + 1) % len(self.player_order)
        self.start_turn()

    def request_end_turn(self, player_id: str) -> ActionResult:
        """End the turn on the current player's request."""
        error = self._check_actor(player_id)
        if error is not None:
            return error
        if isinstance(self.pending_action, DoubleRentPending):
            # An unused boost simply lapses.
            self.pending_action = NO_ACTION
        elif not self.pending_action.is_none:
            return ActionResult.fail("a pending action must be resolved first")

        player = self.players[player_id]
        self.end_turn()
        return ActionResult.ok(message=self._turn_end_message(player))

    def discard_cards(self, player_id: str, card_ids: Sequence[str]) -> ActionResult:
        """Discard down to the hand limit, then pass the turn."""
        pending = self.pending_action
        if not isinstance(pending, DiscardNeeded) or pending.player_id != player_id:
            return ActionResult.fail("no discard required from this player")

        player = self.players[player_id]
        required = len(player.hand) - self.config.hand_limit
        if len(card_ids) != required:
            return ActionResult.fail(f"must discard exactly {required} cards")
        if len(set(card_ids)) != len(card_ids):
            return ActionResult.fail("duplicate card in discard")
        if any(player.find_in_hand(card_id) is None for card_id in card_ids):
            return ActionResult.fail("card not in hand")

        for card_id in card_ids:
            self.discard_pile.append(player.remove_from_hand(card_id))
        self.event_log.log(EventType.DISCARD, player_id=player_id, details={"count": required})

        self.pending_action = NO_ACTION
        self._advance_turn()
        return ActionResult.ok(message=self._turn_end_message(player))

    def _turn_end_message(self, player: PlayerState) -> str:
        if self.is_game_over:
            return f"{player.name} wins with {self.config.sets_to_win} complete sets!"
        if isinstance(self.pending_action, DiscardNeeded):
            return f"{player.name} must discard down to {self.config.hand_limit} cards."
        return f"{player.name} ended their turn. Turn passed to {self.get_current_player().name}."

    def _check_actor(self, player_id: str) -> Optional[ActionResult]:
        """Reject a request unless it comes from the current player of a running game."""
        if not self.is_started:
            return ActionResult.fail("game has not started")
        if self.is_game_over:
            return ActionResult.fail("game is over")
        if player_id not in self.players:
            return ActionResult.fail("unknown player")
        if self.get_current_player().player_id != player_id:
            return ActionResult.fail("not this player's turn")
        return None

    def _settle_pending(self, result: ActionResult) -> ActionResult:
        """Clear the pending action and end the turn if the play budget is spent."""
        self.pending_action = NO_ACTION
        return self._check_turn_budget(result)

    def _check_turn_budget(self, result: ActionResult) -> ActionResult:
        if (
            not self.pending_action.is_none
            or self.is_game_over
            or self.cards_played_this_turn < self.config.max_cards_per_turn
        ):
            return result

        player = self.get_current_player()
        played = self.cards_played_this_turn
        self.end_turn()
        if not self.is_game_over and self.pending_action.is_none:
            note = (
                f"{player.name} played their {_ordinal(played)} card. "
                f"Turn passed to {self.get_current_player().name}."
            )
        else:
            note = self._turn_end_message(player)
        result.message = f"{result.message} {note}" if result.message else note
        return result

    # === PLAYING CARDS ===

    def play_card(
        self,
        player_id: str,
        card_id: str,
        chosen_color: Optional[str] = None,
        play_as_action: bool = False,
    ) -> ActionResult:
        """
        Play a card from hand.

        Money, and any action or rent card not played as an action, is banked.
        Property cards go to the player's holdings; wildcards need a colour.
        Rent and action cards played as actions take effect.
        """
        error = self._check_actor(player_id)
        if error is not None:
            return error
        if self.cards_played_this_turn >= self.config.max_cards_per_turn:
            return ActionResult.fail("no plays left this turn")

        player = self.players[player_id]
        card = player.find_in_hand(card_id)
        if card is None:
            return ActionResult.fail("card not in hand")

        pending = self.pending_action
        if isinstance(pending, DoubleRentPending):
            if not (isinstance(card, RentCard) and play_as_action):
                return ActionResult.fail("Double The Rent must be followed by a Rent card")
        elif not pending.is_none:
            return ActionResult.fail("a pending action must be resolved first")

        if isinstance(card, PropertyCard):
            return self._play_property(player, card, chosen_color)
        if isinstance(card, MoneyCard) or not play_as_action:
            return self._bank_card(player, card)
        if isinstance(card, RentCard):
            return self._play_rent(player, card, chosen_color)
        return self._play_action(player, card, chosen_color)

    def _use_card(self, player: PlayerState, card: Card, to_discard: bool = True) -> None:
        """Take a played card out of the hand and count it against the budget."""
        player.remove_from_hand(card.id)
        if to_discard:
            self.discard_pile.append(card)
        self.cards_played_this_turn += 1

    def _bank_card(self, player: PlayerState, card: Card) -> ActionResult:
        self._use_card(player, card, to_discard=False)
        player.money_pile.append(card)
        self.event_log.log(
            EventType.PLAY_MONEY,
            player_id=player.player_id,
            details={"card_id": card.id, "value": card.value},
        )
        return self._check_turn_budget(ActionResult.ok(message=f"{player.name} banked ${card.value}M"))

    def _play_property(self, player: PlayerState, card: PropertyCard, chosen_color: Optional[str]) -> ActionResult:
        if card.is_wildcard:
            color = parse_color(chosen_color)
            if color is None:
                return ActionResult.fail("wildcard needs a colour")
        else:
            color = card.color

        self._use_card(player, card, to_discard=False)
        prop_set = player.properties.add_card(color, card)
        self.event_log.log(
            EventType.PLAY_PROPERTY,
            player_id=player.player_id,
            details={
                "card_id": card.id,
                "name": card.name,
                "color": color.value,
                "set_complete": prop_set.is_complete(),
            },
        )
        return self._check_turn_budget(ActionResult.ok(message=f"{player.name} played {card.name}"))

    def calculate_rent(self, player_id: str, color: PropertyColor) -> int:
        """
        Rent the player can charge on a colour, before any doubling.

        Uses the player's best set of that colour: base rent for the card count,
        plus the house and hotel bonuses.
        """
        player = self.players[player_id]
        best = 0
        for prop_set in player.properties.sets(color):
            rent = (
                prop_set.base_rent()
                + prop_set.houses * self.config.house_rent_bonus
                + prop_set.hotels * self.config.hotel_rent_bonus
            )
            best = max(best, rent)
        return best

    def _play_rent(self, player: PlayerState, card: RentCard, chosen_color: Optional[str]) -> ActionResult:
        color = parse_color(chosen_color)
        if color is None or color not in card.rent_colors:
            return ActionResult.fail("rent card does not cover that colour")
        if not player.properties.has_color(color):
            return ActionResult.fail("no properties of that colour")

        is_doubled = isinstance(self.pending_action, DoubleRentPending)
        amount = self.calculate_rent(player.player_id, color)
        if is_doubled:
            amount *= 2

        self._use_card(player, card)
        self.event_log.log(
            EventType.CHARGE_RENT,
            player_id=player.player_id,
            details={"color": color.value, "amount": amount, "doubled": is_doubled},
        )

        result = ActionResult.ok(
            ActionCardName.RENT.value,
            f"{player.name} charged ${amount}M rent on {color.value}",
        )
        responder = self._first_counter_holder(player.player_id)
        if responder is not None:
            self._offer_counter(
                responder,
                PendingType.RENT,
                player.player_id,
                color=color,
                amount=amount,
                is_doubled=is_doubled,
            )
            return result

        self.pending_action = RentPending(
            player.player_id,
            color,
            amount,
            tuple(p.player_id for p in self.other_players(player.player_id)),
            is_doubled,
        )
        return result

    def _play_action(self, player: PlayerState, card: ActionCard, chosen_color: Optional[str]) -> ActionResult:
        name = card.name

        if name in (ActionCardName.HOUSE, ActionCardName.HOTEL):
            return self._play_building(player, card, chosen_color)

        if name == ActionCardName.DOUBLE_THE_RENT:
            if self.cards_played_this_turn > self.config.max_cards_per_turn - 2:
                return ActionResult.fail("no play left for a Rent card")
            if not self._has_usable_rent_card(player):
                return ActionResult.fail("no Rent card to double")
            self._use_card(player, card)
            self.pending_action = DoubleRentPending(player.player_id)
            return self._announce(player, card)

        if name == ActionCardName.PASS_GO:
            self._use_card(player, card)
            self._announce(player, card)
            self.draw_cards(player.player_id, self.config.pass_go_draw)
            return self._check_turn_budget(
                ActionResult.ok(name.value, f"{player.name} played Pass Go and drew {self.config.pass_go_draw} cards")
            )

        if name == ActionCardName.SLY_DEAL:
            if not any(p.properties.loose_cards() for p in self.other_players(player.player_id)):
                return ActionResult.fail("no property available to steal")
            self._use_card(player, card)
            self.pending_action = SlyDealPending(player.player_id)
            return self._announce(player, card)

        if name == ActionCardName.DEAL_BREAKER:
            if not any(p.properties.completed_set_count() for p in self.other_players(player.player_id)):
                return ActionResult.fail("no complete set available to take")
            self._use_card(player, card)
            self.pending_action = DealBreakerPending(player.player_id)
            return self._announce(player, card)

        if name == ActionCardName.FORCED_DEAL:
            if not player.properties.loose_cards():
                return ActionResult.fail("no property of your own to trade")
            if not any(p.properties.loose_cards() for p in self.other_players(player.player_id)):
                return ActionResult.fail("no property available to trade for")
            self._use_card(player, card)
            self.pending_action = ForcedDealPending(player.player_id)
            return self._announce(player, card)

        if name == ActionCardName.DEBT_COLLECTOR:
            self._use_card(player, card)
            self.pending_action = DebtCollectorPending(player.player_id, self.config.debt_collector_amount)
            return self._announce(player, card)

        if name == ActionCardName.ITS_MY_BIRTHDAY:
            self._use_card(player, card)
            result = self._announce(player, card)
            amount = self.config.birthday_amount
            responder = self._first_counter_holder(player.player_id)
            if responder is not None:
                self._offer_counter(responder, PendingType.BIRTHDAY, player.player_id, amount=amount)
            else:
                self.pending_action = BirthdayPending(
                    player.player_id,
                    amount,
                    tuple(p.player_id for p in self.other_players(player.player_id)),
                )
            return result

        # Just Say No only works as a response; Rent is never an action card.
        return ActionResult.fail(f"{name.value} cannot be played as an action now")

    def _play_building(self, player: PlayerState, card: ActionCard, chosen_color: Optional[str]) -> ActionResult:
        color = parse_color(chosen_color)
        if color is None:
            return ActionResult.fail("building needs a colour")
        prop_set = player.properties.first_complete_set(color)
        if prop_set is None:
            return ActionResult.fail("no complete set of that colour")

        self._use_card(player, card)
        if card.name == ActionCardName.HOUSE:
            prop_set.houses += 1
            event_type = EventType.BUILD_HOUSE
        else:
            prop_set.hotels += 1
            event_type = EventType.BUILD_HOTEL
        self.event_log.log(
            event_type,
            player_id=player.player_id,
            details={"color": color.value, "houses": prop_set.houses, "hotels": prop_set.hotels},
        )
        self.pending_action = NO_ACTION
        return self._check_turn_budget(
            ActionResult.ok(card.name.value, f"{player.name} added a {card.name.value} to {color.value}")
        )

    def _has_usable_rent_card(self, player: PlayerState) -> bool:
        for card in player.hand:
            if isinstance(card, RentCard) and any(player.properties.has_color(c) for c in card.rent_colors):
                return True
        return False

    def _announce(self, player: PlayerState, card: ActionCard) -> ActionResult:
        self.event_log.log(
            EventType.PLAY_ACTION,
            player_id=player.player_id,
            details={"card_id": card.id, "name": card.name.value},
        )
        return ActionResult.ok(card.name.value, f"{player.name} played {card.name.value}")

    def reassign_wildcard(self, player_id: str, card_id: str, new_color: Optional[str]) -> ActionResult:
        """Move one of the player's wildcards to another colour. Once per turn; not a play."""
        error = self._check_actor(player_id)
        if error is not None:
            return error
        if not self.pending_action.is_none:
            return ActionResult.fail("a pending action must be resolved first")
        if self.wildcard_reassigned_this_turn:
            return ActionResult.fail("a wildcard was already moved this turn")

        player = self.players[player_id]
        card = player.properties.find_card(card_id)
        if not isinstance(card, PropertyCard) or not card.is_wildcard:
            return ActionResult.fail("not one of your wildcards")
        color = parse_color(new_color)
        if color is None:
            return ActionResult.fail("unknown colour")
        old_color = player.properties.locate(card_id).color
        if color == old_color:
            return ActionResult.fail("wildcard is already that colour")

        player.properties.remove_card(card_id)
        player.properties.add_card(color, card)
        self.wildcard_reassigned_this_turn = True
        self.event_log.log(
            EventType.WILDCARD_REASSIGN,
            player_id=player_id,
            details={"card_id": card_id, "from": old_color.value, "to": color.value},
        )
        return ActionResult.ok(message=f"{player.name} moved a wildcard from {old_color.value} to {color.value}")

    # === THEFT AND TRADES ===

    def execute_property_steal(self, player_id: str, target_player_id: str, target_card_id: str) -> ActionResult:
        """Sly Deal: take one property that is not part of a complete set."""
        pending = self.pending_action
        if not isinstance(pending, SlyDealPending) or pending.player_id != player_id:
            return ActionResult.fail("no Sly Deal in progress for this player")
        target = self._opponent(player_id, target_player_id)
        if target is None:
            return ActionResult.fail("invalid target player")
        prop_set = target.properties.locate(target_card_id)
        if prop_set is None:
            return ActionResult.fail("target does not own that card")
        if prop_set.is_complete():
            return ActionResult.fail("cannot steal from a complete set")

        if target.just_say_no_card() is not None:
            self._offer_counter(target, PendingType.SLY_DEAL, player_id, target_card_id=target_card_id)
            return ActionResult.ok(
                ActionCardName.SLY_DEAL.value,
                f"{self.players[player_id].name} played Sly Deal on {target.name}",
            )
        return self._resolve_steal(self.players[player_id], target, target_card_id)

    def _resolve_steal(self, thief: PlayerState, target: PlayerState, card_id: str) -> ActionResult:
        color, card = target.properties.remove_card(card_id)
        thief.properties.add_card(color, card)
        self.event_log.log(
            EventType.PROPERTY_STEAL,
            player_id=thief.player_id,
            details={"from": target.player_id, "card_id": card_id, "color": color.value},
        )
        return self._settle_pending(
            ActionResult.ok(
                ActionCardName.SLY_DEAL.value,
                f"{thief.name} stole {card.name} from {target.name}",
            )
        )

    def execute_deal_breaker(self, player_id: str, target_player_id: str, color: Optional[str]) -> ActionResult:
        """Deal Breaker: take a whole complete set, buildings included."""
        pending = self.pending_action
        if not isinstance(pending, DealBreakerPending) or pending.player_id != player_id:
            return ActionResult.fail("no Deal Breaker in progress for this player")
        target = self._opponent(player_id, target_player_id)
        if target is None:
            return ActionResult.fail("invalid target player")
        parsed = parse_color(color)
        if parsed is None or target.properties.first_complete_set(parsed) is None:
            return ActionResult.fail("target has no complete set of that colour")

        if target.just_say_no_card() is not None:
            self._offer_counter(target, PendingType.DEAL_BREAKER, player_id, color=parsed)
            return ActionResult.ok(
                ActionCardName.DEAL_BREAKER.value,
                f"{self.players[player_id].name} played Deal Breaker on {target.name}",
            )
        return self._resolve_deal_breaker(self.players[player_id], target, parsed)

    def _resolve_deal_breaker(self, thief: PlayerState, target: PlayerState, color: PropertyColor) -> ActionResult:
        prop_set: PropertySet = target.properties.first_complete_set(color)
        target.properties.remove_set(prop_set)
        thief.properties.add_set(prop_set)
        self.event_log.log(
            EventType.DEAL_BREAKER,
            player_id=thief.player_id,
            details={
                "from": target.player_id,
                "color": color.value,
                "cards": len(prop_set.cards),
                "houses": prop_set.houses,
                "hotels": prop_set.hotels,
            },
        )
        return self._settle_pending(
            ActionResult.ok(
                ActionCardName.DEAL_BREAKER.value,
                f"{thief.name} took the {color.value} set from {target.name}",
            )
        )

    def execute_forced_deal(
        self, player_id: str, target_player_id: str, target_card_id: str, my_card_id: str
    ) -> ActionResult:
        """Forced Deal: swap one of your loose properties for one of theirs."""
        pending = self.pending_action
        if not isinstance(pending, ForcedDealPending) or pending.player_id != player_id:
            return ActionResult.fail("no Forced Deal in progress for this player")
        target = self._opponent(player_id, target_player_id)
        if target is None:
            return ActionResult.fail("invalid target player")
        player = self.players[player_id]

        their_set = target.properties.locate(target_card_id)
        if their_set is None or their_set.is_complete():
            return ActionResult.fail("target card is not available to trade")
        my_set = player.properties.locate(my_card_id)
        if my_set is None or my_set.is_complete():
            return ActionResult.fail("your card is not available to trade")

        if target.just_say_no_card() is not None:
            self._offer_counter(
                target,
                PendingType.FORCED_DEAL,
                player_id,
                target_card_id=target_card_id,
                my_card_id=my_card_id,
            )
            return ActionResult.ok(
                ActionCardName.FORCED_DEAL.value,
                f"{player.name} played Forced Deal on {target.name}",
            )
        return self._resolve_forced_deal(player, target, target_card_id, my_card_id)

    def _resolve_forced_deal(
        self, player: PlayerState, target: PlayerState, target_card_id: str, my_card_id: str
    ) -> ActionResult:
        their_color, their_card = target.properties.remove_card(target_card_id)
        my_color, my_card = player.properties.remove_card(my_card_id)
        player.properties.add_card(their_color, their_card)
        target.properties.add_card(my_color, my_card)
        self.event_log.log(
            EventType.FORCED_DEAL,
            player_id=player.player_id,
            details={"with": target.player_id, "given": my_card_id, "taken": target_card_id},
        )
        return self._settle_pending(
            ActionResult.ok(
                ActionCardName.FORCED_DEAL.value,
                f"{player.name} swapped a property with {target.name}",
            )
        )

    def _opponent(self, player_id: str, target_player_id: str) -> Optional[PlayerState]:
        if target_player_id == player_id:
            return None
        return self.players.get(target_player_id)

    # === PAYMENTS ===

    def choose_debt_target(self, player_id: str, target_player_id: str) -> ActionResult:
        """Debt Collector: name the player who owes the debt."""
        pending = self.pending_action
        if (
            not isinstance(pending, DebtCollectorPending)
            or pending.player_id != player_id
            or pending.target_player_id is not None
        ):
            return ActionResult.fail("no Debt Collector awaiting a target")
        target = self._opponent(player_id, target_player_id)
        if target is None:
            return ActionResult.fail("invalid target player")

        collector = self.players[player_id]
        self.event_log.log(
            EventType.DEBT_TARGET,
            player_id=player_id,
            details={"target": target_player_id, "amount": pending.amount},
        )
        message = f"{collector.name} demands ${pending.amount}M from {target.name}"
        if target.just_say_no_card() is not None:
            self._offer_counter(target, PendingType.DEBT_COLLECTOR, player_id, amount=pending.amount)
        else:
            self.pending_action = replace(pending, target_player_id=target_player_id)
        return ActionResult.ok(ActionCardName.DEBT_COLLECTOR.value, message)

    def collect_debt(self, payer_id: str, card_ids: Sequence[str], bankruptcy: bool = False) -> ActionResult:
        """The debtor pays a Debt Collector."""
        pending = self.pending_action
        if not isinstance(pending, DebtCollectorPending) or pending.target_player_id != payer_id:
            return ActionResult.fail("no debt owed by this player")
        result = self._pay(payer_id, pending.player_id, card_ids, pending.amount, bankruptcy)
        if not result:
            return result
        return self._settle_pending(result)

    def collect_rent(self, payer_id: str, card_ids: Sequence[str], bankruptcy: bool = False) -> ActionResult:
        """One player's share of a rent charge."""
        pending = self.pending_action
        if not isinstance(pending, RentPending) or payer_id not in pending.remaining_payers:
            return ActionResult.fail("no rent owed by this player")
        result = self._pay(payer_id, pending.player_id, card_ids, pending.amount, bankruptcy)
        if not result:
            return result
        remaining = pending.without_payer(payer_id)
        if not remaining.remaining_payers:
            return self._settle_pending(result)
        self.pending_action = remaining
        return result

    def collect_birthday_payment(
        self, payer_id: str, card_ids: Sequence[str], bankruptcy: bool = False
    ) -> ActionResult:
        """One player's birthday gift."""
        pending = self.pending_action
        if not isinstance(pending, BirthdayPending) or payer_id not in pending.remaining_payers:
            return ActionResult.fail("no birthday gift owed by this player")
        result = self._pay(payer_id, pending.player_id, card_ids, pending.amount, bankruptcy)
        if not result:
            return result
        remaining = pending.without_payer(payer_id)
        if not remaining.remaining_payers:
            return self._settle_pending(result)
        self.pending_action = remaining
        return result

    def _pay(
        self, payer_id: str, collector_id: str, card_ids: Sequence[str], amount: int, bankruptcy: bool
    ) -> ActionResult:
        payer = self.players[payer_id]
        collector = self.players[collector_id]
        ok, reason = validate_payment(payer, card_ids, amount, bankruptcy)
        if not ok:
            return ActionResult.fail(reason)

        moved = transfer_payment(payer, collector, card_ids)
        paid = total_value(moved)
        if bankruptcy:
            self.event_log.log(
                EventType.BANKRUPTCY,
                player_id=payer_id,
                details={"creditor": collector_id, "amount": amount, "paid": paid},
            )
            return ActionResult.ok(
                "Bankruptcy",
                f"{payer.name} went bankrupt and surrendered all cards to {collector.name}!",
            )
        self.event_log.log(
            EventType.PAYMENT,
            player_id=payer_id,
            details={"to": collector_id, "amount": amount, "paid": paid, "cards": len(moved)},
        )
        return ActionResult.ok(message=f"{payer.name} paid ${paid}M to {collector.name}")

    # === JUST SAY NO ===

    def _first_counter_holder(self, player_id: str) -> Optional[PlayerState]:
        """First player after player_id in turn order holding a Just Say No."""
        for other in self.other_players(player_id):
            if other.just_say_no_card() is not None:
                return other
        return None

    def _offer_counter(self, responder: PlayerState, action_type: PendingType, source_player_id: str, **payload) -> None:
        """Suspend an attack until the responder decides whether to counter it."""
        self.pending_action = JustSayNoOpportunity(
            responder.player_id,
            action_type,
            source_player_id,
            **payload,
        )
        self.event_log.log(
            EventType.JUST_SAY_NO_OFFERED,
            player_id=responder.player_id,
            details={"action": action_type.value, "source": source_player_id},
        )

    def respond_to_just_say_no(self, player_id: str, use_counter: bool) -> ActionResult:
        """
        Answer a Just Say No opportunity.

        Countering spends the card and cancels the attack outright. Declining
        carries out the suspended attack without offering the counter again.
        """
        pending = self.pending_action
        if not isinstance(pending, JustSayNoOpportunity) or pending.player_id != player_id:
            return ActionResult.fail("no Just Say No decision awaited from this player")

        responder = self.players[player_id]
        source = self.players[pending.source_player_id]

        if use_counter:
            card = responder.just_say_no_card()
            if card is None:
                return ActionResult.fail("no Just Say No in hand")
            responder.remove_from_hand(card.id)
            self.discard_pile.append(card)
            self.event_log.log(
                EventType.JUST_SAY_NO_USED,
                player_id=player_id,
                details={"action": pending.action_type.value, "source": source.player_id},
            )
            return self._settle_pending(
                ActionResult.ok(
                    ActionCardName.JUST_SAY_NO.value,
                    f"{responder.name} said no to {source.name}!",
                )
            )

        self.event_log.log(
            EventType.JUST_SAY_NO_DECLINED,
            player_id=player_id,
            details={"action": pending.action_type.value, "source": source.player_id},
        )
        others = tuple(p.player_id for p in self.other_players(source.player_id))

        if pending.action_type == PendingType.SLY_DEAL:
            return self._resolve_steal(source, responder, pending.target_card_id)
        if pending.action_type == PendingType.DEAL_BREAKER:
            return self._resolve_deal_breaker(source, responder, pending.color)
        if pending.action_type == PendingType.FORCED_DEAL:
            return self._resolve_forced_deal(source, responder, pending.target_card_id, pending.my_card_id)
        if pending.action_type == PendingType.DEBT_COLLECTOR:
            self.pending_action = DebtCollectorPending(source.player_id, pending.amount, player_id)
        elif pending.action_type == PendingType.RENT:
            self.pending_action = RentPending(
                source.player_id, pending.color, pending.amount, others, pending.is_doubled
            )
        elif pending.action_type == PendingType.BIRTHDAY:
            self.pending_action = BirthdayPending(source.player_id, pending.amount, others)
        else:
            return self._settle_pending(ActionResult.ok())
        return ActionResult.ok(message=f"{responder.name} accepted {source.name}'s action")

    # === PLAYERS ===

    def rename_player(self, player_id: str, name: str) -> ActionResult:
        """Change a player's display name."""
        player = self.players.get(player_id)
        if player is None:
            return ActionResult.fail("unknown player")
        name = name.strip() if name else ""
        if not name:
            return ActionResult.fail("name must not be empty")
        old_name = player.name
        player.name = name
        self.event_log.log(EventType.PLAYER_RENAMED, player_id=player_id, details={"from": old_name, "to": name})
        return ActionResult.ok(message=f"{old_name} is now {name}")


def create_game(
    config: GameConfig,
    players: List[Player],
    room_id: str = "",
    deck: Optional[List[Card]] = None,
) -> GameState:
    """
    Create a new game with the specified configuration and players.

    Args:
        config: Game configuration
        players: Seated players in turn order (2 or more)
        room_id: Room the game belongs to
        deck: Cards to draw from, top of the deck last. A seeded shuffled
            deck is built when omitted.

    Returns:
        Started GameState with opening hands dealt
    """
    if len(players) < 2:
        raise ValueError("Game requires at least 2 players")
    if len({p.player_id for p in players}) != len(players):
        raise ValueError("Player ids must be unique")

    game = GameState(config, players, room_id=room_id, deck=deck)
    for player in players:
        game.draw_cards(player.player_id, config.opening_hand_size)
    game.is_started = True
    game.start_turn()
    return game

"""
Mapping from internal EventLog objects to canonical public JSON events.

The internal engine emits GameEvent objects where:
- event_type is money.EventType
- player_id is optional
- details is a flat dict of event-specific fields

This module produces stable, UI/JSONL-friendly dicts with consistent
event_type strings and payload keys.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from monodeal.money import EventType, GameEvent


def _name(player_names: Optional[Dict[str, str]], player_id: Optional[str]) -> Optional[str]:
    if player_id is None or player_names is None:
        return None
    return player_names.get(player_id)


def map_event(event: GameEvent, *, player_names: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Map a single GameEvent to a canonical JSON dict.

    Args:
        event: internal event object
        player_names: optional mapping player_id->display name for enrichment

    Returns:
        dict with keys: event_type (str), player_id (optional), and event-specific fields
    """
    etype = event.event_type.value
    d = event.details or {}

    base: Dict[str, Any] = {"event_type": etype}
    if event.player_id is not None:
        base["player_id"] = event.player_id
        name = _name(player_names, event.player_id)
        if name:
            base["player_name"] = name

    if event.event_type == EventType.GAME_START:
        players = d.get("players") or []
        base.update(room_id=d.get("room_id"), player_names=players, num_players=len(players), seed=d.get("seed"))
        return base

    if event.event_type in (EventType.TURN_START, EventType.TURN_END):
        base.update(turn_number=d.get("turn"))
        return base

    if event.event_type == EventType.CARD_DRAW:
        base.update(count=d.get("count"), deck_remaining=d.get("deck_remaining"))
        return base

    # Plays
    if event.event_type == EventType.PLAY_PROPERTY:
        base.update(
            card_id=d.get("card_id"),
            property_name=d.get("name"),
            color=d.get("color"),
            set_complete=d.get("set_complete", False),
        )
        return base

    if event.event_type == EventType.PLAY_MONEY:
        base.update(card_id=d.get("card_id"), value=d.get("value"))
        return base

    if event.event_type == EventType.PLAY_ACTION:
        base.update(card_id=d.get("card_id"), card_name=d.get("name"))
        return base

    if event.event_type == EventType.WILDCARD_REASSIGN:
        base.update(card_id=d.get("card_id"), from_color=d.get("from"), to_color=d.get("to"))
        return base

    if event.event_type == EventType.CHARGE_RENT:
        base.update(color=d.get("color"), amount=d.get("amount"), doubled=d.get("doubled", False))
        return base

    # Buildings
    if event.event_type in (EventType.BUILD_HOUSE, EventType.BUILD_HOTEL):
        base.update(color=d.get("color"), house_count=d.get("houses"), hotel_count=d.get("hotels"))
        return base

    # Theft and trades
    if event.event_type == EventType.PROPERTY_STEAL:
        victim = d.get("from")
        base.update(victim_id=victim, victim_name=_name(player_names, victim), card_id=d.get("card_id"), color=d.get("color"))
        return base

    if event.event_type == EventType.DEAL_BREAKER:
        victim = d.get("from")
        base.update(
            victim_id=victim,
            victim_name=_name(player_names, victim),
            color=d.get("color"),
            card_count=d.get("cards"),
            house_count=d.get("houses"),
            hotel_count=d.get("hotels"),
        )
        return base

    if event.event_type == EventType.FORCED_DEAL:
        other = d.get("with")
        base.update(
            other_player_id=other,
            other_player_name=_name(player_names, other),
            given_card_id=d.get("given"),
            taken_card_id=d.get("taken"),
        )
        return base

    if event.event_type == EventType.DEBT_TARGET:
        target = d.get("target")
        base.update(target_id=target, target_name=_name(player_names, target), amount=d.get("amount"))
        return base

    # Payments
    if event.event_type == EventType.PAYMENT:
        collector = d.get("to")
        base.update(
            payer_id=event.player_id,
            collector_id=collector,
            collector_name=_name(player_names, collector),
            amount=d.get("amount"),
            paid=d.get("paid"),
            card_count=d.get("cards"),
        )
        return base

    if event.event_type == EventType.BANKRUPTCY:
        creditor = d.get("creditor")
        base.update(
            creditor_id=creditor,
            creditor_name=_name(player_names, creditor),
            amount=d.get("amount"),
            paid=d.get("paid"),
        )
        return base

    # Just Say No
    if event.event_type in (
        EventType.JUST_SAY_NO_OFFERED,
        EventType.JUST_SAY_NO_USED,
        EventType.JUST_SAY_NO_DECLINED,
    ):
        source = d.get("source")
        base.update(action=d.get("action"), source_id=source, source_name=_name(player_names, source))
        return base

    if event.event_type in (EventType.DISCARD_REQUIRED, EventType.DISCARD):
        base.update(count=d.get("count"))
        return base

    if event.event_type == EventType.PLAYER_RENAMED:
        base.update(old_name=d.get("from"), new_name=d.get("to"))
        return base

    if event.event_type == EventType.GAME_END:
        base.update(winner_id=event.player_id, completed_sets=d.get("completed_sets"))
        return base

    # Default: echo raw fields
    base.update(d)
    return base


def map_events(
    events: Iterable[GameEvent],
    *,
    player_names: Optional[Dict[str, str]] = None,
    start_seq: int = 0,
) -> List[Dict[str, Any]]:
    """Map a sequence of GameEvent objects.

    Args:
        events: iterable of GameEvent
        player_names: optional mapping of player ids to display names
        start_seq: sequence number of the first event
    """
    mapped: List[Dict[str, Any]] = []
    for idx, ev in enumerate(events, start=start_seq):
        mev = map_event(ev, player_names=player_names)
        mev["seq"] = idx
        mapped.append(mev)
    return mapped

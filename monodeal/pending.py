"""
Pending actions: the single outstanding transaction that gates normal play.

Each variant is a frozen dataclass tagged with a PendingType. Resolution code
checks for the exact variant it expects with isinstance and rejects anything
else.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from monodeal.config import PropertyColor


class PendingType(str, Enum):
    NONE = "NONE"
    SLY_DEAL = "SLY_DEAL"
    DEAL_BREAKER = "DEAL_BREAKER"
    FORCED_DEAL = "FORCED_DEAL"
    DEBT_COLLECTOR = "DEBT_COLLECTOR"
    RENT = "RENT"
    DOUBLE_RENT_PENDING = "DOUBLE_RENT_PENDING"
    BIRTHDAY = "BIRTHDAY"
    DISCARD_NEEDED = "DISCARD_NEEDED"
    JUST_SAY_NO_OPPORTUNITY = "JUST_SAY_NO_OPPORTUNITY"


@dataclass(frozen=True)
class PendingAction:
    """Base for all pending action variants."""

    pending_type: ClassVar[PendingType] = PendingType.NONE

    @property
    def is_none(self) -> bool:
        return self.pending_type == PendingType.NONE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.pending_type.value}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)
            data[f.name] = value
        return data


@dataclass(frozen=True)
class NoAction(PendingAction):
    pending_type: ClassVar[PendingType] = PendingType.NONE


NO_ACTION = NoAction()


@dataclass(frozen=True)
class SlyDealPending(PendingAction):
    pending_type: ClassVar[PendingType] = PendingType.SLY_DEAL

    player_id: str


@dataclass(frozen=True)
class DealBreakerPending(PendingAction):
    pending_type: ClassVar[PendingType] = PendingType.DEAL_BREAKER

    player_id: str


@dataclass(frozen=True)
class ForcedDealPending(PendingAction):
    pending_type: ClassVar[PendingType] = PendingType.FORCED_DEAL

    player_id: str


@dataclass(frozen=True)
class DebtCollectorPending(PendingAction):
    """Collector has played Debt Collector; the debtor is named in a second step."""

    pending_type: ClassVar[PendingType] = PendingType.DEBT_COLLECTOR

    player_id: str
    amount: int
    target_player_id: Optional[str] = None


@dataclass(frozen=True)
class RentPending(PendingAction):
    pending_type: ClassVar[PendingType] = PendingType.RENT

    player_id: str
    color: PropertyColor
    amount: int
    remaining_payers: Tuple[str, ...]
    is_doubled: bool = False

    def without_payer(self, payer_id: str) -> "RentPending":
        return replace(self, remaining_payers=tuple(p for p in self.remaining_payers if p != payer_id))


@dataclass(frozen=True)
class DoubleRentPending(PendingAction):
    pending_type: ClassVar[PendingType] = PendingType.DOUBLE_RENT_PENDING

    player_id: str


@dataclass(frozen=True)
class BirthdayPending(PendingAction):
    pending_type: ClassVar[PendingType] = PendingType.BIRTHDAY

    player_id: str
    amount: int
    remaining_payers: Tuple[str, ...]

    def without_payer(self, payer_id: str) -> "BirthdayPending":
        return replace(self, remaining_payers=tuple(p for p in self.remaining_payers if p != payer_id))


@dataclass(frozen=True)
class DiscardNeeded(PendingAction):
    pending_type: ClassVar[PendingType] = PendingType.DISCARD_NEEDED

    player_id: str


@dataclass(frozen=True)
class JustSayNoOpportunity(PendingAction):
    """
    A suspended attack waiting on the targeted player's yes/no decision.

    player_id is the responder. The remaining fields are the payload needed to
    resume the attack if the responder declines to counter it.
    """

    pending_type: ClassVar[PendingType] = PendingType.JUST_SAY_NO_OPPORTUNITY

    player_id: str
    action_type: PendingType
    source_player_id: str
    target_card_id: Optional[str] = None
    my_card_id: Optional[str] = None
    color: Optional[PropertyColor] = None
    amount: Optional[int] = None
    is_doubled: bool = False

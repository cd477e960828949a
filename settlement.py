"""
Settle-up flow for SplitIt

Paid/owed flags live in SettleProgress, which is kept apart from SplitState:
it is thrown away whenever the payer or the settle sub-mode changes.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from models import SettleSubMode, SplitState
from computations import AllocationResult, BALANCE_TOLERANCE


class SettleRole(str, Enum):
    PAYER = "payer"
    DEBTOR = "debtor"
    UNSELECTED = "unselected"  # one-payer mode before a payer is picked


@dataclass(frozen=True)
class SettleProgress:
    """Which debtors have paid back, for the current payer and sub-mode"""
    sub_mode: SettleSubMode = SettleSubMode.PAYER
    paid: FrozenSet[str] = field(default_factory=frozenset)

    def is_paid(self, person_id: str) -> bool:
        return person_id in self.paid

    def toggle_paid(self, person_id: str) -> "SettleProgress":
        if person_id in self.paid:
            return replace(self, paid=self.paid - {person_id})
        return replace(self, paid=self.paid | {person_id})

    def reset(self) -> "SettleProgress":
        return replace(self, paid=frozenset())


@dataclass(frozen=True)
class SettleEntry:
    person_id: str
    name: str
    role: SettleRole
    share: float  # what this row shows: the full total for the payer
    paid: bool = False


@dataclass(frozen=True)
class CollectionView:
    entries: List[SettleEntry]
    payer_share: Optional[float]
    to_collect: float
    is_collected: bool


def choose_payer(
    state: SplitState, progress: SettleProgress, person_id: Optional[str]
) -> Tuple[SplitState, SettleProgress]:
    """Record who paid the bill; any collection progress is dropped"""
    if person_id is not None and state.find_person(person_id) is None:
        return state, progress
    return replace(state, payer_id=person_id), progress.reset()


def switch_sub_mode(progress: SettleProgress, sub_mode: SettleSubMode) -> SettleProgress:
    return replace(progress.reset(), sub_mode=sub_mode)


def build_collection(
    state: SplitState, result: AllocationResult, progress: SettleProgress
) -> CollectionView:
    """Rows, amount still to collect and the collected flag for the settle screen"""
    shares = result.computed_amounts

    if progress.sub_mode is SettleSubMode.EVERYONE:
        entries = [
            SettleEntry(p.id, p.name, SettleRole.DEBTOR, shares.get(p.id, 0.0), progress.is_paid(p.id))
            for p in state.people
        ]
        to_collect = sum(e.share for e in entries if not e.paid)
        return CollectionView(entries, None, to_collect, to_collect < BALANCE_TOLERANCE)

    payer = state.find_person(state.payer_id)
    if payer is None:
        entries = [
            SettleEntry(p.id, p.name, SettleRole.UNSELECTED, shares.get(p.id, 0.0))
            for p in state.people
        ]
        return CollectionView(entries, None, 0.0, False)

    entries = [SettleEntry(payer.id, payer.name, SettleRole.PAYER, result.total)]
    for p in state.people:
        if p.id == payer.id:
            continue
        entries.append(
            SettleEntry(p.id, p.name, SettleRole.DEBTOR, shares.get(p.id, 0.0), progress.is_paid(p.id))
        )
    to_collect = sum(e.share for e in entries if e.role is SettleRole.DEBTOR and not e.paid)
    return CollectionView(entries, result.total, to_collect, to_collect < BALANCE_TOLERANCE)

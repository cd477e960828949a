"""
Data models for SplitIt application

The state is an immutable snapshot: every action builds a new SplitState
instead of mutating the old one (see actions.py).
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class SplitMode(str, Enum):
    """Where the covered amount comes from"""
    EQUALLY = "equally"
    AMOUNTS = "amounts"


class PricingMode(str, Enum):
    """How an expense price is read: line total or per-assignee price"""
    TOTAL = "total"
    EACH = "each"


class ViewMode(str, Enum):
    CONSUMPTION = "consumption"
    SETTLE = "settle"


class SettleSubMode(str, Enum):
    PAYER = "payer"  # one person fronted the bill
    EVERYONE = "everyone"  # everybody pays their own share


@dataclass(frozen=True)
class Person:
    """Person taking part in the split"""
    id: str
    name: str = ""
    amount: str = ""  # raw manual-mode entry, may be empty or unparsable


@dataclass(frozen=True)
class Expense:
    """Single line item on the bill"""
    id: str
    description: str = ""
    price: str = ""  # raw entry, may be empty or unparsable
    pricing_mode: Optional[PricingMode] = None  # None -> use the global mode


@dataclass(frozen=True)
class ItemActive:
    """Assigning people to one expense"""
    item_id: str


@dataclass(frozen=True)
class PersonActive:
    """Assigning expenses to one person"""
    person_id: str


# None means idle
AssignmentMode = Optional[Union[ItemActive, PersonActive]]


@dataclass(frozen=True)
class SplitState:
    """
    Complete snapshot of a split.

    assignments maps expense id -> ordered tuple of person ids. The order is
    significant: the last id in a sequence receives the remainder cent(s)
    of an equal split, so it must never be turned into a set.
    """
    people: Tuple[Person, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    assignments: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    manual_total: str = ""
    split_mode: SplitMode = SplitMode.EQUALLY
    pricing_mode: PricingMode = PricingMode.TOTAL
    assignment_mode: AssignmentMode = None
    view_mode: ViewMode = ViewMode.CONSUMPTION
    payer_id: Optional[str] = None
    currency: str = "USD"

    @property
    def has_items(self) -> bool:
        return len(self.expenses) > 0

    @property
    def person_ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.people)

    def assignees(self, expense_id: str) -> Tuple[str, ...]:
        """Assignment sequence for an expense (empty if missing)"""
        return self.assignments.get(expense_id, ())

    def find_person(self, person_id: Optional[str]) -> Optional[Person]:
        return next((p for p in self.people if p.id == person_id), None)

    def find_expense(self, expense_id: Optional[str]) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)

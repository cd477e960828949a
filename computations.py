"""
Business logic and computations for SplitIt

Everything here is a pure function of a SplitState snapshot. The host calls
evaluate() after every action and renders whatever comes back.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from models import Expense, PricingMode, SplitMode, SplitState
from utils import safe_float

BALANCE_TOLERANCE = 0.01


@dataclass(frozen=True)
class AllocationResult:
    """Derived values for one snapshot"""
    total: float
    computed_amounts: Dict[str, float]
    covered_amount: float
    remaining: float
    is_balanced: bool
    is_over: bool
    can_settle: bool


def effective_pricing_mode(e: Expense, global_mode: PricingMode) -> PricingMode:
    """Per-expense override if set, else the global pricing mode"""
    return e.pricing_mode if e.pricing_mode is not None else global_mode


def expense_line_total(state: SplitState, e: Expense) -> float:
    """Actual cost of one expense line"""
    price = safe_float(e.price)
    if effective_pricing_mode(e, state.pricing_mode) is PricingMode.EACH:
        return price * len(state.assignees(e.id))
    return price


def compute_total(state: SplitState) -> float:
    """Sum of expense lines, or the manual total when there are no items"""
    if state.has_items:
        return sum(expense_line_total(state, e) for e in state.expenses)
    return safe_float(state.manual_total)


def split_equally(amount: float, pool: Sequence[str]) -> Dict[str, float]:
    """
    Split amount over pool in whole cents.

    Everyone gets the truncated per-head cent amount; the last id in the
    pool also gets whatever is left, so the shares add back up to amount.
    The pool order decides who that is.
    """
    n = len(pool)
    if n == 0 or amount == 0:
        return {}
    base = math.floor(amount * 100 / n) / 100
    remainder = round(amount - base * n, 2)
    out: Dict[str, float] = {}
    for i, pid in enumerate(pool):
        share = base + remainder if i == n - 1 else base
        # a duplicated id accumulates rather than overwrites
        out[pid] = out.get(pid, 0.0) + share
    return out


def expense_shares(state: SplitState, e: Expense) -> Dict[str, float]:
    """Per-person shares of a single expense, restricted to the roster"""
    price = safe_float(e.price)
    assigned = state.assignees(e.id)
    if not assigned or price == 0:
        return {}
    roster = set(state.person_ids)
    if effective_pricing_mode(e, state.pricing_mode) is PricingMode.EACH:
        shares: Dict[str, float] = {}
        for pid in assigned:
            if pid in roster:
                shares[pid] = shares.get(pid, 0.0) + price
        return shares
    # the sequence is split as stored; dangling ids keep their slot but are dropped
    return {pid: v for pid, v in split_equally(price, assigned).items() if pid in roster}


def compute_amounts(state: SplitState, total: Optional[float] = None) -> Dict[str, float]:
    """Computed equal-split share for every person in the roster"""
    amounts = {pid: 0.0 for pid in state.person_ids}
    if state.has_items:
        for e in state.expenses:
            for pid, share in expense_shares(state, e).items():
                amounts[pid] += share
        return amounts
    if total is None:
        total = compute_total(state)
    if total > 0:
        amounts.update(split_equally(total, state.person_ids))
    return amounts


def sum_manual_amounts(state: SplitState) -> float:
    return sum(safe_float(p.amount) for p in state.people)


def covered_amount(state: SplitState, amounts: Dict[str, float]) -> float:
    """Amount currently accounted for under the active split mode"""
    if state.split_mode is SplitMode.EQUALLY:
        return sum(amounts.values())
    return sum_manual_amounts(state)


def is_balanced(remaining: float) -> bool:
    return abs(remaining) < BALANCE_TOLERANCE


def is_over(remaining: float) -> bool:
    return remaining < -BALANCE_TOLERANCE


def evaluate(state: SplitState) -> AllocationResult:
    """Run the whole allocation for a snapshot"""
    total = compute_total(state)
    amounts = compute_amounts(state, total)
    covered = covered_amount(state, amounts)
    remaining = total - covered
    balanced = is_balanced(remaining)
    return AllocationResult(
        total=total,
        computed_amounts=amounts,
        covered_amount=covered,
        remaining=remaining,
        is_balanced=balanced,
        is_over=is_over(remaining),
        can_settle=balanced and len(state.people) > 0 and total > 0,
    )


def bake_amount(value: float) -> str:
    """Manual-amount string for a computed share: 2 decimals, empty for zero"""
    if round(value, 2) == 0:
        return ""
    return f"{value:.2f}"


def assigned_item_count(state: SplitState, person_id: str) -> int:
    """Number of expenses a person is assigned to"""
    return sum(1 for e in state.expenses if person_id in state.assignees(e.id))

"""
State transitions for SplitIt

Each action takes a SplitState and returns a new one; the input is never
modified. Actions that name an id which does not exist return the state
unchanged.
"""
from __future__ import annotations
import logging
from dataclasses import replace
from typing import Dict, Optional, Tuple

from models import (
    Expense,
    ItemActive,
    Person,
    PersonActive,
    PricingMode,
    SplitMode,
    SplitState,
    ViewMode,
)
from computations import bake_amount, compute_amounts, evaluate
from utils import new_id

logger = logging.getLogger(__name__)


def _ignored(action: str, kind: str, ident: Optional[str], state: SplitState) -> SplitState:
    logger.debug("%s: unknown %s id %r, ignored", action, kind, ident)
    return state


# ---------- People ----------
def add_person(state: SplitState, person_id: Optional[str] = None) -> SplitState:
    """Append an empty person, assigned to every existing expense"""
    pid = person_id or new_id()
    assignments = {eid: seq + (pid,) for eid, seq in state.assignments.items()}
    return replace(state, people=state.people + (Person(pid),), assignments=assignments)


def remove_person(state: SplitState, person_id: str) -> SplitState:
    """Remove a person and drop them from every assignment sequence"""
    if state.find_person(person_id) is None:
        return _ignored("remove_person", "person", person_id, state)
    assignments = {
        eid: tuple(pid for pid in seq if pid != person_id)
        for eid, seq in state.assignments.items()
    }
    mode = state.assignment_mode
    if isinstance(mode, PersonActive) and mode.person_id == person_id:
        mode = None
    return replace(
        state,
        people=tuple(p for p in state.people if p.id != person_id),
        assignments=assignments,
        assignment_mode=mode,
        payer_id=None if state.payer_id == person_id else state.payer_id,
    )


def _update_person(state: SplitState, person_id: str, action: str, **changes) -> SplitState:
    if state.find_person(person_id) is None:
        return _ignored(action, "person", person_id, state)
    people = tuple(replace(p, **changes) if p.id == person_id else p for p in state.people)
    return replace(state, people=people)


def update_person_name(state: SplitState, person_id: str, name: str) -> SplitState:
    return _update_person(state, person_id, "update_person_name", name=name)


def update_person_amount(state: SplitState, person_id: str, amount: str) -> SplitState:
    return _update_person(state, person_id, "update_person_amount", amount=amount)


# ---------- Expenses ----------
def add_expense(state: SplitState, expense_id: Optional[str] = None) -> SplitState:
    """
    Append an expense assigned to everyone.
    The first expense takes over the manual total as its price.
    """
    eid = expense_id or new_id()
    price = state.manual_total if not state.has_items else ""
    assignments = dict(state.assignments)
    assignments[eid] = state.person_ids
    return replace(
        state,
        expenses=state.expenses + (Expense(eid, price=price),),
        assignments=assignments,
    )


def remove_expense(state: SplitState, expense_id: str) -> SplitState:
    """Remove an expense together with its assignment sequence"""
    if state.find_expense(expense_id) is None:
        return _ignored("remove_expense", "expense", expense_id, state)
    assignments = {eid: seq for eid, seq in state.assignments.items() if eid != expense_id}
    mode = state.assignment_mode
    if isinstance(mode, ItemActive) and mode.item_id == expense_id:
        mode = None
    return replace(
        state,
        expenses=tuple(e for e in state.expenses if e.id != expense_id),
        assignments=assignments,
        assignment_mode=mode,
    )


def _update_expense(state: SplitState, expense_id: str, action: str, **changes) -> SplitState:
    if state.find_expense(expense_id) is None:
        return _ignored(action, "expense", expense_id, state)
    expenses = tuple(replace(e, **changes) if e.id == expense_id else e for e in state.expenses)
    return replace(state, expenses=expenses)


def update_expense_description(state: SplitState, expense_id: str, description: str) -> SplitState:
    return _update_expense(state, expense_id, "update_expense_description", description=description)


def update_expense_price(state: SplitState, expense_id: str, price: str) -> SplitState:
    return _update_expense(state, expense_id, "update_expense_price", price=price)


def set_expense_pricing_mode(
    state: SplitState, expense_id: str, mode: Optional[PricingMode]
) -> SplitState:
    """Override the pricing mode of one expense (None clears the override)"""
    return _update_expense(state, expense_id, "set_expense_pricing_mode", pricing_mode=mode)


# ---------- Modes ----------
def set_manual_total(state: SplitState, total: str) -> SplitState:
    return replace(state, manual_total=total)


def set_pricing_mode(state: SplitState, mode: PricingMode) -> SplitState:
    return replace(state, pricing_mode=mode)


def set_currency(state: SplitState, currency: str) -> SplitState:
    return replace(state, currency=currency.upper())


def bake_in(state: SplitState) -> SplitState:
    """Overwrite every manual amount with the current computed share"""
    amounts = compute_amounts(state)
    people = tuple(replace(p, amount=bake_amount(amounts.get(p.id, 0.0))) for p in state.people)
    return replace(state, people=people)


def set_split_mode(state: SplitState, mode: SplitMode) -> SplitState:
    """
    Switch split mode. Leaving EQUALLY for AMOUNTS bakes the equal split into
    the manual amounts so editing starts from it.
    """
    if state.split_mode is SplitMode.EQUALLY and mode is SplitMode.AMOUNTS:
        state = bake_in(state)
    return replace(state, split_mode=mode)


def set_view_mode(state: SplitState, mode: ViewMode) -> SplitState:
    """Switch between consumption and settle; settle requires a balanced split"""
    if mode is ViewMode.SETTLE:
        if not evaluate(state).can_settle:
            logger.debug("set_view_mode: split not settleable, staying in %s", state.view_mode.value)
            return state
        if state.assignment_mode is not None:
            state = exit_assignment_mode(state)
    return replace(state, view_mode=mode)


# ---------- Assignment mode ----------
def exit_assignment_mode(state: SplitState) -> SplitState:
    """Go idle, baking computed shares into the manual amounts"""
    return replace(bake_in(state), assignment_mode=None)


def handle_item_focus(state: SplitState, item_id: str) -> SplitState:
    """Focus an expense's assign control"""
    mode = state.assignment_mode
    if isinstance(mode, PersonActive):
        logger.debug("handle_item_focus: person %r is active, ignored", mode.person_id)
        return state
    if state.find_expense(item_id) is None:
        return _ignored("handle_item_focus", "expense", item_id, state)
    if isinstance(mode, ItemActive) and mode.item_id == item_id:
        return exit_assignment_mode(state)
    return replace(state, assignment_mode=ItemActive(item_id))


def handle_person_focus(state: SplitState, person_id: str) -> SplitState:
    """Focus a person's avatar control"""
    mode = state.assignment_mode
    if isinstance(mode, ItemActive):
        logger.debug("handle_person_focus: item %r is active, ignored", mode.item_id)
        return state
    if state.find_person(person_id) is None:
        return _ignored("handle_person_focus", "person", person_id, state)
    if isinstance(mode, PersonActive) and mode.person_id == person_id:
        return exit_assignment_mode(state)
    return replace(state, assignment_mode=PersonActive(person_id))


def _with_sequence(state: SplitState, expense_id: str, seq: Tuple[str, ...]) -> SplitState:
    assignments: Dict[str, Tuple[str, ...]] = dict(state.assignments)
    assignments[expense_id] = seq
    return replace(state, assignments=assignments)


def toggle_assignment(state: SplitState, expense_id: str, person_id: str) -> SplitState:
    """Flip one person's membership in one expense; new members go last"""
    if state.find_expense(expense_id) is None:
        return _ignored("toggle_assignment", "expense", expense_id, state)
    if state.find_person(person_id) is None:
        return _ignored("toggle_assignment", "person", person_id, state)
    current = state.assignees(expense_id)
    if person_id in current:
        seq = tuple(pid for pid in current if pid != person_id)
    else:
        seq = current + (person_id,)
    return _with_sequence(state, expense_id, seq)


def toggle_person(state: SplitState, person_id: str) -> SplitState:
    """While an expense is active, flip a person in or out of it"""
    mode = state.assignment_mode
    if not isinstance(mode, ItemActive):
        return state
    return toggle_assignment(state, mode.item_id, person_id)


def toggle_item(state: SplitState, expense_id: str) -> SplitState:
    """While a person is active, flip an expense in or out for them"""
    mode = state.assignment_mode
    if not isinstance(mode, PersonActive):
        return state
    return toggle_assignment(state, expense_id, mode.person_id)


def select_all_people(state: SplitState) -> SplitState:
    """Active expense: assign everyone, or no one if everyone already is"""
    mode = state.assignment_mode
    if not isinstance(mode, ItemActive):
        return state
    all_selected = len(state.assignees(mode.item_id)) == len(state.people)
    return _with_sequence(state, mode.item_id, () if all_selected else state.person_ids)


def select_all_items(state: SplitState) -> SplitState:
    """Active person: put them on every expense, or take them off all"""
    mode = state.assignment_mode
    if not isinstance(mode, PersonActive):
        return state
    pid = mode.person_id
    all_selected = all(pid in state.assignees(e.id) for e in state.expenses)
    assignments = dict(state.assignments)
    for e in state.expenses:
        current = assignments.get(e.id, ())
        if all_selected:
            assignments[e.id] = tuple(x for x in current if x != pid)
        elif pid not in current:
            assignments[e.id] = current + (pid,)
    return replace(state, assignments=assignments)


def is_all_people_selected(state: SplitState) -> bool:
    """Label helper for the select/deselect-all control in item mode"""
    mode = state.assignment_mode
    if not isinstance(mode, ItemActive):
        return False
    return len(state.assignees(mode.item_id)) == len(state.people)


def is_all_items_selected(state: SplitState) -> bool:
    """Label helper for the select/deselect-all control in person mode"""
    mode = state.assignment_mode
    if not isinstance(mode, PersonActive):
        return False
    return all(mode.person_id in state.assignees(e.id) for e in state.expenses)

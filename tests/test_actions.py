from dataclasses import replace

import pytest

import actions
from models import ItemActive, PersonActive, PricingMode, SplitMode, ViewMode
from computations import compute_amounts, evaluate


@pytest.fixture
def itemised(four_people):
    """Four people sharing one 10.01 item"""
    state = actions.add_expense(four_people, "e1")
    return actions.update_expense_price(state, "e1", "10.01")


def _amount_fields(state):
    return [p.amount for p in state.people]


# ---------- people / expenses ----------
def test_first_expense_takes_manual_total(four_people):
    state = actions.set_manual_total(four_people, "42.50")
    state = actions.add_expense(state, "e1")
    state = actions.add_expense(state, "e2")
    assert [e.price for e in state.expenses] == ["42.50", ""]
    assert evaluate(state).total == pytest.approx(42.5)


def test_new_expense_is_assigned_to_everyone(four_people):
    state = actions.add_expense(four_people, "e1")
    assert state.assignees("e1") == ("p1", "p2", "p3", "p4")


def test_new_person_joins_every_expense_last(itemised):
    state = actions.add_expense(itemised, "e2")
    state = actions.add_person(state, "p5")
    assert state.assignees("e1")[-1] == "p5"
    assert state.assignees("e2")[-1] == "p5"
    assert state.people[-1].name == ""


def test_actions_do_not_touch_the_input(itemised):
    before = itemised.assignees("e1")
    actions.remove_person(itemised, "p2")
    actions.toggle_assignment(itemised, "e1", "p3")
    assert itemised.assignees("e1") == before
    assert len(itemised.people) == 4


def test_remove_person_cascades_and_keeps_cents(itemised):
    state = actions.add_expense(itemised, "e2")
    state = actions.update_expense_price(state, "e2", "7")
    state = actions.remove_person(state, "p2")
    assert "p2" not in state.assignees("e1")
    assert "p2" not in state.assignees("e2")
    amounts = compute_amounts(state)
    assert set(amounts) == {"p1", "p3", "p4"}
    assert sum(amounts.values()) == pytest.approx(17.01)
    # 10.01 over three: 3.33, 3.33, 3.35
    assert amounts["p4"] == pytest.approx(3.35 + 7 / 3, abs=0.01)


def test_remove_expense_drops_its_assignments(itemised):
    state = actions.remove_expense(itemised, "e1")
    assert "e1" not in state.assignments
    assert not state.has_items


def test_removing_active_entities_leaves_assignment_mode(itemised):
    state = actions.handle_item_focus(itemised, "e1")
    assert actions.remove_expense(state, "e1").assignment_mode is None
    state = actions.handle_person_focus(itemised, "p3")
    assert actions.remove_person(state, "p3").assignment_mode is None


def test_remove_payer_clears_payer(itemised):
    state = replace(itemised, payer_id="p1")
    assert actions.remove_person(state, "p1").payer_id is None


def test_unknown_ids_are_ignored(itemised):
    assert actions.remove_person(itemised, "nobody") is itemised
    assert actions.remove_expense(itemised, "nothing") is itemised
    assert actions.update_person_name(itemised, "nobody", "X") is itemised
    assert actions.update_expense_price(itemised, "nothing", "5") is itemised
    assert actions.toggle_assignment(itemised, "e1", "nobody") is itemised
    assert actions.handle_item_focus(itemised, "nothing") is itemised


def test_update_fields(itemised):
    state = actions.update_person_name(itemised, "p1", "Rustam")
    state = actions.update_person_amount(state, "p1", "3")
    state = actions.update_expense_description(state, "e1", "Pizza")
    state = actions.set_expense_pricing_mode(state, "e1", PricingMode.EACH)
    assert state.people[0].name == "Rustam"
    assert state.people[0].amount == "3"
    assert state.expenses[0].description == "Pizza"
    assert state.expenses[0].pricing_mode is PricingMode.EACH


def test_set_currency_uppercases(four_people):
    assert actions.set_currency(four_people, "eur").currency == "EUR"


# ---------- assignment mode ----------
def test_focus_item_then_same_item_exits(itemised):
    state = actions.handle_item_focus(itemised, "e1")
    assert state.assignment_mode == ItemActive("e1")
    state = actions.handle_item_focus(state, "e1")
    assert state.assignment_mode is None


def test_focus_other_item_switches_directly(itemised):
    state = actions.add_expense(itemised, "e2")
    state = actions.handle_item_focus(state, "e1")
    state = actions.handle_item_focus(state, "e2")
    assert state.assignment_mode == ItemActive("e2")
    # switching does not bake anything in
    assert _amount_fields(state) == [""] * 4


def test_person_focus_is_ignored_while_item_active(itemised):
    state = actions.handle_item_focus(itemised, "e1")
    assert actions.handle_person_focus(state, "p1") is state


def test_item_focus_is_ignored_while_person_active(itemised):
    state = actions.handle_person_focus(itemised, "p1")
    assert actions.handle_item_focus(state, "e1") is state
    state = actions.handle_person_focus(state, "p2")
    assert state.assignment_mode == PersonActive("p2")


def test_exit_bakes_computed_amounts(itemised):
    state = actions.handle_person_focus(itemised, "p1")
    state = actions.handle_person_focus(state, "p1")
    assert state.assignment_mode is None
    assert _amount_fields(state) == ["2.50", "2.50", "2.50", "2.51"]
    # split mode is left alone
    assert state.split_mode is SplitMode.EQUALLY


def test_exit_bake_in_is_idempotent(itemised):
    once = actions.handle_item_focus(actions.handle_item_focus(itemised, "e1"), "e1")
    twice = actions.handle_item_focus(actions.handle_item_focus(once, "e1"), "e1")
    assert _amount_fields(once) == _amount_fields(twice) == ["2.50", "2.50", "2.50", "2.51"]


def test_exit_bakes_empty_string_for_unassigned(itemised):
    state = actions.handle_item_focus(itemised, "e1")
    state = actions.toggle_person(state, "p2")
    state = actions.exit_assignment_mode(state)
    assert _amount_fields(state) == ["3.33", "", "3.33", "3.35"]


def test_toggle_person_in_item_mode_appends_last(itemised):
    state = actions.handle_item_focus(itemised, "e1")
    state = actions.toggle_person(state, "p1")
    assert state.assignees("e1") == ("p2", "p3", "p4")
    state = actions.toggle_person(state, "p1")
    assert state.assignees("e1") == ("p2", "p3", "p4", "p1")
    # p1 now collects the odd cent
    assert compute_amounts(state)["p1"] == pytest.approx(2.51)


def test_toggle_item_in_person_mode(itemised):
    state = actions.add_expense(itemised, "e2")
    state = actions.handle_person_focus(state, "p3")
    state = actions.toggle_item(state, "e2")
    assert "p3" not in state.assignees("e2")
    assert "p3" in state.assignees("e1")


def test_toggles_need_matching_mode(itemised):
    assert actions.toggle_person(itemised, "p1") is itemised
    assert actions.toggle_item(itemised, "e1") is itemised
    assert actions.select_all_people(itemised) is itemised
    assert actions.select_all_items(itemised) is itemised


def test_select_all_people_flips_between_all_and_none(itemised):
    state = actions.handle_item_focus(itemised, "e1")
    assert actions.is_all_people_selected(state)
    state = actions.select_all_people(state)
    assert state.assignees("e1") == ()
    state = actions.toggle_person(state, "p3")
    assert not actions.is_all_people_selected(state)
    state = actions.select_all_people(state)
    assert state.assignees("e1") == ("p1", "p2", "p3", "p4")


def test_select_all_items_flips_for_one_person(itemised):
    state = actions.add_expense(itemised, "e2")
    state = actions.handle_person_focus(state, "p2")
    state = actions.toggle_item(state, "e2")
    assert not actions.is_all_items_selected(state)
    state = actions.select_all_items(state)
    assert state.assignees("e2")[-1] == "p2"
    assert state.assignees("e1").count("p2") == 1
    assert actions.is_all_items_selected(state)
    state = actions.select_all_items(state)
    assert "p2" not in state.assignees("e1")
    assert "p2" not in state.assignees("e2")
    assert state.assignees("e1") == ("p1", "p3", "p4")


# ---------- modes ----------
def test_switch_to_amounts_bakes_equal_split(four_people):
    state = actions.set_manual_total(four_people, "100")
    state = actions.set_split_mode(state, SplitMode.AMOUNTS)
    assert state.split_mode is SplitMode.AMOUNTS
    assert _amount_fields(state) == ["25.00"] * 4
    assert evaluate(state).is_balanced


def test_reentering_amounts_mode_rebakes(four_people):
    state = actions.set_manual_total(four_people, "100")
    state = actions.set_split_mode(state, SplitMode.AMOUNTS)
    state = actions.update_person_amount(state, "p1", "40")
    state = actions.set_split_mode(state, SplitMode.EQUALLY)
    state = actions.set_split_mode(state, SplitMode.AMOUNTS)
    assert _amount_fields(state) == ["25.00"] * 4
    state = actions.update_person_amount(state, "p1", "40")
    assert actions.set_split_mode(state, SplitMode.AMOUNTS).people[0].amount == "40"


def test_global_pricing_mode(itemised):
    state = actions.set_pricing_mode(itemised, PricingMode.EACH)
    assert evaluate(state).total == pytest.approx(40.04)


def test_settle_view_requires_balanced_split(four_people):
    assert actions.set_view_mode(four_people, ViewMode.SETTLE) is four_people
    state = actions.set_manual_total(four_people, "100")
    state = actions.set_view_mode(state, ViewMode.SETTLE)
    assert state.view_mode is ViewMode.SETTLE
    state = actions.set_view_mode(state, ViewMode.CONSUMPTION)
    assert state.view_mode is ViewMode.CONSUMPTION


def test_entering_settle_leaves_assignment_mode(itemised):
    state = actions.handle_item_focus(itemised, "e1")
    state = actions.set_view_mode(state, ViewMode.SETTLE)
    assert state.view_mode is ViewMode.SETTLE
    assert state.assignment_mode is None
    assert _amount_fields(state) == ["2.50", "2.50", "2.50", "2.51"]

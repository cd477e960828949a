import pytest

import actions
from models import SettleSubMode, SplitMode, ViewMode
from computations import evaluate
from settlement import (
    SettleProgress,
    SettleRole,
    build_collection,
    choose_payer,
    switch_sub_mode,
)


@pytest.fixture
def settled(four_people):
    """100 split four ways, in settle view"""
    state = actions.set_manual_total(four_people, "100")
    return actions.set_view_mode(state, ViewMode.SETTLE)


def _view(state, progress):
    return build_collection(state, evaluate(state), progress)


def test_no_payer_yet(settled):
    view = _view(settled, SettleProgress())
    assert [e.role for e in view.entries] == [SettleRole.UNSELECTED] * 4
    assert view.payer_share is None
    assert not view.is_collected


def test_payer_row_comes_first_and_shows_the_total(settled):
    state, progress = choose_payer(settled, SettleProgress(), "p3")
    view = _view(state, progress)
    assert [e.person_id for e in view.entries] == ["p3", "p1", "p2", "p4"]
    assert view.entries[0].role is SettleRole.PAYER
    assert view.entries[0].share == pytest.approx(100.0)
    assert view.payer_share == pytest.approx(100.0)
    assert view.to_collect == pytest.approx(75.0)


def test_collecting_from_everyone_reaches_zero(settled):
    state, progress = choose_payer(settled, SettleProgress(), "p1")
    for pid in ("p2", "p3", "p4"):
        assert not _view(state, progress).is_collected
        progress = progress.toggle_paid(pid)
    view = _view(state, progress)
    assert view.to_collect == 0
    assert view.is_collected
    assert all(e.paid for e in view.entries if e.role is SettleRole.DEBTOR)


def test_changing_payer_resets_progress(settled):
    state, progress = choose_payer(settled, SettleProgress(), "p1")
    for pid in ("p2", "p3", "p4"):
        progress = progress.toggle_paid(pid)
    state, progress = choose_payer(state, progress, "p2")
    view = _view(state, progress)
    assert progress.paid == frozenset()
    assert view.to_collect == pytest.approx(75.0)
    assert not view.is_collected


def test_unpaying_a_debtor(settled):
    state, progress = choose_payer(settled, SettleProgress(), "p1")
    progress = progress.toggle_paid("p2").toggle_paid("p2")
    assert _view(state, progress).to_collect == pytest.approx(75.0)


def test_unknown_payer_is_ignored(settled):
    progress = SettleProgress().toggle_paid("p2")
    state, same = choose_payer(settled, progress, "ghost")
    assert state is settled
    assert same is progress


def test_everyone_mode_collects_every_share(settled):
    progress = switch_sub_mode(SettleProgress(), SettleSubMode.EVERYONE)
    view = _view(settled, progress)
    assert [e.role for e in view.entries] == [SettleRole.DEBTOR] * 4
    assert view.payer_share is None
    assert view.to_collect == pytest.approx(100.0)
    progress = progress.toggle_paid("p1").toggle_paid("p4")
    assert _view(settled, progress).to_collect == pytest.approx(50.0)


def test_switching_sub_mode_resets_paid_flags():
    progress = SettleProgress().toggle_paid("p1")
    progress = switch_sub_mode(progress, SettleSubMode.EVERYONE)
    assert progress.sub_mode is SettleSubMode.EVERYONE
    assert progress.paid == frozenset()


def test_uneven_split_odd_cent_stays_with_last(four_people):
    state = actions.set_manual_total(four_people, "10.01")
    state, progress = choose_payer(state, SettleProgress(), "p1")
    view = _view(state, progress)
    shares = {e.person_id: e.share for e in view.entries if e.role is SettleRole.DEBTOR}
    assert shares == pytest.approx({"p2": 2.50, "p3": 2.50, "p4": 2.51})
    assert view.to_collect == pytest.approx(7.51)


def test_amounts_mode_still_collects_computed_shares(settled):
    state = actions.set_split_mode(settled, SplitMode.AMOUNTS)
    state = actions.update_person_amount(state, "p2", "40")
    state = actions.update_person_amount(state, "p3", "10")
    state, progress = choose_payer(state, SettleProgress(), "p1")
    progress = progress.toggle_paid("p2")
    result = evaluate(state)
    view = build_collection(state, result, progress)
    for entry in view.entries:
        if entry.role is SettleRole.DEBTOR:
            assert entry.share == pytest.approx(result.computed_amounts[entry.person_id])
    # p3 and p4 still owe 25 each
    assert view.to_collect == pytest.approx(50.0)

from openpyxl import load_workbook

import actions
from models import PricingMode, ViewMode
from excel_export import export_excel
from settlement import SettleProgress, choose_payer


def test_manual_split_has_people_sheet_only(four_people, tmp_path):
    state = actions.set_manual_total(four_people, "100")
    fp = tmp_path / "split.xlsx"
    export_excel(state, str(fp))

    wb = load_workbook(fp)
    assert wb.sheetnames == ["People"]
    ws = wb["People"]
    assert [c.value for c in ws[1]] == ["Person", "Computed share", "Manual amount"]
    assert [ws.cell(r, 1).value for r in range(2, 6)] == ["Rus", "Don", "Art", "Faz"]
    assert [ws.cell(r, 2).value for r in range(2, 6)] == [25.0] * 4


def test_items_sheet_lists_shares_and_totals(four_people, tmp_path):
    state = actions.add_expense(four_people, "e1")
    state = actions.update_expense_price(state, "e1", "10.01")
    state = actions.update_expense_description(state, "e1", "Pizza")
    state = actions.add_expense(state, "e2")
    state = actions.update_expense_price(state, "e2", "3")
    state = actions.set_expense_pricing_mode(state, "e2", PricingMode.EACH)
    fp = tmp_path / "items.xlsx"
    export_excel(state, str(fp))

    ws = load_workbook(fp)["Items"]
    assert [c.value for c in ws[1]] == ["item", "price", "mode", "line total", "Rus", "Don", "Art", "Faz"]
    assert ws.cell(2, 1).value == "Pizza"
    assert ws.cell(3, 1).value == "Item 2"
    assert ws.cell(3, 3).value == "each"
    assert ws.cell(3, 4).value == 12
    assert abs(ws.cell(2, 8).value - 2.51) < 1e-9
    assert ws.cell(4, 1).value == "TOTALS"
    assert ws.cell(4, 4).value == "=SUM(D2:D3)"


def test_settle_sheet_in_settle_view(four_people, tmp_path):
    state = actions.set_manual_total(four_people, "100")
    state = actions.set_view_mode(state, ViewMode.SETTLE)
    state, progress = choose_payer(state, SettleProgress(), "p2")
    progress = progress.toggle_paid("p1")
    fp = tmp_path / "settle.xlsx"
    export_excel(state, str(fp), progress)

    ws = load_workbook(fp)["Settle"]
    rows = [[c.value for c in row] for row in ws.iter_rows(min_row=2) if row[0].value]
    assert rows[0][:3] == ["Don", "payer", 100]
    assert rows[1] == ["Rus", "debtor", 25, "yes"]
    assert rows[-1][0] == "To collect"
    assert rows[-1][2] == 50

"""
Excel export functionality for SplitIt
"""
from __future__ import annotations
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import SplitMode, SplitState, ViewMode
from computations import effective_pricing_mode, evaluate, expense_line_total, expense_shares
from currency import currency_decimals
from settlement import SettleProgress, build_collection
from utils import safe_float


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _person_label(name: str, index: int) -> str:
    return name or f"Person {index + 1}"


def export_excel(
    state: SplitState,
    filepath: str,
    progress: Optional[SettleProgress] = None,
) -> None:
    """
    Export the current split to an Excel file with sheets:
    - Items (only when there are expenses)
    - People
    - Settle (only in settle view)
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    result = evaluate(state)
    fmt = "#,##0" if currency_decimals(state.currency) == 0 else "#,##0.00"
    labels = [_person_label(p.name, i) for i, p in enumerate(state.people)]

    if state.has_items:
        ws = wb.create_sheet("Items")
        headers = ["item", "price", "mode", "line total"] + labels
        ws.append(headers)
        _style_header(ws, 1)
        ws.freeze_panes = "A2"
        for i, e in enumerate(state.expenses):
            shares = expense_shares(state, e)
            row = [
                e.description or f"Item {i + 1}",
                safe_float(e.price),
                effective_pricing_mode(e, state.pricing_mode).value,
                expense_line_total(state, e),
            ]
            row += [shares.get(p.id, 0.0) for p in state.people]
            ws.append(row)

        ws.append(["TOTALS"] + [""] * (len(headers) - 1))
        trow = ws.max_row
        ws.cell(trow, 1).font = Font(bold=True)
        last_data_row = trow - 1
        if last_data_row >= 2:
            # line totals, then per-person columns
            for col in [4] + list(range(5, 5 + len(state.people))):
                letter = get_column_letter(col)
                ws.cell(trow, col).value = f"=SUM({letter}2:{letter}{last_data_row})"
                ws.cell(trow, col).font = Font(bold=True)

        for r in range(2, ws.max_row + 1):
            for c in [2, 4] + list(range(5, 5 + len(state.people))):
                ws.cell(r, c).number_format = fmt
        _autosize_columns(ws)

    ws = wb.create_sheet("People")
    ws.append(["Person", "Computed share", "Manual amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for label, p in zip(labels, state.people):
        ws.append([label, result.computed_amounts.get(p.id, 0.0), safe_float(p.amount)])

    ws.append([])
    mode_label = "equally" if state.split_mode is SplitMode.EQUALLY else "amounts"
    for name, value in (
        ("Total", result.total),
        (f"Covered ({mode_label})", result.covered_amount),
        ("Remaining", result.remaining),
    ):
        ws.append([name, value])
        ws.cell(ws.max_row, 1).font = Font(bold=True)
    status = "Balanced" if result.is_balanced else ("Over" if result.is_over else "Remaining")
    ws.append(["Status", status])
    ws.cell(ws.max_row, 1).font = Font(bold=True)
    ws.append(["Currency", state.currency])
    ws.cell(ws.max_row, 1).font = Font(bold=True)

    for r in range(2, ws.max_row + 1):
        for c in (2, 3):
            ws.cell(r, c).number_format = fmt
    _autosize_columns(ws)

    if state.view_mode is ViewMode.SETTLE:
        view = build_collection(state, result, progress or SettleProgress())
        ws = wb.create_sheet("Settle")
        ws.append(["Person", "Role", "Amount", "Paid"])
        _style_header(ws, 1)
        ws.freeze_panes = "A2"
        index = {p.id: i for i, p in enumerate(state.people)}
        for entry in view.entries:
            ws.append([
                _person_label(entry.name, index[entry.person_id]),
                entry.role.value,
                entry.share,
                "yes" if entry.paid else "",
            ])
        ws.append([])
        ws.append(["To collect", "", view.to_collect, "collected" if view.is_collected else ""])
        ws.cell(ws.max_row, 1).font = Font(bold=True)
        for r in range(2, ws.max_row + 1):
            ws.cell(r, 3).number_format = fmt
        _autosize_columns(ws)

    wb.save(filepath)

"""
Main application window for SplitIt GUI

The window keeps the current SplitState and SettleProgress. Every user action
goes through a reducer from actions.py / settlement.py, after which the
allocation is re-evaluated and the whole window is redrawn.
"""
from __future__ import annotations
import logging
from typing import Callable, Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox, filedialog
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None
    filedialog = None

import actions
from models import ItemActive, PersonActive, PricingMode, SettleSubMode, SplitMode, SplitState, ViewMode
from config import get_default_state
from computations import AllocationResult, assigned_item_count, effective_pricing_mode, evaluate
from currency import COMMON_CURRENCIES, currency_symbol, format_amount, format_money
from settlement import SettleProgress, SettleRole, build_collection, choose_payer, switch_sub_mode
from excel_export import export_excel
from gui_dialogs import ExpenseDialog, PersonDialog

logger = logging.getLogger(__name__)

CHECK = "✓"


class SplitItApp(ttk.Frame):
    """Main application window"""

    def __init__(self, master: tk.Tk, state: Optional[SplitState] = None):
        super().__init__(master, padding=8)
        self.master = master
        self.master.title("SplitIt - Split the Bill")
        self.master.geometry("900x680")
        self.grid(row=0, column=0, sticky="nsew")
        self.master.rowconfigure(0, weight=1)
        self.master.columnconfigure(0, weight=1)

        self.split: SplitState = state or get_default_state()
        self.progress = SettleProgress()
        self.result: AllocationResult = evaluate(self.split)

        self._build_menu()
        self._build_ui()
        self.refresh_all()

    # ---------- State ----------
    def dispatch(self, action: Callable[..., SplitState], *args):
        """Apply an action to the state and redraw"""
        self.split = action(self.split, *args)
        self.refresh_all()

    # ---------- Menu ----------
    def _build_menu(self):
        """Build application menu bar"""
        menubar = tk.Menu(self.master)
        filem = tk.Menu(menubar, tearoff=0)
        filem.add_command(label="New Split", command=self.new_split)
        filem.add_separator()
        filem.add_command(label="Export Excel…", command=self.export_excel_dialog)
        filem.add_separator()
        filem.add_command(label="Exit", command=self.master.destroy)
        menubar.add_cascade(label="File", menu=filem)

        settingsm = tk.Menu(menubar, tearoff=0)
        self.pricing_var = tk.StringVar(value=self.split.pricing_mode.value)
        for mode in PricingMode:
            settingsm.add_radiobutton(
                label=f"Prices are {'per person' if mode is PricingMode.EACH else 'line totals'}",
                variable=self.pricing_var,
                value=mode.value,
                command=lambda: self.dispatch(actions.set_pricing_mode, PricingMode(self.pricing_var.get())),
            )
        menubar.add_cascade(label="Settings", menu=settingsm)

        self.master.config(menu=menubar)

    # ---------- UI ----------
    def _build_ui(self):
        """Build main UI with tabs"""
        self.nb = ttk.Notebook(self)
        self.nb.grid(row=0, column=0, sticky="nsew")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        self.tab_split = ttk.Frame(self.nb, padding=8)
        self.tab_settle = ttk.Frame(self.nb, padding=8)
        self.nb.add(self.tab_split, text="Consumption")
        self.nb.add(self.tab_settle, text="Settle")
        self.nb.bind("<<NotebookTabChanged>>", self._on_tab_changed)

        self._build_split_tab()
        self._build_settle_tab()

        summary = ttk.Frame(self)
        summary.grid(row=1, column=0, sticky="ew", pady=(6, 0))
        self.total_var = tk.StringVar()
        self.covered_var = tk.StringVar()
        self.remaining_var = tk.StringVar()
        self.status_var = tk.StringVar()
        for i, var in enumerate((self.total_var, self.covered_var, self.remaining_var, self.status_var)):
            ttk.Label(summary, textvariable=var).grid(row=0, column=i, sticky="w", padx=(0, 18))

    def _build_split_tab(self):
        """Items on top, people below"""
        tab = self.tab_split
        tab.columnconfigure(0, weight=1)

        top = ttk.Frame(tab)
        top.grid(row=0, column=0, sticky="ew")
        ttk.Label(top, text="Items").pack(side="left")
        self.item_buttons = [
            ttk.Button(top, text="Add", command=lambda: self.dispatch(actions.add_expense)),
            ttk.Button(top, text="Edit", command=self.edit_selected_expense),
            ttk.Button(top, text="Remove", command=self.remove_selected_expense),
            ttk.Button(top, text="tot/ea", command=self.toggle_selected_pricing),
        ]
        for b in self.item_buttons:
            b.pack(side="left", padx=3)
        self.assign_people_btn = ttk.Button(top, text="Assign People", command=self.focus_selected_expense)
        self.assign_people_btn.pack(side="left", padx=3)
        self.select_all_items_btn = ttk.Button(top, text="Select All",
                                               command=lambda: self.dispatch(actions.select_all_items))

        cols = ("description", "price", "mode", "assigned")
        self.exp_tree = ttk.Treeview(tab, columns=cols, show="headings", height=8)
        for c, w in zip(cols, [320, 110, 70, 90]):
            self.exp_tree.heading(c, text=c)
            self.exp_tree.column(c, width=w, anchor="w")
        self.exp_tree.grid(row=1, column=0, sticky="nsew", pady=4)
        self.exp_tree.bind("<Double-1>", self._on_expense_double_click)
        tab.rowconfigure(1, weight=1)

        total_row = ttk.Frame(tab)
        total_row.grid(row=2, column=0, sticky="ew")
        ttk.Label(total_row, text="Total").pack(side="left")
        self.total_symbol_var = tk.StringVar()
        ttk.Label(total_row, textvariable=self.total_symbol_var).pack(side="left", padx=(8, 2))
        self.manual_total_var = tk.StringVar(value=self.split.manual_total)
        self.manual_total_entry = ttk.Entry(total_row, textvariable=self.manual_total_var, width=12)
        self.manual_total_entry.pack(side="left")
        self.manual_total_var.trace_add("write", lambda *_: self._on_manual_total())

        ttk.Label(total_row, text="Currency").pack(side="left", padx=(24, 4))
        self.currency_var = tk.StringVar(value=self.split.currency)
        cb = ttk.Combobox(total_row, textvariable=self.currency_var, width=8, state="readonly",
                          values=[code for code, _ in COMMON_CURRENCIES])
        cb.pack(side="left")
        cb.bind("<<ComboboxSelected>>", lambda _e: self.dispatch(actions.set_currency, self.currency_var.get()))

        ttk.Separator(tab, orient="horizontal").grid(row=3, column=0, sticky="ew", pady=6)

        ptop = ttk.Frame(tab)
        ptop.grid(row=4, column=0, sticky="ew")
        ttk.Label(ptop, text="People").pack(side="left")
        self.person_buttons = [
            ttk.Button(ptop, text="Add", command=lambda: self.dispatch(actions.add_person)),
            ttk.Button(ptop, text="Edit", command=self.edit_selected_person),
            ttk.Button(ptop, text="Remove", command=self.remove_selected_person),
        ]
        for b in self.person_buttons:
            b.pack(side="left", padx=3)
        self.assign_items_btn = ttk.Button(ptop, text="Assign Items", command=self.focus_selected_person)
        self.assign_items_btn.pack(side="left", padx=3)
        self.select_all_people_btn = ttk.Button(ptop, text="Select All",
                                                command=lambda: self.dispatch(actions.select_all_people))

        self.split_var = tk.StringVar(value=self.split.split_mode.value)
        for mode in (SplitMode.AMOUNTS, SplitMode.EQUALLY):
            ttk.Radiobutton(
                ptop, text=mode.value.capitalize(), value=mode.value, variable=self.split_var,
                command=lambda: self.dispatch(actions.set_split_mode, SplitMode(self.split_var.get())),
            ).pack(side="right", padx=3)

        pcols = ("name", "amount", "items", "assigned")
        self.people_tree = ttk.Treeview(tab, columns=pcols, show="headings", height=8)
        for c, w in zip(pcols, [280, 120, 70, 90]):
            self.people_tree.heading(c, text=c)
            self.people_tree.column(c, width=w, anchor="w")
        self.people_tree.grid(row=5, column=0, sticky="nsew", pady=4)
        self.people_tree.bind("<Double-1>", self._on_person_double_click)
        tab.rowconfigure(5, weight=1)

        self.mode_hint = tk.StringVar()
        ttk.Label(tab, textvariable=self.mode_hint).grid(row=6, column=0, sticky="w")

    def _build_settle_tab(self):
        """Payer selection and collection tracking"""
        tab = self.tab_settle
        tab.columnconfigure(0, weight=1)

        top = ttk.Frame(tab)
        top.grid(row=0, column=0, sticky="ew")
        self.sub_mode_var = tk.StringVar(value=self.progress.sub_mode.value)
        for mode, label in ((SettleSubMode.PAYER, "One Person"), (SettleSubMode.EVERYONE, "Everyone")):
            ttk.Radiobutton(top, text=label, value=mode.value, variable=self.sub_mode_var,
                            command=self._on_sub_mode).pack(side="left", padx=3)

        ttk.Label(top, text="Paid by").pack(side="left", padx=(24, 4))
        self.payer_var = tk.StringVar()
        self.payer_combo = ttk.Combobox(top, textvariable=self.payer_var, width=20, state="readonly")
        self.payer_combo.pack(side="left")
        self.payer_combo.bind("<<ComboboxSelected>>", lambda _e: self._on_payer_selected())

        ttk.Button(top, text="Toggle Paid", command=self.toggle_selected_paid).pack(side="left", padx=12)

        cols = ("name", "role", "amount", "paid")
        self.settle_tree = ttk.Treeview(tab, columns=cols, show="headings", height=14)
        for c, w in zip(cols, [260, 100, 120, 80]):
            self.settle_tree.heading(c, text=c)
            self.settle_tree.column(c, width=w, anchor="w")
        self.settle_tree.grid(row=1, column=0, sticky="nsew", pady=6)
        self.settle_tree.bind("<Double-1>", lambda _e: self.toggle_selected_paid())
        tab.rowconfigure(1, weight=1)

        self.collect_var = tk.StringVar()
        ttk.Label(tab, textvariable=self.collect_var).grid(row=2, column=0, sticky="w")

    # ---------- Items ----------
    def _selected(self, tree) -> Optional[str]:
        sel = tree.selection()
        return sel[0] if sel else None

    def edit_selected_expense(self):
        """Edit selected expense"""
        eid = self._selected(self.exp_tree)
        e = self.split.find_expense(eid)
        if e is None:
            messagebox.showinfo("Edit", "Select an item row first.")
            return
        dlg = ExpenseDialog(self.master, e)
        self.master.wait_window(dlg)
        if dlg.result:
            description, price, mode = dlg.result
            s = actions.update_expense_description(self.split, eid, description)
            s = actions.update_expense_price(s, eid, price)
            self.split = actions.set_expense_pricing_mode(s, eid, mode)
            self.refresh_all()

    def remove_selected_expense(self):
        """Remove selected expense"""
        eid = self._selected(self.exp_tree)
        if eid is None:
            messagebox.showinfo("Remove", "Select an item row first.")
            return
        self.dispatch(actions.remove_expense, eid)

    def toggle_selected_pricing(self):
        """Flip the selected item between line-total and per-person pricing"""
        eid = self._selected(self.exp_tree)
        e = self.split.find_expense(eid)
        if e is None:
            return
        current = effective_pricing_mode(e, self.split.pricing_mode)
        new_mode = PricingMode.TOTAL if current is PricingMode.EACH else PricingMode.EACH
        self.dispatch(actions.set_expense_pricing_mode, eid, new_mode)

    def focus_selected_expense(self):
        eid = self._selected(self.exp_tree)
        mode = self.split.assignment_mode
        if eid is None and isinstance(mode, ItemActive):
            eid = mode.item_id
        if eid is not None:
            self.dispatch(actions.handle_item_focus, eid)

    def _on_expense_double_click(self, event):
        eid = self.exp_tree.identify_row(event.y)
        if not eid:
            return
        if isinstance(self.split.assignment_mode, PersonActive):
            self.dispatch(actions.toggle_item, eid)
        else:
            self.dispatch(actions.handle_item_focus, eid)

    def _on_manual_total(self):
        value = self.manual_total_var.get()
        if value != self.split.manual_total:
            self.dispatch(actions.set_manual_total, value)

    # ---------- People ----------
    def edit_selected_person(self):
        """Edit selected person"""
        pid = self._selected(self.people_tree)
        p = self.split.find_person(pid)
        if p is None:
            messagebox.showinfo("Edit", "Select a person row first.")
            return
        dlg = PersonDialog(self.master, p, self.split.split_mode is SplitMode.AMOUNTS)
        self.master.wait_window(dlg)
        if dlg.result:
            name, amount = dlg.result
            s = actions.update_person_name(self.split, pid, name)
            if self.split.split_mode is SplitMode.AMOUNTS:
                s = actions.update_person_amount(s, pid, amount)
            self.split = s
            self.refresh_all()

    def remove_selected_person(self):
        """Remove selected person"""
        pid = self._selected(self.people_tree)
        if pid is None:
            return
        self.dispatch(actions.remove_person, pid)

    def focus_selected_person(self):
        pid = self._selected(self.people_tree)
        mode = self.split.assignment_mode
        if pid is None and isinstance(mode, PersonActive):
            pid = mode.person_id
        if pid is not None:
            self.dispatch(actions.handle_person_focus, pid)

    def _on_person_double_click(self, event):
        pid = self.people_tree.identify_row(event.y)
        if not pid:
            return
        if isinstance(self.split.assignment_mode, ItemActive):
            self.dispatch(actions.toggle_person, pid)
        else:
            self.dispatch(actions.handle_person_focus, pid)

    # ---------- Settle ----------
    def _on_tab_changed(self, _event):
        want = ViewMode.SETTLE if self.nb.index("current") == 1 else ViewMode.CONSUMPTION
        if want is self.split.view_mode:
            return
        self.split = actions.set_view_mode(self.split, want)
        if self.split.view_mode is not want:
            messagebox.showinfo("Settle", "The split has to be balanced before settling up.")
        self.refresh_all()

    def _on_sub_mode(self):
        self.progress = switch_sub_mode(self.progress, SettleSubMode(self.sub_mode_var.get()))
        self.refresh_all()

    def _on_payer_selected(self):
        idx = self.payer_combo.current()
        if idx < 0:
            return
        pid = self.split.people[idx].id
        self.split, self.progress = choose_payer(self.split, self.progress, pid)
        self.refresh_all()

    def toggle_selected_paid(self):
        pid = self._selected(self.settle_tree)
        if pid is None:
            return
        if self.progress.sub_mode is SettleSubMode.PAYER and pid == self.split.payer_id:
            return
        self.progress = self.progress.toggle_paid(pid)
        self.refresh_all()

    # ---------- File ops ----------
    def new_split(self):
        """Start over with the configured people"""
        if messagebox.askyesno("New", "Start a new split (current entries will be lost)?"):
            self.split = get_default_state()
            self.progress = SettleProgress()
            self.manual_total_var.set("")
            self.refresh_all()

    def export_excel_dialog(self):
        """Export to Excel file"""
        fp = filedialog.asksaveasfilename(
            title="Export Excel",
            defaultextension=".xlsx",
            filetypes=[("Excel Workbook", "*.xlsx")]
        )
        if not fp:
            return
        try:
            export_excel(self.split, fp, self.progress)
            messagebox.showinfo("Export", f"Exported: {fp}")
        except Exception as ex:
            logger.exception("Excel export to %s failed", fp)
            messagebox.showerror("Export failed", str(ex))

    # ---------- Refresh ----------
    def refresh_all(self):
        """Re-run the allocation and redraw everything"""
        self.result = evaluate(self.split)
        self.pricing_var.set(self.split.pricing_mode.value)
        self.split_var.set(self.split.split_mode.value)
        self.currency_var.set(self.split.currency)
        self.nb.select(1 if self.split.view_mode is ViewMode.SETTLE else 0)
        self.refresh_expenses()
        self.refresh_people()
        self.refresh_assignment_controls()
        self.refresh_summary()
        self.refresh_settle()

    def _money(self, value: float) -> str:
        return format_money(value, self.split.currency)

    def refresh_expenses(self):
        """Refresh items tree view"""
        for iid in self.exp_tree.get_children():
            self.exp_tree.delete(iid)
        mode = self.split.assignment_mode
        for e in self.split.expenses:
            assigned = self.split.assignees(e.id)
            if isinstance(mode, PersonActive):
                mark = CHECK if mode.person_id in assigned else ""
            else:
                mark = f"{len(assigned)} people"
            pricing = effective_pricing_mode(e, self.split.pricing_mode)
            values = (
                e.description or "(no description)",
                e.price,
                "ea" if pricing is PricingMode.EACH else "tot",
                mark,
            )
            self.exp_tree.insert("", "end", iid=e.id, values=values)
        if isinstance(mode, ItemActive) and self.exp_tree.exists(mode.item_id):
            self.exp_tree.selection_set(mode.item_id)

        self.total_symbol_var.set(currency_symbol(self.split.currency))
        if self.split.has_items:
            self.manual_total_entry.configure(state="disabled")
        else:
            self.manual_total_entry.configure(state="normal")

    def refresh_people(self):
        """Refresh people tree view"""
        for iid in self.people_tree.get_children():
            self.people_tree.delete(iid)
        mode = self.split.assignment_mode
        equally = self.split.split_mode is SplitMode.EQUALLY
        for i, p in enumerate(self.split.people):
            computed = self.result.computed_amounts.get(p.id, 0.0)
            if equally:
                shown = format_amount(computed, self.split.currency) if computed > 0 else "—"
            else:
                shown = p.amount
            if isinstance(mode, ItemActive):
                mark = CHECK if p.id in self.split.assignees(mode.item_id) else ""
            else:
                mark = ""
            values = (
                p.name or f"Person {i + 1}",
                shown,
                assigned_item_count(self.split, p.id) if self.split.has_items else "",
                mark,
            )
            self.people_tree.insert("", "end", iid=p.id, values=values)
        if isinstance(mode, PersonActive) and self.people_tree.exists(mode.person_id):
            self.people_tree.selection_set(mode.person_id)

    def refresh_assignment_controls(self):
        """Hide add/edit controls and show select-all while assigning"""
        mode = self.split.assignment_mode
        active = mode is not None
        for b in self.item_buttons + self.person_buttons:
            b.state(["disabled"] if active else ["!disabled"])

        self.select_all_people_btn.pack_forget()
        self.select_all_items_btn.pack_forget()
        if isinstance(mode, ItemActive):
            label = "Deselect All" if actions.is_all_people_selected(self.split) else "Select All"
            self.select_all_people_btn.configure(text=label)
            self.select_all_people_btn.pack(side="left", padx=3)
            e = self.split.find_expense(mode.item_id)
            name = e.description if e and e.description else "this item"
            self.mode_hint.set(f"Assigning people to {name}: double-click a person to toggle.")
        elif isinstance(mode, PersonActive):
            label = "Deselect All" if actions.is_all_items_selected(self.split) else "Select All"
            self.select_all_items_btn.configure(text=label)
            self.select_all_items_btn.pack(side="left", padx=3)
            p = self.split.find_person(mode.person_id)
            name = p.name if p and p.name else "this person"
            self.mode_hint.set(f"Assigning items to {name}: double-click an item to toggle.")
        else:
            self.mode_hint.set("")
        self.assign_people_btn.state(["disabled"] if isinstance(mode, PersonActive) else ["!disabled"])
        self.assign_items_btn.state(["disabled"] if isinstance(mode, ItemActive) else ["!disabled"])

    def refresh_summary(self):
        """Total / covered / remaining line"""
        r = self.result
        self.total_var.set(f"Total: {self._money(r.total)}")
        self.covered_var.set(f"Covered: {self._money(r.covered_amount)}")
        if r.is_balanced:
            self.remaining_var.set(f"Remaining: {self._money(0.0)}")
            self.status_var.set("Balanced")
        elif r.is_over:
            self.remaining_var.set(f"Over: +{self._money(abs(r.remaining))}")
            self.status_var.set("Over")
        else:
            self.remaining_var.set(f"Remaining: {self._money(r.remaining)}")
            self.status_var.set("Remaining")
        self.nb.tab(1, state="normal" if r.can_settle or self.split.view_mode is ViewMode.SETTLE else "disabled")

    def refresh_settle(self):
        """Refresh settle tab"""
        for iid in self.settle_tree.get_children():
            self.settle_tree.delete(iid)
        self.payer_combo.configure(
            values=[p.name or f"Person {i + 1}" for i, p in enumerate(self.split.people)],
            state="readonly" if self.progress.sub_mode is SettleSubMode.PAYER else "disabled",
        )
        payer = self.split.find_person(self.split.payer_id)
        self.payer_var.set(payer.name if payer else "")
        self.sub_mode_var.set(self.progress.sub_mode.value)
        if self.split.view_mode is not ViewMode.SETTLE:
            self.collect_var.set("")
            return

        view = build_collection(self.split, self.result, self.progress)
        names = {p.id: p.name or f"Person {i + 1}" for i, p in enumerate(self.split.people)}
        for entry in view.entries:
            paid = ""
            if entry.role is SettleRole.DEBTOR:
                paid = "paid" if entry.paid else "owes"
            self.settle_tree.insert("", "end", iid=entry.person_id, values=(
                names[entry.person_id], entry.role.value, self._money(entry.share), paid,
            ))

        if self.progress.sub_mode is SettleSubMode.PAYER and payer is None:
            self.collect_var.set("Who paid?")
        else:
            text = f"To Collect: {self._money(view.to_collect)}"
            if view.payer_share is not None:
                text = f"{names[payer.id]}'s Share: {self._money(view.payer_share)}    " + text
            if view.is_collected:
                text += "    Collected"
            self.collect_var.set(text)

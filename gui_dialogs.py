"""
Dialog windows for SplitIt GUI
"""
from __future__ import annotations
from typing import Optional, Tuple

try:
    import tkinter as tk
    from tkinter import ttk, messagebox
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None

from models import Expense, Person, PricingMode
from utils import is_number

# combobox label -> per-expense override
_MODE_CHOICES = {
    "default": None,
    "total": PricingMode.TOTAL,
    "each": PricingMode.EACH,
}


class _EditDialog(tk.Toplevel):
    """Small modal form with OK/Cancel and Enter bound to OK"""

    def __init__(self, master, title: str):
        super().__init__(master)
        self.title(title)
        self.resizable(False, False)
        self.frm = ttk.Frame(self, padding=10)
        self.frm.grid(row=0, column=0, sticky="nsew")
        self._bind_enter_to_ok()

    def _bind_enter_to_ok(self):
        def on_enter(event=None):
            self._ok()
            return "break"

        self.bind("<Return>", on_enter)
        self.bind("<KP_Enter>", on_enter)

    def _buttons(self, row: int):
        btns = ttk.Frame(self.frm)
        btns.grid(row=row, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)
        self.grab_set()
        self.transient(self.master)

    def _ok(self):
        raise NotImplementedError

    def _cancel(self):
        """Cancel and close"""
        self.result = None
        self.destroy()


class ExpenseDialog(_EditDialog):
    """Edit description, price and pricing override of an expense"""

    def __init__(self, master, expense: Expense):
        super().__init__(master, "Edit Item")
        self.result: Optional[Tuple[str, str, Optional[PricingMode]]] = None

        mode_label = expense.pricing_mode.value if expense.pricing_mode else "default"
        self.v_description = tk.StringVar(value=expense.description)
        self.v_price = tk.StringVar(value=expense.price)
        self.v_mode = tk.StringVar(value=mode_label)

        ttk.Label(self.frm, text="Description").grid(row=0, column=0, sticky="w")
        ttk.Entry(self.frm, textvariable=self.v_description, width=28).grid(row=0, column=1, sticky="w")
        ttk.Label(self.frm, text="Price").grid(row=1, column=0, sticky="w", pady=2)
        ttk.Entry(self.frm, textvariable=self.v_price, width=14).grid(row=1, column=1, sticky="w")
        ttk.Label(self.frm, text="Pricing").grid(row=2, column=0, sticky="w", pady=2)
        ttk.Combobox(self.frm, textvariable=self.v_mode, values=list(_MODE_CHOICES),
                     width=12, state="readonly").grid(row=2, column=1, sticky="w")
        self._buttons(3)

    def _ok(self):
        """Validate and close"""
        price = self.v_price.get().strip()
        if price and not is_number(price):
            messagebox.showerror("Invalid price", "Price must be a number.")
            return
        self.result = (
            self.v_description.get().strip(),
            price,
            _MODE_CHOICES.get(self.v_mode.get()),
        )
        self.destroy()


class PersonDialog(_EditDialog):
    """Edit name and manual amount of a person"""

    def __init__(self, master, person: Person, amount_editable: bool):
        super().__init__(master, "Edit Person")
        self.result: Optional[Tuple[str, str]] = None

        self.v_name = tk.StringVar(value=person.name)
        self.v_amount = tk.StringVar(value=person.amount)

        ttk.Label(self.frm, text="Name").grid(row=0, column=0, sticky="w")
        ttk.Entry(self.frm, textvariable=self.v_name, width=24).grid(row=0, column=1, sticky="w")
        ttk.Label(self.frm, text="Amount").grid(row=1, column=0, sticky="w", pady=2)
        ttk.Entry(self.frm, textvariable=self.v_amount, width=14,
                  state="normal" if amount_editable else "disabled").grid(row=1, column=1, sticky="w")
        self._buttons(2)

    def _ok(self):
        """Validate and close"""
        amount = self.v_amount.get().strip()
        if amount and not is_number(amount):
            messagebox.showerror("Invalid amount", "Amount must be a number.")
            return
        self.result = (self.v_name.get().strip(), amount)
        self.destroy()

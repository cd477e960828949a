"""
SplitIt GUI
- Split a bill between people: enter a total or itemise it, choose who had what.
- Settle up afterwards: pick who paid and tick people off as they pay back.
- Export the breakdown to Excel.

Run:
  python split_it_gui.py

Dependencies:
  pip install openpyxl
(Tkinter ships with most Python distributions; on some Linux you may need: sudo apt-get install python3-tk)

Set SPLITIT_LOG_LEVEL=DEBUG to see ignored actions in the log.
"""
from __future__ import annotations
import logging
import os

try:
    import tkinter as tk
except ModuleNotFoundError:
    tk = None


def main():
    """Main entry point for the application"""
    logging.basicConfig(
        level=os.environ.get("SPLITIT_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if tk is None:
        raise RuntimeError(
            'tkinter is not available. Install it (e.g., on Ubuntu: sudo apt-get install python3-tk) '
            'and re-run to use the GUI.'
        )

    from main_app import SplitItApp

    root = tk.Tk()
    app = SplitItApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()

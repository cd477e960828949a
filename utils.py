"""
Utility functions for SplitIt application
"""
from __future__ import annotations
import math
import os
import re
import uuid

# leading decimal number, the part of "12,50" or "10abc" that counts
_NUMBER_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def safe_float(x: str, default: float = 0.0) -> float:
    """
    Read the number a user typed. Like a browser's parseFloat, only the
    leading numeric part counts: "12,50" is 12 and "10abc" is 10. Text with
    no leading number gives default.
    """
    if isinstance(x, (int, float)):
        v = float(x)
    elif isinstance(x, str):
        m = _NUMBER_PREFIX.match(x)
        if m is None:
            return default
        v = float(m.group(1))
    else:
        return default
    # "1e999" overflows to inf
    if not math.isfinite(v):
        return default
    return v


def is_number(x: str) -> bool:
    """True when the whole of x (ignoring outer spaces) is a finite number"""
    m = _NUMBER_PREFIX.match(x)
    return m is not None and m.end() == len(x.rstrip()) and math.isfinite(float(m.group(1)))


def new_id() -> str:
    """Generate a fresh entity id"""
    return str(uuid.uuid4())


def app_dir() -> str:
    """
    Get application data directory: ~/.splitit, or $SPLITIT_HOME if set.
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("SPLITIT_HOME") or os.path.join(os.path.expanduser("~"), ".splitit")
    os.makedirs(path, exist_ok=True)
    return path

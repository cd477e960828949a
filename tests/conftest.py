from pathlib import Path
import sys

import pytest

# project root on the import path (flat layout, no package)
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import Person, SplitState  # noqa: E402


@pytest.fixture
def four_people():
    """Rus, Don, Art, Faz with fixed ids p1..p4"""
    return SplitState(
        people=tuple(Person(f"p{i}", name=n) for i, n in enumerate(["Rus", "Don", "Art", "Faz"], start=1)),
    )

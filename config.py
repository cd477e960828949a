"""
Configuration loading for SplitIt

Settings come from small JSON files in the app data dir:
  people.json    {"people": ["Rus", "Don"]}
  settings.json  {"currency": "EUR", "pricing_mode": "each", "locale": "de_DE"}
"""
from __future__ import annotations
import json
import locale
import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from models import Person, PricingMode, SplitState
from currency import DEFAULT_CURRENCY, detect_currency
from utils import app_dir, new_id

logger = logging.getLogger(__name__)

SAMPLE_PEOPLE = ["Rus", "Don", "Art", "Faz"]


@dataclass
class Settings:
    """User preferences"""
    currency: str = DEFAULT_CURRENCY
    pricing_mode: PricingMode = PricingMode.TOTAL


def _read_json(path: str) -> dict:
    """Read a JSON object; missing or broken files give {}"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as ex:
        logger.warning("Ignoring unreadable config file %s: %s", path, ex)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", path)
        return {}
    return data


def load_people(path: str) -> List[str]:
    """Load people list from JSON file"""
    data = _read_json(path)
    return [str(n) for n in data.get("people", []) if str(n).strip()]


def system_locale() -> Optional[str]:
    """Locale tag of the environment, e.g. en_GB.UTF-8"""
    for var in ("LC_ALL", "LC_MONETARY", "LANG"):
        tag = os.environ.get(var)
        if tag and tag not in ("C", "POSIX"):
            return tag
    return locale.getlocale()[0]


def load_settings(path: str) -> Settings:
    """Load settings from JSON file, detecting the currency if none is set"""
    data = _read_json(path)
    currency = data.get("currency")
    if not currency:
        currency = detect_currency(data.get("locale") or system_locale())
    try:
        pricing_mode = PricingMode(data.get("pricing_mode", PricingMode.TOTAL.value))
    except ValueError:
        logger.warning("Unknown pricing_mode %r in %s, using total", data.get("pricing_mode"), path)
        pricing_mode = PricingMode.TOTAL
    return Settings(currency=str(currency).upper(), pricing_mode=pricing_mode)


def get_default_state(base: Optional[str] = None) -> SplitState:
    """Create the initial state from the configured people and settings"""
    base = base or app_dir()
    names = load_people(os.path.join(base, "people.json"))
    settings = load_settings(os.path.join(base, "settings.json"))

    if not names:
        names = list(SAMPLE_PEOPLE)

    return SplitState(
        people=tuple(Person(new_id(), name=n) for n in names),
        pricing_mode=settings.pricing_mode,
        currency=settings.currency,
    )

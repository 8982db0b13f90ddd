from __future__ import annotations

import math
import re
from typing import Any

_NON_PRICE_CHARS = re.compile(r"[^0-9.\-]")
_UNIT_MULTIPLIERS = {"K": 1e3, "M": 1e6, "B": 1e9}


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def parse_price(value: Any) -> float:
    """Parse a price-like value, keeping only digits, '.' and '-'. Never raises."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return _finite_or_zero(float(value))

    cleaned = _NON_PRICE_CHARS.sub("", str(value))
    if not cleaned:
        return 0.0
    try:
        return _finite_or_zero(float(cleaned))
    except ValueError:
        return 0.0


def parse_volume(value: Any) -> float:
    """Parse a volume/value figure such as '1,250K' or '3.2m'. Never raises."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return _finite_or_zero(float(value))

    text = str(value).replace(",", "").strip()
    multiplier = 1.0
    if text and text[-1].upper() in _UNIT_MULTIPLIERS:
        multiplier = _UNIT_MULTIPLIERS[text[-1].upper()]
        text = text[:-1].strip()

    try:
        return _finite_or_zero(float(text) * multiplier)
    except ValueError:
        return 0.0

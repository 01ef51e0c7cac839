"""
GBP price parsing for menu cards.
"""

from __future__ import annotations

import re

_PRICE_RE = re.compile(r"£(\d+(?:\.\d+)?)")


def extract_price(text: str) -> float:
    """Return the first ``£`` amount in *text*, or ``0.0`` when there is none."""
    match = _PRICE_RE.search(text)
    return float(match.group(1)) if match else 0.0


def is_valid_price_format(text: str) -> bool:
    """Whether *text* contains a ``£`` amount such as ``£1.25`` or ``£3``."""
    return _PRICE_RE.search(text) is not None


def is_within_range(price: float, minimum: float, maximum: float) -> bool:
    return minimum <= price <= maximum

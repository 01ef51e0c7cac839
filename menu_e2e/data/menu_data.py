"""
Static expectations about the menu shared across suites.
"""

from __future__ import annotations

from menu_e2e.browser.device_configs import VIEWPORTS

CATEGORIES: tuple[str, ...] = (
    "All",
    "Breakfast",
    "Savouries & Bakes",
    "Drinks & Snacks",
    "Sandwiches & Salads",
    "Sweet Treats",
    "Hot Food",
)

VALID_SEARCH_TERMS: tuple[str, ...] = ("sausage roll", "coffee", "sandwich", "pizza")
INVALID_SEARCH_TERMS: tuple[str, ...] = ("xyznonexistent", "!@#$%", "")
BREAKFAST_SEARCH_TERMS: tuple[str, ...] = ("bacon", "egg", "hash brown", "breakfast roll")

# GBP bounds for a single menu item.
MIN_PRICE = 0.5
MAX_PRICE = 15.0

# Milliseconds.
PAGE_LOAD_THRESHOLD_MS = 5000
LCP_THRESHOLD_MS = 2500
FCP_THRESHOLD_MS = 1800

NUTRITION_FIELDS: tuple[str, ...] = ("calories", "fat", "saturates", "sugar", "salt", "protein")
ALLERGENS: tuple[str, ...] = ("gluten", "dairy", "eggs", "nuts", "soya", "sesame")

__all__ = [
    "ALLERGENS",
    "BREAKFAST_SEARCH_TERMS",
    "CATEGORIES",
    "FCP_THRESHOLD_MS",
    "INVALID_SEARCH_TERMS",
    "LCP_THRESHOLD_MS",
    "MAX_PRICE",
    "MIN_PRICE",
    "NUTRITION_FIELDS",
    "PAGE_LOAD_THRESHOLD_MS",
    "VALID_SEARCH_TERMS",
    "VIEWPORTS",
]

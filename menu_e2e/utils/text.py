"""
Text comparison helpers.
"""

from __future__ import annotations


def levenshtein(a: str, b: str) -> int:
    """Edit distance between *a* and *b* (insert, delete, substitute)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def normalise(text: str | None) -> str:
    """Collapse whitespace and lower-case, treating ``None`` as empty."""
    return " ".join((text or "").split()).lower()

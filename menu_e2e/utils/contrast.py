"""
WCAG colour-contrast calculations for computed CSS colours.

Colours are the ``rgb(...)``/``rgba(...)`` strings returned by
``getComputedStyle``; the alpha channel is ignored.
"""

from __future__ import annotations

import re

WCAG_AA_NORMAL_TEXT = 4.5

_CHANNEL_RE = re.compile(r"\d+(?:\.\d+)?")


def parse_rgb(colour: str) -> tuple[float, float, float]:
    """Extract the red, green and blue channels; unparseable input reads as black."""
    channels = _CHANNEL_RE.findall(colour)
    if len(channels) < 3:
        return (0.0, 0.0, 0.0)
    r, g, b = (float(c) for c in channels[:3])
    return (r, g, b)


def _linear(channel: float) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(colour: str) -> float:
    r, g, b = parse_rgb(colour)
    return 0.2126 * _linear(r) + 0.7152 * _linear(g) + 0.0722 * _linear(b)


def contrast_ratio(foreground: str, background: str) -> float:
    """Contrast ratio between 1.0 (identical) and 21.0 (black on white)."""
    lighter, darker = sorted((relative_luminance(foreground), relative_luminance(background)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


def has_sufficient_contrast(foreground: str, background: str, minimum: float = WCAG_AA_NORMAL_TEXT) -> bool:
    return contrast_ratio(foreground, background) >= minimum

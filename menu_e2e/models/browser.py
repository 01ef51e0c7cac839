"""Pydantic models for device profiles, viewports and layout boxes."""

from __future__ import annotations

from typing import Literal

import pydantic

BrowserEngine = Literal["chromium", "firefox", "webkit"]

DeviceProfileName = Literal[
    "desktop-chrome",
    "desktop-firefox",
    "desktop-safari",
    "mobile-chrome",
    "mobile-safari",
    "tablet",
]


class ViewportSize(pydantic.BaseModel):
    """Viewport dimensions for browser emulation."""

    width: int
    height: int


class NamedViewport(ViewportSize):
    """A viewport preset used by the responsive-design suite."""

    name: str


class DeviceConfig(pydantic.BaseModel):
    """Device configuration for one entry of the browser matrix."""

    engine: BrowserEngine
    user_agent: str
    viewport: ViewportSize
    device_scale_factor: float
    is_mobile: bool
    has_touch: bool


class BoundingBox(pydantic.BaseModel):
    """Element bounding box as reported by ``Locator.bounding_box()``."""

    x: float
    y: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        """Return ``True`` if the point lies inside (or on) the box."""
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    def within(self, viewport: ViewportSize) -> bool:
        """Return ``True`` if the whole box fits inside *viewport*."""
        return (
            self.x >= 0
            and self.y >= 0
            and self.x + self.width <= viewport.width
            and self.y + self.height <= viewport.height
        )


class NavigationResult(pydantic.BaseModel):
    """Result of a navigation attempt."""

    success: bool
    status_code: int | None = None
    status_text: str | None = None
    final_url: str | None = None
    error_message: str | None = None

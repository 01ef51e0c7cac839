"""
Device configuration profiles for browser emulation.
Defines engines, user agents, viewports, and capabilities for the
browser matrix every suite runs against.
"""

from __future__ import annotations

from menu_e2e.models.browser import DeviceConfig, DeviceProfileName, NamedViewport, ViewportSize

DEVICE_CONFIGS: dict[DeviceProfileName, DeviceConfig] = {
    "desktop-chrome": DeviceConfig(
        engine="chromium",
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
        viewport=ViewportSize(width=1280, height=720),
        device_scale_factor=1,
        is_mobile=False,
        has_touch=False,
    ),
    "desktop-firefox": DeviceConfig(
        engine="firefox",
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0",
        viewport=ViewportSize(width=1280, height=720),
        device_scale_factor=1,
        is_mobile=False,
        has_touch=False,
    ),
    "desktop-safari": DeviceConfig(
        engine="webkit",
        user_agent="Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15",
        viewport=ViewportSize(width=1280, height=720),
        device_scale_factor=1,
        is_mobile=False,
        has_touch=False,
    ),
    "mobile-chrome": DeviceConfig(
        engine="chromium",
        user_agent="Mozilla/5.0 (Linux; Android 11; Pixel 5) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Mobile Safari/537.36",
        viewport=ViewportSize(width=393, height=851),
        device_scale_factor=2.75,
        is_mobile=True,
        has_touch=True,
    ),
    "mobile-safari": DeviceConfig(
        engine="webkit",
        user_agent="Mozilla/5.0 (iPhone; CPU iPhone OS 14_4 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0.3 Mobile/15E148 Safari/604.1",
        viewport=ViewportSize(width=390, height=844),
        device_scale_factor=3,
        is_mobile=True,
        has_touch=True,
    ),
    "tablet": DeviceConfig(
        engine="webkit",
        user_agent="Mozilla/5.0 (iPad; CPU OS 14_4 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0.3 Mobile/15E148 Safari/604.1",
        viewport=ViewportSize(width=1024, height=1366),
        device_scale_factor=2,
        is_mobile=True,
        has_touch=True,
    ),
}

# Viewport presets for the responsive-design suite.
VIEWPORTS: dict[str, NamedViewport] = {
    "mobile": NamedViewport(name="Mobile", width=375, height=667),
    "tablet": NamedViewport(name="Tablet", width=768, height=1024),
    "desktop": NamedViewport(name="Desktop", width=1200, height=800),
    "large-desktop": NamedViewport(name="Large Desktop", width=1920, height=1080),
}


def get_device_config(name: str) -> DeviceConfig:
    """Look up a device profile, raising ``ValueError`` for unknown names."""
    if name not in DEVICE_CONFIGS:
        raise ValueError(f"Unknown device profile {name!r}. Valid profiles: {', '.join(DEVICE_CONFIGS)}")
    return DEVICE_CONFIGS[name]  # type: ignore[index]

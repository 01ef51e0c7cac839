"""
In-page measurements: load timing, paint metrics, computed styles,
image decoding and element geometry.
"""

from __future__ import annotations

import pathlib
import time

from playwright import async_api

from menu_e2e.consent import gate
from menu_e2e.models import browser
from menu_e2e.utils import errors, logger

log = logger.create_logger("Metrics")

SCREENSHOT_DIR = pathlib.Path("test-results") / "screenshots"

_LCP_SCRIPT = """
(timeoutMs) => new Promise((resolve) => {
    let latest = 0;
    try {
        new PerformanceObserver((list) => {
            const entries = list.getEntries();
            if (entries.length) {
                latest = entries[entries.length - 1].startTime;
            }
        }).observe({ type: 'largest-contentful-paint', buffered: true });
    } catch (e) {
        resolve(0);
        return;
    }
    setTimeout(() => resolve(latest), timeoutMs);
})
"""

_FCP_SCRIPT = """
() => {
    const entry = performance.getEntriesByName('first-contentful-paint')[0];
    return entry ? entry.startTime : 0;
}
"""

_STYLE_WITH_FALLBACK_SCRIPT = """
(el, prop) => {
    const transparent = 'rgba(0, 0, 0, 0)';
    const direct = window.getComputedStyle(el).getPropertyValue(prop);
    const isColour = prop === 'color' || prop === 'background-color';
    if (!isColour || (direct && direct !== transparent)) {
        return direct;
    }
    let current = el;
    while (current.parentElement) {
        current = current.parentElement;
        const value = window.getComputedStyle(current).getPropertyValue(prop);
        if (value && value !== transparent) {
            return value;
        }
    }
    return prop === 'color' ? 'rgb(0, 0, 0)' : 'rgb(255, 255, 255)';
}
"""

_DEFAULT_COLOURS = {"color": "rgb(0, 0, 0)", "background-color": "rgb(255, 255, 255)"}


async def measure_page_load_time(page: async_api.Page, url: str, gate_timeout_ms: int = gate.DEFAULT_TIMEOUT_MS) -> float:
    """Milliseconds from ``goto`` until consent is handled and the network is idle."""
    started = time.monotonic()
    await page.goto(url)
    await gate.ensure_ready(page, gate_timeout_ms)
    await page.wait_for_load_state("networkidle")
    elapsed = (time.monotonic() - started) * 1000
    log.info("Page load measured", {"url": url, "ms": int(elapsed)})
    return elapsed


async def largest_contentful_paint(page: async_api.Page, observe_ms: int = 3000) -> float:
    """Return the latest LCP entry (ms) observed within *observe_ms*; 0 if unsupported."""
    return float(await page.evaluate(_LCP_SCRIPT, observe_ms))


async def first_contentful_paint(page: async_api.Page) -> float:
    """Return the FCP timestamp in ms, or 0 when the browser did not report one."""
    return float(await page.evaluate(_FCP_SCRIPT))


async def get_computed_style(element: async_api.Locator, prop: str, timeout_ms: int = 5000) -> str:
    """Read a computed CSS property.

    Transparent colours are resolved from the nearest ancestor that
    sets one.  On failure colour properties fall back to black text on
    white and anything else to ``""``.
    """
    try:
        await element.wait_for(state="attached", timeout=min(timeout_ms, 2000))
        return str(await element.evaluate(_STYLE_WITH_FALLBACK_SCRIPT, prop))
    except Exception as exc:
        log.warn("Failed to read computed style", {"property": prop, "error": errors.get_error_message(exc)})
        return _DEFAULT_COLOURS.get(prop, "")


async def validate_image_loading(image: async_api.Locator) -> bool:
    """Return ``True`` if the image has a ``src`` and decoded to a non-zero width."""
    src = await image.get_attribute("src")
    if not src:
        return False
    natural_width = await image.evaluate("(img) => img.naturalWidth")
    return bool(natural_width and natural_width > 0)


async def is_element_in_viewport(page: async_api.Page, element: async_api.Locator) -> bool:
    """Return ``True`` if the element's whole box lies inside the viewport."""
    raw_box = await element.bounding_box()
    size = page.viewport_size
    if not raw_box or not size:
        return False
    return browser.BoundingBox(**raw_box).within(browser.ViewportSize(**size))


async def scroll_offset(page: async_api.Page) -> float:
    """Current vertical scroll position in CSS pixels."""
    return float(await page.evaluate("() => window.scrollY"))


async def take_full_page_screenshot(page: async_api.Page, name: str, directory: pathlib.Path = SCREENSHOT_DIR) -> pathlib.Path:
    """Save a full-page PNG under *directory* and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.png"
    await page.screenshot(path=str(path), full_page=True)
    log.debug("Screenshot saved", {"path": str(path)})
    return path

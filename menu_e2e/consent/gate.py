"""
Consent gate: best-effort removal of cookie-consent overlays.

Every scenario calls :func:`ensure_ready` after navigation.  The gate
walks a fixed precedence of dismissal actions and never raises; the
returned :class:`~menu_e2e.models.consent.GateResult` says what
happened so callers can log it.

Precedence
~~~~~~~~~~
1. Detect a visible banner (fast path: nothing to do).
2. Click a reject control and wait for the banner to hide.
3. Click an accept control (only when no reject control works).
4. Escape key, click outside, generic close button.
5. Remove banner elements from the DOM by script.

Afterwards every element stacked above the z-index threshold is
hidden and made click-through, and the network is given the rest of
the budget to go idle.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence

from playwright import async_api

from menu_e2e.consent import constants, strategies
from menu_e2e.models import browser, consent
from menu_e2e.utils import errors, logger

log = logger.create_logger("Consent-Gate")

DEFAULT_TIMEOUT_MS = 10_000

_FALLBACK_VIEWPORT = browser.ViewportSize(width=1280, height=720)

# Margin (px) kept from the viewport edge when clicking outside a banner.
_OUTSIDE_MARGIN = 10

_FORCE_REMOVE_SCRIPT = """
(selectors) => {
    let removed = 0;
    for (const selector of selectors) {
        let nodes;
        try {
            nodes = document.querySelectorAll(selector);
        } catch (e) {
            continue;
        }
        nodes.forEach((el) => {
            if (el instanceof HTMLElement) {
                el.style.display = 'none';
            }
            el.remove();
            removed++;
        });
    }
    return removed;
}
"""

_OVERLAY_SWEEP_SCRIPT = """
(threshold) => {
    let neutralized = 0;
    for (const el of document.querySelectorAll('body *')) {
        if (!(el instanceof HTMLElement)) continue;
        const style = window.getComputedStyle(el);
        const z = parseInt(style.zIndex, 10);
        if (Number.isNaN(z) || z <= threshold) continue;
        if (style.display === 'none' && style.pointerEvents === 'none') continue;
        el.style.display = 'none';
        el.style.pointerEvents = 'none';
        neutralized++;
    }
    return neutralized;
}
"""


class _Budget:
    """Wall-clock budget shared by all steps of one gate run."""

    def __init__(self, total_ms: int) -> None:
        self._deadline = time.monotonic() + max(total_ms, 0) / 1000

    @property
    def remaining_ms(self) -> int:
        return max(int((self._deadline - time.monotonic()) * 1000), 0)

    @property
    def expired(self) -> bool:
        return self.remaining_ms <= 0

    def clip(self, cap_ms: int) -> int:
        """Return *cap_ms* limited to what is left, never below 1 ms.

        Playwright treats ``timeout=0`` as "wait forever".
        """
        return max(min(cap_ms, self.remaining_ms), 1)


def outside_point(
    box: browser.BoundingBox | None,
    viewport: browser.ViewportSize,
    margin: int = _OUTSIDE_MARGIN,
) -> tuple[float, float] | None:
    """Pick a viewport point that lies outside *box*.

    Tries the four corners, then the top centre.  Returns ``None``
    when the box is unknown or covers every candidate.
    """
    if box is None:
        return None
    w, h = viewport.width, viewport.height
    candidates = (
        (margin, margin),
        (w - margin, margin),
        (margin, h - margin),
        (w - margin, h - margin),
        (w / 2, margin),
    )
    for x, y in candidates:
        if not box.contains(x, y):
            return (x, y)
    return None


class ConsentGate:
    """Best-effort consent dismissal with a fixed action precedence.

    The strategy lists are ordinary data so individual suites can
    narrow or extend them; the defaults come from
    :mod:`menu_e2e.consent.constants`.
    """

    def __init__(
        self,
        *,
        banner_strategies: Sequence[strategies.LocatorStrategy] | None = None,
        reject_strategies: Sequence[strategies.LocatorStrategy] | None = None,
        accept_strategies: Sequence[strategies.LocatorStrategy] | None = None,
        close_strategies: Sequence[strategies.LocatorStrategy] | None = None,
        force_remove_selectors: Sequence[str] = constants.BANNER_SELECTORS,
        overlay_z_index_threshold: int = constants.OVERLAY_Z_INDEX_THRESHOLD,
        timeouts: consent.GateTimeouts | None = None,
    ) -> None:
        self.banner_strategies = tuple(banner_strategies or strategies.from_selectors(constants.BANNER_SELECTORS))
        self.reject_strategies = tuple(
            reject_strategies
            or (
                *strategies.from_selectors(constants.REJECT_SELECTORS),
                strategies.LocatorStrategy.role("button", constants.REJECT_LABEL_RE),
            )
        )
        self.accept_strategies = tuple(
            accept_strategies
            or (
                *strategies.from_selectors(constants.ACCEPT_SELECTORS),
                strategies.LocatorStrategy.role("button", constants.ACCEPT_LABEL_RE),
            )
        )
        self.close_strategies = tuple(close_strategies or strategies.from_selectors(constants.CLOSE_SELECTORS))
        self.force_remove_selectors = list(force_remove_selectors)
        self.overlay_z_index_threshold = overlay_z_index_threshold
        self.timeouts = timeouts or consent.GateTimeouts()

    # ==========================================================================
    # Public API
    # ==========================================================================

    async def ensure_ready(
        self,
        page: async_api.Page,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        *,
        settle_network: bool = True,
    ) -> consent.GateResult:
        """Make *page* interactable; never raises."""
        started = time.monotonic()
        budget = _Budget(timeout_ms)

        try:
            result = await self._resolve_banner(page, budget)
        except Exception as exc:
            log.warn("Consent handling failed, continuing", {"error": errors.get_error_message(exc)})
            removed = await self._force_remove(page)
            result = consent.GateResult(
                outcome="failed",
                error=errors.get_error_message(exc),
                removed_elements=removed,
            )

        neutralized = await self._sweep_overlays(page)
        network_idle = await self._settle(page, budget) if settle_network else False

        result = result.model_copy(
            update={
                "neutralized_overlays": neutralized,
                "network_idle": network_idle,
                "duration_ms": (time.monotonic() - started) * 1000,
            }
        )
        log.info(
            "Consent gate finished",
            {
                "outcome": result.outcome,
                "action": result.action,
                "selector": result.selector,
                "overlays": neutralized,
                "networkIdle": network_idle,
                "ms": int(result.duration_ms),
            },
        )
        return result

    async def detect_banner(self, page: async_api.Page, timeout_ms: int = 0) -> strategies.StrategyMatch | None:
        """Return the visible banner, polling for up to *timeout_ms*."""
        return await strategies.find_first_visible(
            self.banner_strategies,
            strategies.consent_scopes(page),
            timeout_ms=timeout_ms,
            poll_interval_ms=self.timeouts.poll_interval,
        )

    # ==========================================================================
    # Steps
    # ==========================================================================

    async def _resolve_banner(self, page: async_api.Page, budget: _Budget) -> consent.GateResult:
        detected = await self.detect_banner(page, budget.clip(self.timeouts.detect))
        if detected is None:
            log.debug("No consent banner detected")
            return consent.GateResult(outcome="clear")

        banner = detected.locator
        banner_label = detected.strategy.label
        log.info("Consent banner detected", {"selector": banner_label})

        label = await self._click_control(page, banner, self.reject_strategies, budget)
        if label:
            log.success("Consent rejected", {"selector": label})
            return consent.GateResult(outcome="rejected", action="reject", selector=label, banner_selector=banner_label)

        log.info("No usable reject control, falling back to accept")
        label = await self._click_control(page, banner, self.accept_strategies, budget)
        if label:
            log.success("Consent accepted as fallback", {"selector": label})
            return consent.GateResult(outcome="accepted", action="accept", selector=label, banner_selector=banner_label)

        return await self._alternative_dismissal(page, banner, banner_label, budget)

    async def _click_control(
        self,
        page: async_api.Page,
        banner: async_api.Locator,
        candidates: Sequence[strategies.LocatorStrategy],
        budget: _Budget,
    ) -> str | None:
        """Click controls in priority order until one hides the banner.

        Searches inside the banner first, then the page and any
        consent-manager iframes.
        Returns the label of the strategy that worked.
        """
        tried: set[str] = set()
        while not budget.expired:
            remaining = [s for s in candidates if s.label not in tried]
            if not remaining:
                return None
            match = await strategies.find_first_visible(
                remaining,
                [banner, *strategies.consent_scopes(page)],
                timeout_ms=budget.clip(self.timeouts.control_visible),
                poll_interval_ms=self.timeouts.poll_interval,
            )
            if match is None:
                return None
            tried.add(match.strategy.label)
            try:
                await match.locator.click(timeout=budget.clip(self.timeouts.click))
                await banner.wait_for(state="hidden", timeout=budget.clip(self.timeouts.hidden))
            except Exception as exc:
                log.debug(
                    "Control did not dismiss banner",
                    {"selector": match.strategy.label, "error": errors.get_error_message(exc)},
                )
                continue
            return match.strategy.label
        log.warn("Consent gate budget exhausted while clicking controls")
        return None

    async def _alternative_dismissal(
        self,
        page: async_api.Page,
        banner: async_api.Locator,
        banner_label: str,
        budget: _Budget,
    ) -> consent.GateResult:
        if not budget.expired:
            log.debug("Trying Escape key")
            if await self._attempt(banner, lambda: page.keyboard.press("Escape"), budget):
                return self._dismissed("escape-key", "Escape", banner_label)

        if not budget.expired:
            point = await self._outside_point(page, banner)
            if point is not None:
                log.debug("Trying click outside banner", {"x": point[0], "y": point[1]})
                if await self._attempt(banner, lambda: page.mouse.click(point[0], point[1]), budget):
                    return self._dismissed("click-outside", f"mouse@{int(point[0])},{int(point[1])}", banner_label)

        tried: set[str] = set()
        while not budget.expired:
            remaining = [s for s in self.close_strategies if s.label not in tried]
            if not remaining:
                break
            match = await strategies.find_first_visible(
                remaining,
                [banner],
                timeout_ms=budget.clip(self.timeouts.close_visible),
                poll_interval_ms=self.timeouts.poll_interval,
            )
            if match is None:
                break
            tried.add(match.strategy.label)
            close_button = match.locator
            if await self._attempt(banner, lambda: close_button.click(timeout=budget.clip(self.timeouts.click)), budget):
                return self._dismissed("close-button", match.strategy.label, banner_label)

        removed = await self._force_remove(page)
        log.warn(
            "Consent banner force-removed; no consent choice was recorded",
            {"removed": removed, "banner": banner_label},
        )
        return consent.GateResult(
            outcome="force-removed",
            action="force-remove",
            banner_selector=banner_label,
            removed_elements=removed,
        )

    @staticmethod
    def _dismissed(action: consent.DismissalAction, selector: str, banner_label: str) -> consent.GateResult:
        log.success("Consent banner dismissed", {"action": action})
        return consent.GateResult(outcome="dismissed", action=action, selector=selector, banner_selector=banner_label)

    async def _attempt(
        self,
        banner: async_api.Locator,
        action: Callable[[], Awaitable[None]],
        budget: _Budget,
    ) -> bool:
        """Run *action*, let the page react, and report whether the banner is gone."""
        try:
            await action()
            await asyncio.sleep(budget.clip(self.timeouts.settle) / 1000)
            return not await banner.is_visible()
        except Exception as exc:
            log.debug("Dismissal attempt failed", {"error": errors.get_error_message(exc)})
            return False

    async def _outside_point(self, page: async_api.Page, banner: async_api.Locator) -> tuple[float, float] | None:
        try:
            raw_box = await banner.bounding_box()
        except Exception as exc:
            log.debug("Could not measure banner", {"error": errors.get_error_message(exc)})
            return None
        box = browser.BoundingBox(**raw_box) if raw_box else None
        size = page.viewport_size
        viewport = browser.ViewportSize(**size) if size else _FALLBACK_VIEWPORT
        return outside_point(box, viewport)

    async def _force_remove(self, page: async_api.Page) -> int:
        """Remove banner containers from the page and every consent iframe."""
        removed = 0
        for scope in strategies.consent_scopes(page):
            try:
                removed += int(await scope.evaluate(_FORCE_REMOVE_SCRIPT, self.force_remove_selectors))  # type: ignore[union-attr]
            except Exception as exc:
                log.warn("Forced banner removal failed", {"error": errors.get_error_message(exc)})
        return removed

    async def _sweep_overlays(self, page: async_api.Page) -> int:
        """Hide and disable every element stacked above the threshold."""
        try:
            count = int(await page.evaluate(_OVERLAY_SWEEP_SCRIPT, self.overlay_z_index_threshold))
        except Exception as exc:
            log.debug("Overlay sweep failed", {"error": errors.get_error_message(exc)})
            return 0
        if count:
            log.info("Neutralized blocking overlays", {"count": count})
        return count

    async def _settle(self, page: async_api.Page, budget: _Budget) -> bool:
        try:
            await page.wait_for_load_state("networkidle", timeout=budget.clip(budget.remaining_ms))
            return True
        except Exception:
            log.debug("Network did not settle within the gate budget")
            return False


_default_gate = ConsentGate()


async def ensure_ready(
    page: async_api.Page,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    settle_network: bool = True,
) -> consent.GateResult:
    """Run the default :class:`ConsentGate` against *page*."""
    return await _default_gate.ensure_ready(page, timeout_ms, settle_network=settle_network)

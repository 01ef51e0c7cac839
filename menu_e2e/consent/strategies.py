"""
Locator strategies and the shared "find first visible match" search.

A strategy knows how to resolve a locator inside a scope (the page,
a frame, or another locator such as the detected banner).  Callers
hand an ordered list of strategies to :func:`find_first_visible`,
which polls until one yields a visible element or the sub-timeout
runs out.
"""

from __future__ import annotations

import asyncio
import dataclasses
import re
import time
from collections.abc import Callable, Iterable, Sequence

from playwright import async_api

from menu_e2e.consent import constants
from menu_e2e.utils import errors, logger

log = logger.create_logger("Consent-Strategies")

Scope = async_api.Page | async_api.Frame | async_api.Locator


@dataclasses.dataclass(frozen=True)
class LocatorStrategy:
    """One way of locating a control whose exact markup is unknown."""

    label: str
    resolve: Callable[[Scope], async_api.Locator]

    @classmethod
    def css(cls, selector: str) -> LocatorStrategy:
        """Strategy for a Playwright selector string (CSS plus ``:has-text`` etc.)."""
        return cls(label=selector, resolve=lambda scope: scope.locator(selector))

    @classmethod
    def role(cls, role: str, name: re.Pattern[str]) -> LocatorStrategy:
        """Strategy matching an ARIA role by accessible name."""
        return cls(
            label=f"role={role}[name=/{name.pattern}/]",
            resolve=lambda scope: scope.get_by_role(role, name=name),  # type: ignore[arg-type]
        )


@dataclasses.dataclass(frozen=True)
class StrategyMatch:
    """A strategy together with the visible locator it produced."""

    strategy: LocatorStrategy
    locator: async_api.Locator


def consent_scopes(page: async_api.Page) -> list[Scope]:
    """The page followed by any consent-manager iframes it currently holds."""
    try:
        main_frame = page.main_frame
        frames = [f for f in page.frames if constants.is_consent_frame(f, main_frame)]
    except Exception as exc:
        log.debug("Could not list frames", {"error": errors.get_error_message(exc)})
        return [page]
    if frames:
        log.debug("Consent frames found", {"urls": [f.url for f in frames]})
    return [page, *frames]


def from_selectors(selectors: Iterable[str]) -> tuple[LocatorStrategy, ...]:
    """Build CSS strategies, preserving order."""
    return tuple(LocatorStrategy.css(s) for s in selectors)


async def _visible_in(strategy: LocatorStrategy, scope: Scope) -> async_api.Locator | None:
    """Return the strategy's first match in *scope* if it is visible right now."""
    try:
        candidate = strategy.resolve(scope).first
        if await candidate.is_visible():
            return candidate
    except Exception as exc:
        log.debug("Locator lookup failed", {"strategy": strategy.label, "error": errors.get_error_message(exc)})
    return None


async def find_first_visible(
    strategies: Sequence[LocatorStrategy],
    scopes: Sequence[Scope],
    *,
    timeout_ms: int,
    poll_interval_ms: int = 250,
) -> StrategyMatch | None:
    """Return the highest-priority strategy with a visible match.

    Every sweep walks the strategies in order and, for each, the
    scopes in order, so a later strategy never wins over an earlier
    one that is visible in the same sweep.  Sweeps repeat until
    *timeout_ms* elapses; a timeout of ``0`` performs a single sweep.
    """
    deadline = time.monotonic() + max(timeout_ms, 0) / 1000
    while True:
        for strategy in strategies:
            for scope in scopes:
                locator = await _visible_in(strategy, scope)
                if locator is not None:
                    return StrategyMatch(strategy=strategy, locator=locator)

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        await asyncio.sleep(min(poll_interval_ms / 1000, remaining))

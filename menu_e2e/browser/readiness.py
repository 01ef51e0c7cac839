"""
Readiness wait: network idle, then loading indicators gone.

Unlike the consent gate this step is fatal.  A page that never
settles is a real failure and the Playwright ``TimeoutError``
propagates to the test.
"""

from __future__ import annotations

import time
from collections.abc import Sequence

from playwright import async_api

from menu_e2e.consent import constants
from menu_e2e.utils import logger

log = logger.create_logger("Readiness")

DEFAULT_TIMEOUT_MS = 10_000


async def wait_for_page_ready(
    page: async_api.Page,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    loading_selectors: Sequence[str] = constants.LOADING_SELECTORS,
) -> None:
    """Block until the network is idle and every loading indicator is hidden.

    Both phases share *timeout_ms*.  Indicators that are not in the
    DOM are skipped.
    """
    deadline = time.monotonic() + timeout_ms / 1000
    log.start_timer("page-ready")

    await page.wait_for_load_state("networkidle", timeout=timeout_ms)

    for selector in loading_selectors:
        for indicator in await page.locator(selector).all():
            remaining = max(int((deadline - time.monotonic()) * 1000), 1)
            await indicator.wait_for(state="hidden", timeout=remaining)

    log.end_timer("page-ready", "Page ready")

"""
Route interception helpers for the error-handling and performance suites.

Each helper installs a ``page.route`` handler; call
``page.unroute_all()`` (or let the context close) to undo it.
"""

from __future__ import annotations

import asyncio
import json

from playwright import async_api

from menu_e2e.utils import logger

log = logger.create_logger("Network")

ALL_REQUESTS = "**/*"
IMAGE_REQUESTS = "**/*.{png,jpg,jpeg,gif,webp,svg}"

# Not a valid image in any format the browser decodes.
_CORRUPT_IMAGE_BYTES = b"corrupted-image-data"


async def simulate_slow_network(page: async_api.Page, delay_ms: int = 500, pattern: str = ALL_REQUESTS) -> None:
    """Delay every matching request by *delay_ms* before letting it through."""

    async def _delay(route: async_api.Route) -> None:
        await asyncio.sleep(delay_ms / 1000)
        await route.continue_()

    await page.route(pattern, _delay)
    log.debug("Slow network enabled", {"delayMs": delay_ms, "pattern": pattern})


async def simulate_network_error(page: async_api.Page, pattern: str = ALL_REQUESTS) -> None:
    """Abort every matching request."""

    async def _abort(route: async_api.Route) -> None:
        await route.abort()

    await page.route(pattern, _abort)
    log.debug("Network failure enabled", {"pattern": pattern})


async def fulfil_json(page: async_api.Page, pattern: str, body: object, status: int = 200) -> None:
    """Answer matching requests with a fixed JSON document."""
    payload = json.dumps(body)

    async def _fulfil(route: async_api.Route) -> None:
        await route.fulfill(status=status, content_type="application/json", body=payload)

    await page.route(pattern, _fulfil)
    log.debug("JSON fulfilment enabled", {"pattern": pattern, "status": status})


async def abort_images(page: async_api.Page) -> None:
    """Fail every image request so cards render without pictures."""
    await simulate_network_error(page, IMAGE_REQUESTS)


async def corrupt_images(page: async_api.Page) -> None:
    """Serve undecodable bytes for every image request."""

    async def _corrupt(route: async_api.Route) -> None:
        await route.fulfill(status=200, content_type="image/jpeg", body=_CORRUPT_IMAGE_BYTES)

    await page.route(IMAGE_REQUESTS, _corrupt)
    log.debug("Corrupted images enabled")

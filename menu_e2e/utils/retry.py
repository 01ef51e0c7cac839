"""
Retry helpers for flaky in-page actions.
Uses exponential backoff with jitter; only transient browser errors
(timeouts, detached elements, dropped connections) are retried.
"""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

from playwright import async_api

from menu_e2e.consent import gate, preferences
from menu_e2e.utils import errors, logger

log = logger.create_logger("Retry")

T = TypeVar("T")

_TRANSIENT_MARKERS = (
    "timeout",
    "detached",
    "not attached",
    "intercepts pointer events",
    "net::err_",
    "execution context was destroyed",
)


def is_retryable_error(error: BaseException) -> bool:
    """Check if the error is a transient browser failure."""
    if isinstance(error, (async_api.TimeoutError, asyncio.TimeoutError, ConnectionError)):
        return True
    if isinstance(error, async_api.Error):
        message = str(error).lower()
        return any(marker in message for marker in _TRANSIENT_MARKERS)
    return False


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 2,
    initial_delay_ms: int = 1000,
    max_delay_ms: int = 10000,
    backoff_multiplier: float = 2.0,
    context: str | None = None,
    should_retry: Callable[[BaseException], bool] = is_retryable_error,
) -> T:
    """
    Execute an async function with automatic retry on transient failures.
    Non-retryable errors and the final failure are re-raised unchanged.
    """
    last_error: BaseException | None = None
    delay = initial_delay_ms

    for attempt in range(max_retries + 1):
        try:
            return await fn()
        except Exception as error:
            last_error = error

            if not should_retry(error):
                raise

            if attempt >= max_retries:
                log.warn(
                    "All retry attempts exhausted",
                    {"context": context, "attempts": attempt + 1, "error": errors.get_error_message(error)},
                )
                raise

            jitter = delay * 0.2 * (random.random() * 2 - 1)
            delay_with_jitter = min(round(delay + jitter), max_delay_ms)

            log.warn(
                "Retrying after transient error",
                {
                    "context": context,
                    "attempt": attempt + 1,
                    "maxRetries": max_retries,
                    "delayMs": delay_with_jitter,
                    "error": errors.get_error_message(error)[:100],
                },
            )

            await asyncio.sleep(delay_with_jitter / 1000)
            delay = min(int(delay * backoff_multiplier), max_delay_ms)

    # Should never reach here, but satisfy type checker
    raise last_error  # type: ignore[misc]


async def retry_with_consent_handling(
    page: async_api.Page,
    action: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    delay_ms: int = 1000,
    gate_timeout_ms: int = 5000,
) -> T:
    """Run *action*, clearing a consent banner that reappears before each attempt.

    Any error is retried here because a late banner typically
    surfaces as an ordinary click or assertion failure.
    """

    async def _attempt() -> T:
        if await preferences.is_banner_present(page):
            await gate.ensure_ready(page, gate_timeout_ms, settle_network=False)
        return await action()

    return await with_retry(
        _attempt,
        max_retries=max_attempts - 1,
        initial_delay_ms=delay_ms,
        backoff_multiplier=1.0,
        context="consent-retry",
        should_retry=lambda _error: True,
    )

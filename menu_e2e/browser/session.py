"""
Browser session management for isolated test runs.
Each BrowserSession instance owns its own Playwright driver, browser,
context and page, so parallel workers never share state.
"""

from __future__ import annotations

from typing import Literal

from playwright import async_api

from menu_e2e import config
from menu_e2e.browser import device_configs
from menu_e2e.models import browser
from menu_e2e.utils import errors, logger

log = logger.create_logger("BrowserSession")

_ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


class BrowserSession:
    """
    Manages an isolated browser session for one device profile.
    """

    def __init__(self, settings: config.SuiteSettings | None = None) -> None:
        """Initialise a new browser session with empty state."""
        self._settings = settings or config.get_settings()
        self._playwright: async_api.Playwright | None = None
        self._browser: async_api.Browser | None = None
        self._context: async_api.BrowserContext | None = None
        self._page: async_api.Page | None = None
        self._profile: str | None = None

    # ==========================================================================
    # State Getters
    # ==========================================================================

    @property
    def page(self) -> async_api.Page:
        """Return the active page, raising if the session is not launched."""
        if not self._page:
            raise RuntimeError("No browser session active")
        return self._page

    @property
    def context(self) -> async_api.BrowserContext:
        """Return the active browser context."""
        if not self._context:
            raise RuntimeError("No browser session active")
        return self._context

    @property
    def profile(self) -> str | None:
        """Device profile the session was launched with."""
        return self._profile

    # ==========================================================================
    # Browser Lifecycle
    # ==========================================================================

    async def launch(
        self,
        profile: str | None = None,
        *,
        headless: bool | None = None,
        storage_state: str | None = None,
    ) -> async_api.Page:
        """Launch the profile's engine and open a page in a fresh context.

        *storage_state* defaults to whatever
        :meth:`SuiteSettings.storage_state_for_context` allows.
        """
        profile = profile or self._settings.device_profile
        device_config = device_configs.get_device_config(profile)
        headless = self._settings.headless if headless is None else headless
        if storage_state is None:
            storage_state = self._settings.storage_state_for_context()

        await self.close()
        log.info("Launching browser", {"profile": profile, "engine": device_config.engine, "headless": headless})

        pw = await async_api.async_playwright().start()
        self._playwright = pw
        engine: async_api.BrowserType = getattr(pw, device_config.engine)
        self._browser = await engine.launch(headless=headless)

        context_kwargs: dict[str, object] = {
            "viewport": {"width": device_config.viewport.width, "height": device_config.viewport.height},
            "user_agent": device_config.user_agent,
            "device_scale_factor": device_config.device_scale_factor,
            "locale": "en-GB",
            "timezone_id": "Europe/London",
            "extra_http_headers": {"Accept": _ACCEPT_HEADER},
        }
        # Firefox rejects the mobile emulation flags.
        if device_config.engine != "firefox":
            context_kwargs["is_mobile"] = device_config.is_mobile
            context_kwargs["has_touch"] = device_config.has_touch
        if storage_state:
            context_kwargs["storage_state"] = storage_state
            log.debug("Reusing storage state", {"path": storage_state})

        self._context = await self._browser.new_context(**context_kwargs)  # type: ignore[arg-type]
        self._context.set_default_timeout(self._settings.action_timeout_ms)
        self._context.set_default_navigation_timeout(self._settings.navigation_timeout_ms)

        self._page = await self._context.new_page()
        self._profile = profile
        log.debug(
            "Browser launched",
            {
                "viewport": f"{device_config.viewport.width}x{device_config.viewport.height}",
                "isMobile": device_config.is_mobile,
            },
        )
        return self._page

    async def navigate_to(
        self,
        url: str | None = None,
        wait_until: Literal["commit", "domcontentloaded", "load", "networkidle"] = "domcontentloaded",
        timeout: int | None = None,
    ) -> browser.NavigationResult:
        """Navigate the current page and report the response status."""
        url = url or self._settings.base_url
        timeout = timeout or self._settings.navigation_timeout_ms
        log.debug("Navigating", {"url": url, "waitUntil": wait_until, "timeout": timeout})
        try:
            response = await self.page.goto(url, wait_until=wait_until, timeout=timeout)
        except Exception as error:
            log.warn("Navigation error", {"url": url, "error": errors.get_error_message(error)})
            return browser.NavigationResult(success=False, error_message=errors.get_error_message(error))

        status_code = response.status if response else None
        status_text = response.status_text if response else None
        final_url = self.page.url
        if final_url != url:
            log.info("Redirected", {"from": url, "to": final_url})
        if status_code and status_code >= 400:
            return browser.NavigationResult(
                success=False,
                status_code=status_code,
                status_text=status_text,
                final_url=final_url,
                error_message=f"Server error ({status_code}: {status_text})",
            )
        return browser.NavigationResult(
            success=True, status_code=status_code, status_text=status_text, final_url=final_url
        )

    # ==========================================================================
    # Cleanup
    # ==========================================================================

    async def close(self) -> None:
        """Close the browser and clean up all resources."""
        self._page = None

        if self._context:
            try:
                await self._context.close()
            except Exception as exc:
                log.debug("Context close error (non-fatal)", {"error": errors.get_error_message(exc)})
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception as exc:
                log.debug("Browser close error (non-fatal)", {"error": errors.get_error_message(exc)})
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.debug("Playwright stop error (non-fatal)", {"error": errors.get_error_message(exc)})
            self._playwright = None
            log.debug("Browser session closed")

    async def __aenter__(self) -> BrowserSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

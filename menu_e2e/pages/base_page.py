"""
Base page object: locators and actions common to every site page.
"""

from __future__ import annotations

import asyncio

from playwright import async_api

from menu_e2e import config
from menu_e2e.browser import readiness
from menu_e2e.consent import constants, gate, preferences
from menu_e2e.models import consent
from menu_e2e.utils import logger

log = logger.create_logger("BasePage")

_SEARCH_DEBOUNCE_S = 1.0


class BasePage:
    """Common locators plus navigation that always clears consent first."""

    def __init__(self, page: async_api.Page, url: str = "", settings: config.SuiteSettings | None = None) -> None:
        self.page = page
        self.settings = settings or config.get_settings()
        self.url = url or self.settings.base_url

        self.logo = page.locator('[data-testid="logo"], .logo, img[alt*="Greggs"]').first
        self.main_navigation = page.locator('nav, [role="navigation"]').first
        self.search_input = page.locator(
            'input[type="search"], input[placeholder*="search" i], [data-testid="search"]'
        ).first
        self.loading_spinner = page.locator(", ".join(constants.LOADING_SELECTORS))

        self.cookie_banner = page.locator(", ".join(constants.BANNER_SELECTORS)).first
        self.cookie_settings_button = page.locator(", ".join(constants.SETTINGS_SELECTORS)).first

        self.last_gate_result: consent.GateResult | None = None

    async def goto(self) -> None:
        """Navigate, clear any consent overlay, then wait for the page to settle."""
        await self.page.goto(self.url)
        await self.handle_cookie_consent()
        await self.wait_for_page_load()

    async def handle_cookie_consent(self) -> consent.GateResult:
        """Run the consent gate against this page; never raises."""
        self.last_gate_result = await gate.ensure_ready(self.page, self.settings.gate_timeout_ms)
        return self.last_gate_result

    async def wait_for_page_load(self) -> None:
        await readiness.wait_for_page_ready(self.page, self.settings.readiness_timeout_ms)

    async def wait_for_loading_to_complete(self) -> None:
        """Wait for any spinner in the DOM to hide."""
        for spinner in await self.loading_spinner.all():
            await spinner.wait_for(state="hidden", timeout=self.settings.readiness_timeout_ms)

    async def set_cookie_preferences(self, preference: consent.ConsentPreference = "reject") -> bool:
        return await preferences.set_cookie_preferences(self.page, preference, self.settings.cookie_domain)

    async def click_logo(self) -> None:
        await self.logo.click()
        await self.page.wait_for_load_state("networkidle")

    async def search(self, term: str) -> bool:
        """Type *term* into the site search if the page has one."""
        if await self.search_input.count() == 0:
            log.debug("No search input on page")
            return False
        await self.search_input.fill(term)
        await asyncio.sleep(_SEARCH_DEBOUNCE_S)
        return True

    def get_current_url(self) -> str:
        return self.page.url

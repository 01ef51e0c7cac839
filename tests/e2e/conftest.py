"""Browser fixtures shared by the end-to-end suites.

Each test gets its own browser, context and page for the selected
device profile.  When the engine cannot be launched (browsers not
installed) the test is skipped rather than failed.
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterator

import pytest
from playwright import async_api

from menu_e2e import config
from menu_e2e.browser import metrics
from menu_e2e.browser.session import BrowserSession
from menu_e2e.pages.menu_page import MenuPage
from menu_e2e.utils import errors, logger

log = logger.create_logger("E2E")


def _screenshot_name(node_name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", node_name)[:100]


@pytest.fixture()
def settings(pytestconfig: pytest.Config) -> config.SuiteSettings:
    """Suite settings with the ``--device-profile`` override applied."""
    base = config.get_settings()
    profile = pytestconfig.getoption("--device-profile") or base.device_profile
    return base.model_copy(update={"device_profile": profile})


@pytest.fixture()
async def session(settings: config.SuiteSettings) -> AsyncIterator[BrowserSession]:
    browser_session = BrowserSession(settings)
    try:
        await browser_session.launch()
    except Exception as exc:
        await browser_session.close()
        pytest.skip(f"Browser unavailable: {errors.get_error_message(exc)}")
    yield browser_session
    await browser_session.close()


@pytest.fixture()
async def page(session: BrowserSession, request: pytest.FixtureRequest) -> AsyncIterator[async_api.Page]:
    """The session's page; a full-page screenshot is kept when the test fails."""
    yield session.page
    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        try:
            await metrics.take_full_page_screenshot(session.page, _screenshot_name(request.node.name))
        except Exception as exc:
            log.warn("Failure screenshot not captured", {"test": request.node.name, "error": errors.get_error_message(exc)})


@pytest.fixture()
async def menu_page(page: async_api.Page, settings: config.SuiteSettings) -> MenuPage:
    """The live menu, loaded with consent handled and the page settled."""
    menu = MenuPage(page, settings)
    await menu.goto()
    return menu

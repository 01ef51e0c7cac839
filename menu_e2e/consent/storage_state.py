"""
Storage-state capture.

Opens the menu once, lets the consent gate record a choice and saves
the context's cookies and storage so later contexts start with the
banner already answered.
"""

from __future__ import annotations

import pathlib

from menu_e2e import config
from menu_e2e.browser import session
from menu_e2e.consent import gate
from menu_e2e.utils import errors, logger

log = logger.create_logger("Storage-State")


async def capture_storage_state(
    settings: config.SuiteSettings | None = None,
    profile: str = "desktop-chrome",
) -> pathlib.Path | None:
    """Write ``storage-state.json`` and return its path, or ``None`` on failure.

    A missing snapshot only means later runs see the banner again,
    so errors are logged rather than raised.
    """
    settings = settings or config.get_settings()
    path = settings.storage_state_path
    log.start_timer("capture-state")

    browser_session = session.BrowserSession(settings)
    try:
        await browser_session.launch(profile, storage_state="")
        navigation = await browser_session.navigate_to(settings.base_url)
        if not navigation.success:
            log.warn("Could not load site for storage capture", {"error": navigation.error_message})
            return None

        result = await gate.ensure_ready(browser_session.page, settings.gate_timeout_ms)
        if not result.consent_recorded:
            log.warn("No consent choice was recorded; snapshot may not suppress the banner", {"outcome": result.outcome})

        path.parent.mkdir(parents=True, exist_ok=True)
        await browser_session.context.storage_state(path=str(path))
    except Exception as exc:
        log.error("Storage state capture failed", {"error": errors.get_error_message(exc)})
        return None
    finally:
        await browser_session.close()

    log.end_timer("capture-state", "Storage state saved")
    log.success("Storage state written", {"path": str(path)})
    return path

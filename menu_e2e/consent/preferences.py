"""
Consent preference seeding.

Writes the storage keys and cookies that consent tools read before
deciding whether to render a banner.  Everything here is best-effort:
failures are logged and reported as ``False``, never raised.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from urllib import parse

from playwright import async_api

from menu_e2e import config
from menu_e2e.consent import constants, strategies
from menu_e2e.models import consent
from menu_e2e.utils import errors, logger

log = logger.create_logger("Consent-Preferences")

_STORAGE_SCRIPT = """
([keys, value]) => {
    const now = Date.now().toString();
    for (const key of keys) {
        localStorage.setItem(key, value);
        localStorage.setItem(`${key}-status`, value);
        localStorage.setItem(`${key}-timestamp`, now);
        sessionStorage.setItem(key, value);
    }
}
"""

_INIT_SCRIPT_TEMPLATE = """
(() => {{
    const keys = {keys};
    const value = {value};
    try {{
        for (const key of keys) {{
            localStorage.setItem(key, value);
            localStorage.setItem(`${{key}}-status`, value);
            localStorage.setItem(`${{key}}-timestamp`, Date.now().toString());
        }}
    }} catch (e) {{
        // Storage is unavailable on about:blank and opaque origins.
    }}
}})();
"""


def onetrust_groups(preference: consent.ConsentPreference) -> str:
    """Build the ``groups`` value of an ``OptanonConsent`` cookie.

    Strictly necessary cookies (the first group) are always on;
    the optional groups follow *preference*.
    """
    optional = "1" if preference == "accept" else "0"
    first, *rest = constants.ONETRUST_GROUPS
    return ",".join([f"{first}:1", *(f"{group}:{optional}" for group in rest)])


def _cookie(name: str, value: str, domain: str) -> dict[str, str]:
    return {"name": name, "value": value, "domain": domain, "path": "/"}


async def set_cookie_preferences(
    page: async_api.Page,
    preference: consent.ConsentPreference = "reject",
    domain: str | None = None,
) -> bool:
    """Record *preference* in localStorage, sessionStorage and HTTP cookies."""
    domain = domain or config.get_settings().cookie_domain
    try:
        await page.evaluate(_STORAGE_SCRIPT, [list(constants.CONSENT_STORAGE_KEYS), preference])
        await page.context.add_cookies(
            [
                _cookie("cookie-consent", preference, domain),
                _cookie("cookies-preference", preference, domain),
            ]
        )
    except Exception as exc:
        log.warn("Failed to set cookie preferences", {"error": errors.get_error_message(exc)})
        return False
    log.info("Cookie preferences set", {"preference": preference, "domain": domain})
    return True


async def install_consent_init_script(
    context: async_api.BrowserContext,
    preference: consent.ConsentPreference = "reject",
    domain: str | None = None,
) -> bool:
    """Pre-seed consent so the banner never renders in *context*.

    Adds OneTrust's ``OptanonAlertBoxClosed``/``OptanonConsent``
    cookies and an init script that writes the storage keys before
    any page script runs.
    """
    domain = domain or config.get_settings().cookie_domain
    closed_at = datetime.now(UTC).isoformat(timespec="seconds")
    script = _INIT_SCRIPT_TEMPLATE.format(
        keys=json.dumps(list(constants.CONSENT_STORAGE_KEYS)),
        value=json.dumps(preference),
    )
    try:
        await context.add_cookies(
            [
                _cookie("OptanonAlertBoxClosed", closed_at, domain),
                _cookie("OptanonConsent", "groups=" + parse.quote(onetrust_groups(preference), safe=""), domain),
            ]
        )
        await context.add_init_script(script)
    except Exception as exc:
        log.warn("Failed to install consent init script", {"error": errors.get_error_message(exc)})
        return False
    log.debug("Consent init script installed", {"preference": preference})
    return True


async def is_banner_present(page: async_api.Page) -> bool:
    """Single non-waiting check for a visible consent banner."""
    match = await strategies.find_first_visible(
        strategies.from_selectors(constants.BANNER_SELECTORS),
        strategies.consent_scopes(page),
        timeout_ms=0,
    )
    return match is not None

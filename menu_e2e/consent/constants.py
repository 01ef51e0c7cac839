"""Selector catalogues for cookie-consent handling.

Every string here is a contract with third-party markup (the site's
own banner or a consent-management platform) and is ordered by
preference: earlier entries win when several match.
"""

from __future__ import annotations

import re
from urllib import parse

from playwright import async_api

# Consent banner containers.  Plain CSS only: the same list feeds
# ``document.querySelectorAll`` for forced removal.
BANNER_SELECTORS: tuple[str, ...] = (
    '[data-testid="cookie-banner"]',  # Explicit test hook
    "#onetrust-banner-sdk",  # OneTrust
    ".onetrust-banner-sdk",
    "#CybotCookiebotDialog",  # Cookiebot
    ".cookiebot",
    ".CookieConsent",
    "#cookie-banner",
    ".cookie-banner",
    ".cookie-consent",
    ".cookie-notice",
    '[class*="cookie"][class*="banner"]',
    '[class*="cookie"][class*="consent"]',
    '[id*="cookie"][id*="banner"]',
    '[role="dialog"][aria-label*="cookie" i]',
    '[role="region"][aria-label*="cookie" i]',
    '[role="banner"][class*="cookie"]',
)

# Reject/decline controls, test hooks and platform ids first.
REJECT_SELECTORS: tuple[str, ...] = (
    '[data-testid="reject-cookies"]',
    '[data-testid="decline-cookies"]',
    '[data-cy="reject-cookies"]',
    "#onetrust-reject-all-handler",
    ".onetrust-reject-all-handler",
    "#CybotCookiebotDialogBodyButtonDecline",
    "#reject-cookies",
    "#decline-cookies",
    ".cookie-reject",
    ".cookie-decline",
    'button:has-text("Reject")',
    'button:has-text("Decline")',
    'button:has-text("No thanks")',
    'button:text-is("No")',
    'button[data-action="reject"]',
    'button[class*="reject"]',
    'button[id*="reject"]',
)

# Accept/allow controls, used only when no reject control exists.
ACCEPT_SELECTORS: tuple[str, ...] = (
    '[data-testid="accept-cookies"]',
    '[data-testid="allow-cookies"]',
    '[data-cy="accept-cookies"]',
    "#onetrust-accept-btn-handler",
    ".onetrust-accept-btn-handler",
    "#CybotCookiebotDialogBodyLevelButtonLevelOptinAllowAll",
    "#accept-cookies",
    "#allow-cookies",
    ".cookie-accept",
    ".cookie-allow",
    'button:has-text("Accept")',
    'button:has-text("Allow")',
    'button:has-text("I agree")',
    'button:text-is("OK")',
    'button:text-is("Yes")',
    'button[data-action="accept"]',
    'button[class*="accept"]',
    'button[id*="accept"]',
)

# Generic close controls searched inside the banner only.
CLOSE_SELECTORS: tuple[str, ...] = (
    '[aria-label="Close" i]',
    'button[title="Close"]',
    '[data-testid="close"]',
    'button:has-text("×")',
    'button:has-text("✕")',
    'button:text-is("Close")',
    ".modal-close",
    ".close",
)

# Preference-centre entry points (asserted on, never clicked by the gate).
SETTINGS_SELECTORS: tuple[str, ...] = (
    '[data-testid="cookie-settings"]',
    "#onetrust-pc-btn-handler",
    "#cookie-settings",
    ".cookie-settings",
    'button:has-text("Cookie settings")',
    'button:has-text("Preferences")',
    'button:has-text("Customize")',
    'button:has-text("Manage")',
)

# Accessible-name patterns backing the role-based fallbacks.
REJECT_LABEL_RE: re.Pattern[str] = re.compile(
    r"reject|decline|deny|refuse|necessary only|essential only",
    re.IGNORECASE,
)
ACCEPT_LABEL_RE: re.Pattern[str] = re.compile(
    r"accept|allow all|agree|got it",
    re.IGNORECASE,
)

# Loading indicators the readiness wait blocks on.
LOADING_SELECTORS: tuple[str, ...] = (
    ".loading",
    ".spinner",
    '[data-testid="loading"]',
)

# Anything stacked above this is treated as a blocking overlay.
OVERLAY_Z_INDEX_THRESHOLD = 1000

# Storage keys consent tools commonly read before rendering a banner.
CONSENT_STORAGE_KEYS: tuple[str, ...] = (
    "cookieConsent",
    "cookie-consent",
    "cookies-accepted",
    "greggs-cookies",
    "onetrust-consent",
    "CookieConsent",
    "cookiebot-consent",
    "cookie-preferences",
)

# OneTrust cookie groups: C0001 strictly necessary, the rest optional.
ONETRUST_GROUPS: tuple[str, ...] = ("C0001", "C0002", "C0003", "C0004")

# Hostname substrings of consent-manager iframes (Sourcepoint, some
# Cookiebot and TrustArc setups render the banner in a child frame).
CONSENT_HOST_KEYWORDS: tuple[str, ...] = (
    "consent",
    "onetrust",
    "cookiebot",
    "sourcepoint",
    "privacy-mgmt",
    "trustarc",
    "didomi",
    "quantcast",
    "gdpr",
    "privacy",
    "cmp",
    "cookie",
)

# Ad-tech sync and pixel frames whose hostnames also match the keywords.
CONSENT_HOST_EXCLUDE: tuple[str, ...] = (
    "cookie-sync",
    "pixel",
    "-sync.",
    "ad-sync",
    "user-sync",
    "match.",
    "prebid",
)


def is_consent_frame(frame: async_api.Frame, main_frame: async_api.Frame) -> bool:
    """Return ``True`` if *frame* looks like a consent-manager iframe.

    Matches the frame's hostname against :data:`CONSENT_HOST_KEYWORDS`
    minus :data:`CONSENT_HOST_EXCLUDE`.  The main frame never matches.
    """
    if frame == main_frame:
        return False
    hostname = (parse.urlparse(frame.url).hostname or "").lower()
    if any(ex in hostname for ex in CONSENT_HOST_EXCLUDE):
        return False
    return any(kw in hostname for kw in CONSENT_HOST_KEYWORDS)

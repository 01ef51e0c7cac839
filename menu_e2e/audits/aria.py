"""
ARIA attribute audit for the menu.

Collection runs one script per element family and returns
:mod:`menu_e2e.models.menu` snapshots.  Validation is pure: each
validator takes snapshots and returns human-readable issue strings,
so suites can assert on an empty list and print what went wrong.
"""

from __future__ import annotations

from playwright import async_api

from menu_e2e.models.menu import FormControlAria, LandmarkAria, MenuItemAria
from menu_e2e.utils import logger, text

log = logger.create_logger("ARIA-Audit")

GENERIC_LABELS = frozenset({"link", "button", "image", "menu"})
MIN_ARIA_LABEL_LENGTH = 6
MIN_ALT_LENGTH = 4
MAX_ALT_NAME_DISTANCE = 2

_MENU_ITEMS_SCRIPT = """
() => Array.from(document.querySelectorAll('a[data-test-card]')).map((link, index) => {
    const name = link.querySelector('h3');
    const img = link.querySelector('img');
    const describedBy = link.getAttribute('aria-describedby');
    return {
        index,
        testCardId: link.getAttribute('data-test-card'),
        name: name?.textContent?.trim() || '',
        href: link.getAttribute('href'),
        linkAriaLabel: link.getAttribute('aria-label'),
        linkAriaDescribedBy: describedBy,
        linkRole: link.getAttribute('role'),
        linkTabIndex: link.getAttribute('tabindex'),
        linkTitle: link.getAttribute('title'),
        imageAlt: img?.getAttribute('alt') || '',
        imageAriaLabel: img?.getAttribute('aria-label'),
        imageAriaHidden: img?.getAttribute('aria-hidden'),
        describedByExists: describedBy
            ? describedBy.split(/\\s+/).every((id) => document.getElementById(id) !== null)
            : null,
    };
})
"""

_LANDMARKS_SCRIPT = """
() => Array.from(document.querySelectorAll(
    'nav, main, header, footer, [role="navigation"], [role="main"], [role="banner"], [role="contentinfo"]'
)).map((el) => ({
    tag: el.tagName.toLowerCase(),
    role: el.getAttribute('role'),
    ariaLabel: el.getAttribute('aria-label'),
    ariaLabelledBy: el.getAttribute('aria-labelledby'),
}))
"""

_FORM_CONTROLS_SCRIPT = """
() => Array.from(document.querySelectorAll('button, input:not([type="hidden"]), select, textarea')).map((el) => ({
    tag: el.tagName.toLowerCase(),
    type: el.getAttribute('type'),
    text: (el.textContent || '').trim(),
    ariaLabel: el.getAttribute('aria-label'),
    ariaLabelledBy: el.getAttribute('aria-labelledby'),
    ariaDescribedBy: el.getAttribute('aria-describedby'),
    placeholder: el.getAttribute('placeholder'),
    title: el.getAttribute('title'),
    hasLabelElement: !!(el.id && document.querySelector(`label[for="${CSS.escape(el.id)}"]`)) || !!el.closest('label'),
}))
"""


# ============================================================================
# Collection
# ============================================================================


async def collect_menu_items(page: async_api.Page) -> list[MenuItemAria]:
    raw = await page.evaluate(_MENU_ITEMS_SCRIPT)
    items = [MenuItemAria.model_validate(entry) for entry in raw]
    log.debug("Collected menu card ARIA snapshots", {"count": len(items)})
    return items


async def collect_landmarks(page: async_api.Page) -> list[LandmarkAria]:
    return [LandmarkAria.model_validate(entry) for entry in await page.evaluate(_LANDMARKS_SCRIPT)]


async def collect_form_controls(page: async_api.Page) -> list[FormControlAria]:
    return [FormControlAria.model_validate(entry) for entry in await page.evaluate(_FORM_CONTROLS_SCRIPT)]


# ============================================================================
# Validation
# ============================================================================


def is_generic_label(label: str | None) -> bool:
    """Whether *label* is one of the words that tells a screen-reader user nothing."""
    return text.normalise(label) in GENERIC_LABELS


def validate_aria_label(item: MenuItemAria) -> list[str]:
    """A card link needs either a descriptive aria-label or visible text."""
    issues: list[str] = []
    if item.link_aria_label:
        if len(item.link_aria_label.strip()) < MIN_ARIA_LABEL_LENGTH:
            issues.append(f'"{item.name}": aria-label "{item.link_aria_label}" is not descriptive')
        if is_generic_label(item.link_aria_label):
            issues.append(f'"{item.name}": aria-label "{item.link_aria_label}" is generic')
    elif not item.name.strip():
        issues.append(f"card {item.index}: no aria-label and no visible name")
    return issues


def validate_image_alt(item: MenuItemAria) -> list[str]:
    """Alt text must exist, be descriptive, and match the item name within two edits."""
    alt = item.image_alt.strip()
    if not alt:
        return [f'"{item.name}": image has no alt text']
    issues: list[str] = []
    if len(alt) < MIN_ALT_LENGTH:
        issues.append(f'"{item.name}": alt text "{alt}" is too short')
    distance = text.levenshtein(text.normalise(alt), text.normalise(item.name))
    if distance > MAX_ALT_NAME_DISTANCE:
        issues.append(f'"{item.name}": alt text "{alt}" differs from the name by {distance} characters')
    return issues


def validate_hidden_image(item: MenuItemAria) -> list[str]:
    """An ``aria-hidden`` image leaves the link to carry the name."""
    if item.image_aria_hidden == "true" and not (item.link_aria_label or item.name.strip()):
        return [f"card {item.index}: image is aria-hidden and the link has no name"]
    return []


def validate_described_by(item: MenuItemAria) -> list[str]:
    if item.link_aria_described_by and item.described_by_exists is False:
        return [f'"{item.name}": aria-describedby "{item.link_aria_described_by}" points at a missing element']
    return []


def validate_tab_index(item: MenuItemAria) -> list[str]:
    """Positive tabindex values break the natural focus order."""
    if item.link_tab_index is None:
        return []
    try:
        value = int(item.link_tab_index)
    except ValueError:
        return [f'"{item.name}": tabindex "{item.link_tab_index}" is not a number']
    if value > 0:
        return [f'"{item.name}": positive tabindex {value}']
    return []


def validate_menu_item(item: MenuItemAria) -> list[str]:
    return [
        *validate_aria_label(item),
        *validate_image_alt(item),
        *validate_hidden_image(item),
        *validate_described_by(item),
        *validate_tab_index(item),
    ]


def validate_form_controls(controls: list[FormControlAria]) -> list[str]:
    issues: list[str] = []
    for index, control in enumerate(controls):
        if not control.has_accessible_name:
            issues.append(f"{control.tag}[{index}]: missing accessible name")
        if is_generic_label(control.aria_label):
            issues.append(f'{control.tag}[{index}]: generic aria-label "{control.aria_label}"')
    return issues


def validate_landmarks(landmarks: list[LandmarkAria]) -> list[str]:
    """At least one navigation landmark; several must be told apart by a label."""
    navigation = [lm for lm in landmarks if lm.tag == "nav" or lm.role == "navigation"]
    if not navigation:
        return ["no navigation landmark"]
    if len(navigation) > 1:
        unlabelled = [lm for lm in navigation if not (lm.aria_label or lm.aria_labelled_by)]
        if unlabelled:
            return [f"{len(unlabelled)} of {len(navigation)} navigation landmarks have no label"]
    return []

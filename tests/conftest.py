"""Shared fixtures for the test suite."""

from __future__ import annotations

import re
from collections.abc import Callable

import pytest

from menu_e2e import config as suite_config
from menu_e2e.browser import device_configs
from menu_e2e.models import consent

# ── In-memory page double ───────────────────────────────────────
#
# Implements just the slice of the Playwright Page/Locator API the
# consent gate touches.  Elements match CSS strategies by exact
# selector string and role strategies by role plus accessible text.


class FakeTimeoutError(Exception):
    """Raised where Playwright would time out."""


class FakeElement:
    def __init__(
        self,
        selectors: set[str],
        *,
        parent: FakeElement | None = None,
        role: str | None = None,
        text: str = "",
        visible: bool = True,
        on_click: Callable[[], None] | None = None,
        z_index: int | None = None,
        box: dict[str, float] | None = None,
    ) -> None:
        self.selectors = selectors
        self.parent = parent
        self.role = role
        self.text = text
        self.visible = visible
        self.on_click = on_click
        self.z_index = z_index
        self.box = box
        self.removed = False
        self.display_none = False
        self.pointer_events_none = False
        self.clicks = 0

    def hide(self) -> None:
        self.visible = False

    @property
    def attached(self) -> bool:
        node: FakeElement | None = self
        while node is not None:
            if node.removed:
                return False
            node = node.parent
        return True

    @property
    def is_visible(self) -> bool:
        node: FakeElement | None = self
        while node is not None:
            if node.removed or not node.visible or node.display_none:
                return False
            node = node.parent
        return True

    def is_descendant_of(self, other: FakeElement) -> bool:
        node = self.parent
        while node is not None:
            if node is other:
                return True
            node = node.parent
        return False


class FakeLocator:
    def __init__(
        self,
        page: FakePage,
        predicate: Callable[[FakeElement], bool],
        *,
        root: FakeLocator | None = None,
        first_only: bool = False,
    ) -> None:
        self._page = page
        self._predicate = predicate
        self._root = root
        self._first_only = first_only

    def _elements(self) -> list[FakeElement]:
        self._page.check_broken()
        candidates = [el for el in self._page.elements if el.attached and self._predicate(el)]
        if self._root is not None:
            roots = self._root._elements()
            if not roots:
                return []
            candidates = [el for el in candidates if el.is_descendant_of(roots[0])]
        return candidates[:1] if self._first_only else candidates

    @property
    def first(self) -> FakeLocator:
        return FakeLocator(self._page, self._predicate, root=self._root, first_only=True)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self._page, lambda el: selector in el.selectors, root=self)

    def get_by_role(self, role: str, *, name: re.Pattern[str]) -> FakeLocator:
        return FakeLocator(self._page, _role_predicate(role, name), root=self)

    async def is_visible(self) -> bool:
        elements = self._elements()
        return bool(elements) and elements[0].is_visible

    async def click(self, timeout: float | None = None) -> None:
        elements = self._elements()
        if not elements or not elements[0].is_visible:
            raise FakeTimeoutError(f"Timeout {timeout}ms exceeded waiting for element to be visible")
        element = elements[0]
        element.clicks += 1
        self._page.click_log.append(element)
        if element.on_click:
            element.on_click()

    async def wait_for(self, state: str = "visible", timeout: float | None = None) -> None:
        elements = self._elements()
        visible = bool(elements) and elements[0].is_visible
        if state == "hidden" and visible:
            raise FakeTimeoutError(f"Timeout {timeout}ms exceeded waiting for element to be hidden")
        if state == "visible" and not visible:
            raise FakeTimeoutError(f"Timeout {timeout}ms exceeded waiting for element to be visible")

    async def bounding_box(self) -> dict[str, float] | None:
        elements = self._elements()
        return elements[0].box if elements else None


def _role_predicate(role: str, name: re.Pattern[str]) -> Callable[[FakeElement], bool]:
    return lambda el: el.role == role and bool(name.search(el.text))


class FakeKeyboard:
    def __init__(self, page: FakePage) -> None:
        self._page = page
        self.pressed: list[str] = []

    async def press(self, key: str) -> None:
        self._page.check_broken()
        self.pressed.append(key)
        handler = self._page.key_handlers.get(key)
        if handler:
            handler()


class FakeMouse:
    def __init__(self, page: FakePage) -> None:
        self._page = page
        self.clicks: list[tuple[float, float]] = []

    async def click(self, x: float, y: float) -> None:
        self._page.check_broken()
        self.clicks.append((x, y))
        if self._page.mouse_handler:
            self._page.mouse_handler(x, y)


class FakePage:
    """Stands in for both a Page and a Frame; child frames are FakePages too."""

    def __init__(self, *, viewport: dict[str, int] | None = None, url: str = "https://www.greggs.com/menu") -> None:
        self.url = url
        self.child_frames: list[FakePage] = []
        self.elements: list[FakeElement] = []
        self.key_handlers: dict[str, Callable[[], None]] = {}
        self.mouse_handler: Callable[[float, float], None] | None = None
        self.keyboard = FakeKeyboard(self)
        self.mouse = FakeMouse(self)
        self.click_log: list[FakeElement] = []
        self.network_idle = True
        self.broken = False
        self.viewport_broken = False
        self._viewport = viewport or {"width": 1280, "height": 720}

    def check_broken(self) -> None:
        if self.broken:
            raise RuntimeError("Target page, context or browser has been closed")

    def add_frame(self, url: str) -> FakePage:
        frame = FakePage(viewport=self._viewport, url=url)
        self.child_frames.append(frame)
        return frame

    @property
    def main_frame(self) -> FakePage:
        return self

    @property
    def frames(self) -> list[FakePage]:
        return [self, *self.child_frames]

    def add(self, *selectors: str, **kwargs: object) -> FakeElement:
        element = FakeElement(set(selectors), **kwargs)  # type: ignore[arg-type]
        self.elements.append(element)
        return element

    @property
    def viewport_size(self) -> dict[str, int] | None:
        if self.viewport_broken:
            raise RuntimeError("viewport unavailable")
        return self._viewport

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, lambda el: selector in el.selectors)

    def get_by_role(self, role: str, *, name: re.Pattern[str]) -> FakeLocator:
        return FakeLocator(self, _role_predicate(role, name))

    async def evaluate(self, script: str, arg: object = None) -> object:
        self.check_broken()
        if isinstance(arg, list):
            removed = 0
            for selector in arg:
                for el in self.elements:
                    if el.attached and selector in el.selectors:
                        el.removed = True
                        removed += 1
            return removed
        if isinstance(arg, int):
            neutralized = 0
            for el in self.elements:
                if not el.attached or el.z_index is None or el.z_index <= arg:
                    continue
                if el.display_none and el.pointer_events_none:
                    continue
                el.display_none = True
                el.pointer_events_none = True
                neutralized += 1
            return neutralized
        raise NotImplementedError(script)

    async def wait_for_load_state(self, state: str = "load", timeout: float | None = None) -> None:
        self.check_broken()
        if not self.network_idle:
            raise FakeTimeoutError(f"Timeout {timeout}ms exceeded waiting for {state}")


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture()
def fake_page() -> FakePage:
    """An empty page with a 1280x720 viewport and idle network."""
    return FakePage()


@pytest.fixture()
def fast_timeouts() -> consent.GateTimeouts:
    """Gate sub-timeouts small enough to keep unit tests quick."""
    return consent.GateTimeouts(
        detect=60,
        control_visible=30,
        click=50,
        hidden=50,
        settle=5,
        close_visible=20,
        poll_interval=5,
    )


# ── Command-line options and hooks ──────────────────────────────


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("menu-e2e")
    group.addoption(
        "--device-profile",
        default=None,
        choices=list(device_configs.DEVICE_CONFIGS),
        help="Device profile the browser suites run under",
    )
    group.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run suites that hit the live menu site",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--live") or suite_config.get_settings().live:
        return
    skip_live = pytest.mark.skip(reason="live site suite (use --live or MENU_E2E_LIVE=true)")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]):
    """Expose each phase's report as ``item.rep_<phase>`` for fixtures."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)

"""
Menu page object: category navigation, filters, item cards and
error/empty states.
"""

from __future__ import annotations

import asyncio
import re

from playwright import async_api

from menu_e2e import config
from menu_e2e.data import menu_data
from menu_e2e.models.menu import MenuItemSummary
from menu_e2e.pages import base_page, menu_item_modal
from menu_e2e.utils import logger

log = logger.create_logger("MenuPage")

MENU_CARD_SELECTOR = "a[data-test-card]"
_ALLERGEN_LABEL_RE = re.compile(r"^No [A-Za-z]+$")


class MenuItemElement:
    """One menu card."""

    def __init__(self, element: async_api.Locator, page: async_api.Page) -> None:
        self.element = element
        self.page = page
        self.name = element.locator('h2, h3, h4, .item-name, .product-name, [data-testid="item-name"]').first
        self.price = element.locator('.price, [data-testid="price"], .cost').first
        self.image = element.locator("img").first
        self.description = element.locator('.description, [data-testid="description"], p').first
        self.add_to_basket_button = element.locator(
            'button:has-text("Add"), .add-to-basket, [data-testid="add-to-basket"]'
        ).first
        self.allergen_badges = element.locator('.allergen, [data-testid="allergen"]')
        self.dietary_badges = element.locator('.dietary, [data-testid="dietary"], .vegan, .vegetarian')
        self.calorie_info = element.locator('.calories, [data-testid="calories"], .kcal').first
        self.out_of_stock_badge = element.locator('.out-of-stock, [data-stock="false"], .unavailable').first

    async def click(self) -> menu_item_modal.MenuItemModal:
        await self.element.click()
        return menu_item_modal.MenuItemModal(self.page)

    async def get_name(self) -> str:
        """Card title, falling back to the card's full text."""
        if await self.name.count():
            return (await self.name.text_content() or "").strip()
        return (await self.element.inner_text()).strip()

    async def get_price(self) -> str:
        return (await self.price.text_content() or "").strip() if await self.price.count() else ""

    async def get_image_alt(self) -> str:
        return await self.image.get_attribute("alt") or ""

    async def get_href(self) -> str:
        return await self.element.get_attribute("href") or ""

    async def is_visible(self) -> bool:
        return await self.element.is_visible()

    async def is_out_of_stock(self) -> bool:
        return await self.out_of_stock_badge.is_visible()

    async def has_vegan_badge(self) -> bool:
        return await self.element.locator('.vegan, [data-vegan="true"]').count() > 0

    async def has_vegetarian_badge(self) -> bool:
        return await self.element.locator('.vegetarian, [data-vegetarian="true"]').count() > 0

    async def get_allergen_count(self) -> int:
        return await self.allergen_badges.count()

    async def add_to_basket(self) -> bool:
        """Click the card's add button if it has an enabled one."""
        if await self.add_to_basket_button.count() and await self.add_to_basket_button.is_enabled():
            await self.add_to_basket_button.click()
            return True
        return False

    async def hover(self) -> None:
        await self.element.hover()

    async def bounding_box(self) -> dict[str, float] | None:
        return await self.element.bounding_box()  # type: ignore[return-value]

    async def summary(self) -> MenuItemSummary:
        return MenuItemSummary(name=await self.get_name(), url=await self.get_href())


class MenuPage(base_page.BasePage):
    """The ``/menu`` listing."""

    expected_categories = menu_data.CATEGORIES

    def __init__(self, page: async_api.Page, settings: config.SuiteSettings | None = None) -> None:
        super().__init__(page, settings=settings)
        self.menu_items = page.locator(MENU_CARD_SELECTOR)
        self.menu_switch = page.locator('button[data-component="HeaderSwitch"]')
        self.filter_button = page.locator('button[data-test="filterButton"]')
        self.filters_modal_header = page.locator('header:has(h3:has-text("Filters"))')
        self.apply_filters_button = page.locator('button[type="button"][data-test="modalApply"]')
        self.filter_pills = page.locator('[data-test="filterPills"]')
        self.clear_filters_button = page.locator('.clear-filters, [data-testid="clear-filters"]')
        self.no_results_message = page.locator('.no-results, [data-testid="no-results"], .empty-state')
        self.error_message = page.locator('.error, [data-testid="error"], .network-error, h2:has-text("Oh crumbs!")')
        self.dismiss_error_button = page.locator('.error-message-dismiss, .error-close, button:has-text("Dismiss")')

    # ==========================================================================
    # Items
    # ==========================================================================

    async def wait_for_menu_items_to_load(self, timeout_ms: int = 30_000) -> None:
        """Wait for the first card to render when the page has any."""
        if await self.menu_items.count() > 0:
            await self.menu_items.first.wait_for(state="visible", timeout=timeout_ms)
        await self.wait_for_loading_to_complete()

    async def get_menu_items_count(self) -> int:
        await self.wait_for_menu_items_to_load()
        return await self.menu_items.count()

    def get_menu_item_by_index(self, index: int) -> MenuItemElement:
        return MenuItemElement(self.menu_items.nth(index), self.page)

    def get_first_menu_item(self) -> MenuItemElement:
        return self.get_menu_item_by_index(0)

    async def get_menu_item_summaries(self, limit: int | None = None) -> list[MenuItemSummary]:
        count = await self.menu_items.count()
        if limit is not None:
            count = min(count, limit)
        return [await self.get_menu_item_by_index(i).summary() for i in range(count)]

    # ==========================================================================
    # Categories
    # ==========================================================================

    async def get_all_category_names(self) -> list[str]:
        """Expected categories that appear somewhere on the page."""
        found: list[str] = []
        for category in self.expected_categories:
            element = self.page.get_by_text(category, exact=category != "All").first
            if await element.count() > 0:
                found.append(category)
        return found

    async def click_category(self, name: str) -> bool:
        button = self.page.locator(f'button:has-text("{name}")').first
        if await button.count() == 0:
            log.debug("Category button not found", {"category": name})
            return False
        await button.click()
        await self.wait_for_page_load()
        return True

    # ==========================================================================
    # Filters
    # ==========================================================================

    async def open_filters_modal(self) -> None:
        await self.filter_button.wait_for(state="visible")
        await self.filter_button.click()
        await self.filters_modal_header.wait_for(state="visible")

    async def apply_filters(self) -> None:
        await self.apply_filters_button.scroll_into_view_if_needed()
        await self.apply_filters_button.wait_for(state="visible")
        # The sticky footer can sit on top of the button.
        await self.apply_filters_button.click(force=True)
        await self.wait_for_menu_items_to_load()

    async def get_allergen_options(self) -> list[str]:
        """Allergen names offered by the filters modal ("No Milk" -> "Milk")."""
        labels = self.page.locator("label span").filter(has_text=_ALLERGEN_LABEL_RE)
        texts = await labels.all_inner_texts()
        return [text.strip().removeprefix("No ") for text in texts if _ALLERGEN_LABEL_RE.match(text.strip())]

    async def select_allergen(self, allergen: str) -> bool:
        """Tick "No <allergen>", apply, and report whether a filter pill appeared."""
        await self.page.locator(f'label:has(span:text("No {allergen}"))').click()
        await self.apply_filters()
        try:
            await self.filter_pills.filter(has_text=allergen).first.wait_for(state="visible", timeout=5000)
        except Exception:
            log.info("No filter pill shown for allergen", {"allergen": allergen})
            return False
        return True

    async def get_category_options(self) -> list[str]:
        test_ids = await self.page.locator('[data-testid^="category-"]').evaluate_all(
            "(els) => els.map((el) => el.getAttribute('data-testid') || '')"
        )
        return [tid.removeprefix("category-") for tid in test_ids if tid.removeprefix("category-")]

    async def select_category_option(self, category: str) -> None:
        await self.page.locator(f'[data-testid="category-{category}"]').click()

    async def scroll_filters_modal(self, pixels: int = 300) -> None:
        await self.page.evaluate(
            "(dy) => document.querySelector('[data-testid=\"filtersModal\"]')?.scrollBy(0, dy)",
            pixels,
        )
        await asyncio.sleep(0.5)

    async def clear_all_filters(self) -> None:
        if await self.clear_filters_button.count() > 0:
            await self.clear_filters_button.click()
            await self.wait_for_loading_to_complete()

    # ==========================================================================
    # Page state
    # ==========================================================================

    async def search_for_item(self, term: str) -> bool:
        return await self.search(term)

    async def scroll_to_bottom(self) -> None:
        await self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
        await asyncio.sleep(1)

    async def is_no_results_message_visible(self) -> bool:
        return await self.no_results_message.first.is_visible()

    async def is_error_message_visible(self) -> bool:
        return await self.error_message.first.is_visible()

    async def dismiss_error_message(self) -> None:
        if await self.dismiss_error_button.first.is_visible():
            await self.dismiss_error_button.first.click()

"""Menu cards render with a name, image and price."""

from __future__ import annotations

import pytest
from playwright import async_api

from menu_e2e.browser import metrics
from menu_e2e.data import menu_data
from menu_e2e.pages.menu_page import MenuPage
from menu_e2e.utils import pricing

pytestmark = pytest.mark.live


class TestMenuDisplay:
    async def test_cards_have_required_information(self, menu_page: MenuPage) -> None:
        assert await menu_page.get_menu_items_count() > 0

        first = menu_page.get_first_menu_item()
        assert await first.element.is_visible()
        assert await first.name.is_visible()
        assert await first.image.is_visible()

    async def test_images_load(self, menu_page: MenuPage) -> None:
        first = menu_page.get_first_menu_item()
        await first.image.scroll_into_view_if_needed()

        src = await first.image.get_attribute("src") or ""
        assert any(ext in src.lower() for ext in (".jpg", ".jpeg", ".png", ".webp", ".svg"))
        assert await metrics.validate_image_loading(first.image)

    async def test_prices_in_gbp(self, menu_page: MenuPage) -> None:
        count = min(await menu_page.get_menu_items_count(), 5)
        for index in range(count):
            price_text = await menu_page.get_menu_item_by_index(index).get_price()
            if not price_text:
                continue
            assert pricing.is_valid_price_format(price_text), price_text
            assert pricing.is_within_range(pricing.extract_price(price_text), menu_data.MIN_PRICE, menu_data.MAX_PRICE)

    async def test_opening_item_shows_details(self, menu_page: MenuPage, page: async_api.Page) -> None:
        summary = await menu_page.get_first_menu_item().summary()
        await menu_page.get_first_menu_item().click()
        await page.wait_for_load_state("networkidle")

        assert summary.url.rstrip("/").split("/")[-1] in page.url
        assert await page.locator("h1").first.is_visible()

    async def test_out_of_stock_items_cannot_be_added(self, menu_page: MenuPage) -> None:
        count = min(await menu_page.get_menu_items_count(), 10)
        for index in range(count):
            item = menu_page.get_menu_item_by_index(index)
            if await item.is_out_of_stock() and await item.add_to_basket_button.count():
                assert await item.add_to_basket_button.is_disabled()

    async def test_consistent_item_names(self, menu_page: MenuPage) -> None:
        summaries = await menu_page.get_menu_item_summaries(limit=3)
        assert summaries
        assert all(s.name for s in summaries)

"""
Menu item detail modal.
"""

from __future__ import annotations

import asyncio
from typing import Literal

from playwright import async_api

from menu_e2e.data import menu_data

NutritionField = Literal["calories", "fat", "saturates", "sugar", "salt", "protein"]


class MenuItemModal:
    """Detail view opened by clicking a menu card."""

    def __init__(self, page: async_api.Page) -> None:
        self.page = page
        self.modal = page.locator('.modal, [data-testid="modal"], [role="dialog"], .product-detail').first
        self.close_button = page.locator(
            '[data-testid="close"], .modal-close, .close, button:has-text("×")'
        ).first

        self.item_name = self.modal.locator('h1, h2, .modal-title, [data-testid="modal-item-name"]').first
        self.item_price = self.modal.locator('.price, [data-testid="modal-price"]').first
        self.item_image = self.modal.locator("img").first
        self.item_description = self.modal.locator('.description, [data-testid="modal-description"]').first
        self.nutrition_info = self.modal.locator('.nutrition, [data-testid="nutrition"], .nutritional-info').first
        self.allergen_info = self.modal.locator('.allergen-info, [data-testid="allergen-info"]').first

        self.quantity_increase = self.modal.locator(
            '[data-testid="quantity-increase"], .quantity-plus, button:has-text("+")'
        ).first
        self.quantity_decrease = self.modal.locator(
            '[data-testid="quantity-decrease"], .quantity-minus, button:has-text("-")'
        ).first
        self.quantity_input = self.modal.locator('[data-testid="quantity-input"], input[type="number"]').first
        self.add_to_basket_button = self.modal.locator(
            '[data-testid="add-to-basket"], button:has-text("Add to Basket")'
        ).first

    def _nutrition_locator(self, field: NutritionField) -> async_api.Locator:
        return self.modal.locator(f'[data-testid="{field}"], .{field}-value').first

    async def wait_for_modal(self, timeout_ms: int = 5000) -> None:
        await self.modal.wait_for(state="visible", timeout=timeout_ms)

    async def is_visible(self) -> bool:
        return await self.modal.is_visible()

    async def close(self) -> None:
        await self.close_button.click()
        await self.modal.wait_for(state="hidden", timeout=3000)

    async def get_item_name(self) -> str:
        return (await self.item_name.text_content() or "").strip()

    async def get_item_price(self) -> str:
        return (await self.item_price.text_content() or "").strip()

    async def get_description(self) -> str:
        return (await self.item_description.text_content() or "").strip()

    async def has_nutrition_info(self) -> bool:
        return await self.nutrition_info.is_visible()

    async def has_allergen_info(self) -> bool:
        return await self.allergen_info.is_visible()

    async def increase_quantity(self) -> None:
        await self.quantity_increase.click()

    async def decrease_quantity(self) -> None:
        await self.quantity_decrease.click()

    async def set_quantity(self, quantity: int) -> None:
        await self.quantity_input.fill(str(quantity))

    async def get_quantity(self) -> int:
        """Current quantity; an empty or missing input reads as 1."""
        value = await self.quantity_input.input_value()
        return int(value) if value.strip().isdigit() else 1

    async def add_to_basket(self) -> None:
        await self.add_to_basket_button.click()
        await asyncio.sleep(1)

    async def get_nutrition_value(self, field: NutritionField) -> str:
        """Text of one nutrition cell, or ``""`` when the modal does not show it."""
        locator = self._nutrition_locator(field)
        if await locator.is_visible():
            return (await locator.text_content() or "").strip()
        return ""

    async def get_all_nutrition_info(self) -> dict[str, str]:
        return {field: await self.get_nutrition_value(field) for field in menu_data.NUTRITION_FIELDS}  # type: ignore[arg-type]

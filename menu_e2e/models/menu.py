"""Pydantic models for menu-card snapshots taken from the live DOM."""

from __future__ import annotations

import pydantic

from menu_e2e.utils import serialization


class _CamelModel(pydantic.BaseModel):
    """Accepts the camelCase keys produced by ``page.evaluate`` scripts."""

    model_config = pydantic.ConfigDict(alias_generator=serialization.snake_to_camel, populate_by_name=True)


class MenuItemAria(_CamelModel):
    """Accessibility attributes of one ``a[data-test-card]`` menu card."""

    index: int
    test_card_id: str | None = None
    name: str = ""
    href: str | None = None
    link_aria_label: str | None = None
    link_aria_described_by: str | None = None
    link_role: str | None = None
    link_tab_index: str | None = None
    link_title: str | None = None
    image_alt: str = ""
    image_aria_label: str | None = None
    image_aria_hidden: str | None = None
    described_by_exists: bool | None = None


class LandmarkAria(_CamelModel):
    """A navigation/main/banner landmark and how it is labelled."""

    tag: str
    role: str | None = None
    aria_label: str | None = None
    aria_labelled_by: str | None = None


class FormControlAria(_CamelModel):
    """An input or button and the ways it is given an accessible name."""

    tag: str
    type: str | None = None
    text: str = ""
    aria_label: str | None = None
    aria_labelled_by: str | None = None
    aria_described_by: str | None = None
    placeholder: str | None = None
    title: str | None = None
    has_label_element: bool = False

    @property
    def has_accessible_name(self) -> bool:
        """Whether any naming mechanism gives the control a name."""
        return bool(
            self.text.strip()
            or self.aria_label
            or self.aria_labelled_by
            or self.title
            or self.has_label_element
        )


class MenuItemSummary(pydantic.BaseModel):
    """Name and link of a menu card, collected before navigating away."""

    name: str
    url: str

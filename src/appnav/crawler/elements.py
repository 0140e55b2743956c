"""Inventory of interactive elements on a rendered page."""

from __future__ import annotations

import logfire
from playwright.async_api import ElementHandle, Page

from appnav.crawler.models import ElementInfo, ElementPosition

# Queried in this order on every page, before any custom selectors
DEFAULT_SELECTORS = [
    "button",
    "a",
    "input",
    "select",
    "textarea",
    '[role="button"]',
    "[onclick]",
    "form",
]

_ATTRIBUTES_SCRIPT = """
    (el) => {
        const attrs = {};
        for (const attr of el.attributes) {
            attrs[attr.name] = attr.value;
        }
        return attrs;
    }
"""


class ElementCollector:
    """Collects geometry, visibility and attributes of interactive elements."""

    def __init__(self, custom_selectors: list[str] | None = None) -> None:
        self._selectors = [*DEFAULT_SELECTORS, *(custom_selectors or [])]

    @property
    def selectors(self) -> list[str]:
        return list(self._selectors)

    async def collect(self, page: Page) -> list[ElementInfo]:
        """Query every selector and return the rendered matches in order.

        A failing selector is logged and skipped; the others still run.
        """
        elements: list[ElementInfo] = []

        for selector in self._selectors:
            try:
                handles = await page.query_selector_all(selector)
                for index, handle in enumerate(handles):
                    info = await self._describe(handle, selector, index)
                    if info is not None:
                        elements.append(info)
            except Exception as e:
                logfire.warn("Element query failed", selector=selector, error=str(e))

        return elements

    async def _describe(
        self, handle: ElementHandle, selector: str, index: int
    ) -> ElementInfo | None:
        """Build an ElementInfo, or None if the element has no rendered box."""
        box = await handle.bounding_box()
        if not box or box["width"] <= 0 or box["height"] <= 0:
            return None

        visible = await handle.is_visible()
        tag = await handle.evaluate("(el) => el.tagName.toLowerCase()")
        text = await handle.text_content()
        href = await handle.get_attribute("href")
        attributes = await handle.evaluate(_ATTRIBUTES_SCRIPT)

        return ElementInfo(
            selector=f"{selector}:nth-of-type({index + 1})",
            type=tag,
            text=(text or "").strip() or None,
            href=href or None,
            visible=visible,
            position=ElementPosition(
                x=round(box["x"]),
                y=round(box["y"]),
                width=round(box["width"]),
                height=round(box["height"]),
            ),
            attributes=attributes or {},
        )

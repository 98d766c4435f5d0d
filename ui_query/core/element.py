# ui_query/core/element.py
from __future__ import annotations

"""WebElement
-------------
Thin async wrapper over a Playwright ElementHandle exposing the accessors the
predicates need, plus the `wait_until(...)` and `query(...)` entry points.
"""

from typing import TYPE_CHECKING, Optional

from playwright.async_api import ElementHandle, Error as PlaywrightError

from ui_query.core.waiter import ElementWaiter
from ui_query.utils.config import WaitConfig

if TYPE_CHECKING:
    from ui_query.selectors.locator import SelectorLike
    from ui_query.selectors.query import ElementQuery


_JS_IS_CONNECTED = "(el) => el.isConnected"
_JS_IS_SELECTED = "(el) => Boolean(el.checked || el.selected)"
_JS_PROPERTY = """
(el, name) => {
    const v = el[name];
    return (v === undefined || v === null) ? null : String(v);
}
"""
_JS_CSS_VALUE = "(el, name) => getComputedStyle(el).getPropertyValue(name)"


class WebElement:
    """A located element plus the wait configuration it was found with."""

    def __init__(
        self,
        handle: ElementHandle,
        config: Optional[WaitConfig] = None,
        description: Optional[str] = None,
    ) -> None:
        self.handle = handle
        self.config = config or WaitConfig()
        self.description = description

    def __repr__(self) -> str:
        return f"<WebElement {self.description or self.handle!r}>"

    # ---------- Accessors ----------

    async def is_present(self) -> bool:
        """False once the element left the DOM or its handle/context is gone."""
        try:
            return bool(await self.handle.evaluate(_JS_IS_CONNECTED))
        except PlaywrightError:
            return False

    async def is_displayed(self) -> bool:
        return await self.handle.is_visible()

    async def is_selected(self) -> bool:
        return bool(await self.handle.evaluate(_JS_IS_SELECTED))

    async def is_enabled(self) -> bool:
        return await self.handle.is_enabled()

    async def is_clickable(self) -> bool:
        return await self.is_displayed() and await self.is_enabled()

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self.handle.get_attribute(name)

    async def get_property(self, name: str) -> Optional[str]:
        return await self.handle.evaluate(_JS_PROPERTY, name)

    async def get_css_value(self, name: str) -> str:
        return await self.handle.evaluate(_JS_CSS_VALUE, name) or ""

    async def text(self) -> str:
        return await self.handle.inner_text()

    async def value(self) -> Optional[str]:
        return await self.get_property("value")

    async def class_name(self) -> Optional[str]:
        return await self.get_attribute("class")

    # ---------- Entry points ----------

    def wait_until(self, message: str) -> ElementWaiter:
        """Start a wait on this element; `message` becomes the timeout error text."""
        return ElementWaiter(
            element=self,
            poller=self.config.poller,
            message=message,
            tolerate_errors=self.config.ignore_errors,
        )

    def query(self, selector: SelectorLike) -> ElementQuery:
        """Chained lookup of descendants of this element."""
        from ui_query.selectors.query import ElementQuery  # local import to avoid circulars

        return ElementQuery.create(self.handle, selector, self.config)

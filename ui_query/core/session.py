# ui_query/core/session.py
from __future__ import annotations

"""Session
----------
Wraps a Playwright Page together with the WaitConfig that every query started
from it inherits. Changing the session config affects later queries only.
"""

from typing import Optional

from playwright.async_api import Page

from ui_query.core.poller import ElementPoller
from ui_query.selectors.locator import SelectorLike
from ui_query.selectors.query import ElementQuery
from ui_query.utils.config import WaitConfig, get_settings
from ui_query.utils.logger import get_logger


class Session:
    def __init__(self, page: Page, config: Optional[WaitConfig] = None) -> None:
        self.page = page
        self.config = config or WaitConfig.from_settings(get_settings())
        self.log = get_logger(__name__)

    def set_poller(self, poller: ElementPoller) -> None:
        """Default strategy for every query / wait created after this call."""
        self.config = self.config.model_copy(update={"poller": poller})
        self.log.debug(f"Session poller set to {poller.describe()}")

    def set_ignore_errors(self, ignore: bool) -> None:
        self.config = self.config.model_copy(update={"ignore_errors": ignore})

    def query(self, selector: SelectorLike) -> ElementQuery:
        return ElementQuery.create(self.page, selector, self.config)

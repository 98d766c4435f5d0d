# ui_query/__init__.py
"""
UI Query
--------
Poll-until-condition waits and multi-selector element queries on top of
Playwright's async API.

    session = Session(page)
    button = await session.query(Selector.css("button.go")).or_(Selector.id("go")).desc("go button").first()
    await button.wait_until("go button never became clickable").wait(5000, 250).clickable()
"""

from ui_query.core.errors import NoSuchElementError, QueryConfigError, UIQueryError, WaitTimeoutError
from ui_query.core.needle import Contains, Exact, Regex
from ui_query.core.poller import ElementPoller, PollerKind
from ui_query.core.session import Session
from ui_query.core.element import WebElement
from ui_query.selectors.locator import Selector
from ui_query.utils.config import WaitConfig

__version__ = "0.1.0"

__all__ = [
    "Contains",
    "ElementPoller",
    "Exact",
    "NoSuchElementError",
    "PollerKind",
    "QueryConfigError",
    "Regex",
    "Selector",
    "Session",
    "UIQueryError",
    "WaitConfig",
    "WaitTimeoutError",
    "WebElement",
]

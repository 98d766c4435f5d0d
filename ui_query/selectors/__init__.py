# ui_query/selectors/__init__.py
"""
Selectors package
-----------------
Selector models translated to Playwright selector strings, and the chained
multi-selector ElementQuery built on the shared polling schedule.
"""

from .locator import Selector, SelectorStrategy, parse_selector
from .query import ElementQuery, QueryAlternative

__all__ = [
    "Selector",
    "SelectorStrategy",
    "parse_selector",
    "ElementQuery",
    "QueryAlternative",
]

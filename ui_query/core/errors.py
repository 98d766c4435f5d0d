# ui_query/core/errors.py
"""Exception hierarchy for waits and element queries."""

from __future__ import annotations

from typing import Sequence


class UIQueryError(RuntimeError):
    """Base exception for ui-query."""


class WaitTimeoutError(UIQueryError):
    """The polling schedule ran out before every condition held."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NoSuchElementError(UIQueryError):
    """A required element query found nothing for any of its selectors."""

    def __init__(self, tried: Sequence[str], detail: str = ""):
        self.tried = list(tried)
        head = "No selector matched" + (f" ({detail})" if detail else "") + ". Tried:\n  "
        super().__init__(head + "\n  ".join(self.tried or ["<none>"]))


class QueryConfigError(UIQueryError, ValueError):
    """A wait or query was built in a way that can never run (e.g. nothing to check)."""

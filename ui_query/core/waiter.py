# ui_query/core/waiter.py
from __future__ import annotations

"""Element waiter
-----------------
`element.wait_until("message")` returns an ElementWaiter. Configuration methods
return modified copies; the terminal coroutines drive a fresh PollerTicker until
every predicate holds on the same tick, or raise WaitTimeoutError.
"""

import inspect
from dataclasses import dataclass, replace
from typing import Any, Sequence

from ui_query.core import conditions
from ui_query.core.conditions import ElementPredicate, NamedNeedles
from ui_query.core.errors import QueryConfigError, WaitTimeoutError
from ui_query.core.needle import NeedleLike
from ui_query.core.poller import ElementPoller
from ui_query.utils.logger import get_logger
from ui_query.utils.timing import format_ms

log = get_logger(__name__)


async def evaluate_predicates(
    predicates: Sequence[ElementPredicate],
    element: Any,
    *,
    ignore_errors: bool,
) -> bool:
    """
    Evaluate predicates in order against `element`, stopping at the first one
    that is not satisfied. With `ignore_errors`, an exception counts as
    "not satisfied"; otherwise it propagates.
    """
    for predicate in predicates:
        try:
            result = predicate(element)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            if not ignore_errors:
                raise
            log.debug(f"Predicate raised, treating as unmet: {exc!r}")
            return False
        if not result:
            return False
    return True


@dataclass(frozen=True)
class ElementWaiter:
    element: Any
    poller: ElementPoller
    message: str
    tolerate_errors: bool = True

    # ---------- Configuration ----------

    def with_poller(self, poller: ElementPoller) -> "ElementWaiter":
        """Use `poller` for this wait only."""
        return replace(self, poller=poller)

    def wait(self, timeout_ms: int, interval_ms: int) -> "ElementWaiter":
        """Wait up to `timeout_ms`, polling every `interval_ms` (this wait only)."""
        return self.with_poller(ElementPoller.timeout_with_interval(timeout_ms, interval_ms))

    def ignore_errors(self, ignore: bool = True) -> "ElementWaiter":
        """
        By default errors raised while polling count as "condition not met yet".
        Pass False to abort the wait with the first error instead.
        """
        return replace(self, tolerate_errors=ignore)

    # ---------- Driving loop ----------

    async def _run_poller(self, predicates: Sequence[ElementPredicate]) -> bool:
        if not predicates:
            raise QueryConfigError("wait_until needs at least one condition")
        ticker = self.poller.ticker()
        while True:
            if await evaluate_predicates(predicates, self.element, ignore_errors=self.tolerate_errors):
                return True
            if not await ticker.tick():
                log.debug(
                    f"Wait exhausted after {ticker.ticks} tick(s), {format_ms(ticker.elapsed_ms())} "
                    f"[{self.poller.describe()}]: {self.message}"
                )
                return False

    async def condition(self, predicate: ElementPredicate) -> None:
        await self.conditions([predicate])

    async def conditions(self, predicates: Sequence[ElementPredicate]) -> None:
        """All predicates must hold on the same tick; they are checked in order."""
        if not await self._run_poller(list(predicates)):
            raise WaitTimeoutError(self.message)

    # ---------- Named conditions ----------

    async def stale(self) -> None:
        await self.condition(conditions.element_is_stale())

    async def displayed(self) -> None:
        await self.condition(conditions.element_is_displayed())

    async def not_displayed(self) -> None:
        await self.condition(conditions.element_is_not_displayed())

    async def selected(self) -> None:
        await self.condition(conditions.element_is_selected())

    async def not_selected(self) -> None:
        await self.condition(conditions.element_is_not_selected())

    async def enabled(self) -> None:
        await self.condition(conditions.element_is_enabled())

    async def not_enabled(self) -> None:
        await self.condition(conditions.element_is_not_enabled())

    async def clickable(self) -> None:
        await self.condition(conditions.element_is_clickable())

    async def not_clickable(self) -> None:
        await self.condition(conditions.element_is_not_clickable())

    async def has_class(self, class_name: NeedleLike) -> None:
        await self.condition(conditions.element_has_class(class_name))

    async def lacks_class(self, class_name: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_class(class_name))

    async def has_text(self, text: NeedleLike) -> None:
        await self.condition(conditions.element_has_text(text))

    async def lacks_text(self, text: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_text(text))

    async def has_value(self, value: NeedleLike) -> None:
        await self.condition(conditions.element_has_value(value))

    async def lacks_value(self, value: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_value(value))

    async def has_attribute(self, name: str, value: NeedleLike) -> None:
        await self.condition(conditions.element_has_attribute(name, value))

    async def lacks_attribute(self, name: str, value: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_attribute(name, value))

    async def has_attributes(self, desired: NamedNeedles) -> None:
        await self.condition(conditions.element_has_attributes(desired))

    async def lacks_attributes(self, desired: NamedNeedles) -> None:
        await self.condition(conditions.element_lacks_attributes(desired))

    async def has_property(self, name: str, value: NeedleLike) -> None:
        await self.condition(conditions.element_has_property(name, value))

    async def lacks_property(self, name: str, value: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_property(name, value))

    async def has_properties(self, desired: NamedNeedles) -> None:
        await self.condition(conditions.element_has_properties(desired))

    async def lacks_properties(self, desired: NamedNeedles) -> None:
        await self.condition(conditions.element_lacks_properties(desired))

    async def has_css_property(self, name: str, value: NeedleLike) -> None:
        await self.condition(conditions.element_has_css_property(name, value))

    async def lacks_css_property(self, name: str, value: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_css_property(name, value))

    async def has_css_properties(self, desired: NamedNeedles) -> None:
        await self.condition(conditions.element_has_css_properties(desired))

    async def lacks_css_properties(self, desired: NamedNeedles) -> None:
        await self.condition(conditions.element_lacks_css_properties(desired))

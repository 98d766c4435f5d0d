# ui_query/selectors/query.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Tuple

from ui_query.core import conditions
from ui_query.core.conditions import ElementPredicate
from ui_query.core.element import WebElement
from ui_query.core.errors import NoSuchElementError, QueryConfigError
from ui_query.core.poller import ElementPoller
from ui_query.core.waiter import evaluate_predicates
from ui_query.selectors.locator import Selector, SelectorLike, to_selector
from ui_query.utils.config import WaitConfig
from ui_query.utils.logger import get_logger, log_with_context
from ui_query.utils.timing import format_ms

log = get_logger(__name__)


@dataclass(frozen=True)
class QueryAlternative:
    selector: Selector
    description: Optional[str] = None
    filters: Tuple[ElementPredicate, ...] = ()

    def label(self) -> str:
        return f"{self.description} <{self.selector}>" if self.description else str(self.selector)


@dataclass(frozen=True)
class ElementQuery:
    """
    Multi-selector lookup polled under one schedule:
      - Every tick tries the selectors in order
      - The first selector with at least one (filter-passing) match wins
      - Lookup errors follow the same tolerance policy as ElementWaiter

    Builder methods return modified copies.
    """

    root: Any  # Page or ElementHandle (anything with `query_selector_all`)
    alternatives: Tuple[QueryAlternative, ...]
    poller: ElementPoller
    tolerate_errors: bool = True
    config: WaitConfig = field(default_factory=WaitConfig)

    @classmethod
    def create(cls, root: Any, selector: SelectorLike, config: WaitConfig) -> "ElementQuery":
        return cls(
            root=root,
            alternatives=(QueryAlternative(to_selector(selector)),),
            poller=config.poller,
            tolerate_errors=config.ignore_errors,
            config=config,
        )

    # ---------- Selectors ----------

    def or_(self, selector: SelectorLike) -> "ElementQuery":
        """Add a fallback selector, tried after the previous ones on every tick."""
        return replace(self, alternatives=self.alternatives + (QueryAlternative(to_selector(selector)),))

    def _update_last(self, **changes: Any) -> "ElementQuery":
        if not self.alternatives:
            raise QueryConfigError("query has no selector to describe or filter")
        last = replace(self.alternatives[-1], **changes)
        return replace(self, alternatives=self.alternatives[:-1] + (last,))

    def desc(self, description: str) -> "ElementQuery":
        """Name the most recently added selector (shows up in errors and logs)."""
        return self._update_last(description=description)

    def with_filter(self, predicate: ElementPredicate) -> "ElementQuery":
        """Only accept elements of the most recently added selector passing `predicate`."""
        return self._update_last(filters=self.alternatives[-1].filters + (predicate,))

    def and_displayed(self) -> "ElementQuery":
        return self.with_filter(conditions.element_is_displayed())

    def and_enabled(self) -> "ElementQuery":
        return self.with_filter(conditions.element_is_enabled())

    def and_clickable(self) -> "ElementQuery":
        return self.with_filter(conditions.element_is_clickable())

    # ---------- Polling ----------

    def with_poller(self, poller: ElementPoller) -> "ElementQuery":
        return replace(self, poller=poller)

    def wait(self, timeout_ms: int, interval_ms: int) -> "ElementQuery":
        return self.with_poller(ElementPoller.timeout_with_interval(timeout_ms, interval_ms))

    def nowait(self) -> "ElementQuery":
        return self.with_poller(ElementPoller.no_wait())

    def ignore_errors(self, ignore: bool = True) -> "ElementQuery":
        return replace(self, tolerate_errors=ignore)

    # ---------- Resolution ----------

    def tried(self) -> List[str]:
        return [alt.label() for alt in self.alternatives]

    async def _resolve(self) -> List[WebElement]:
        for alt in self.alternatives:
            qlog = log_with_context(log, selector=str(alt.selector))
            try:
                handles = await self.root.query_selector_all(alt.selector.engine_selector())
            except Exception as exc:
                if not self.tolerate_errors:
                    raise
                qlog.debug(f"Lookup failed for {alt.label()}: {exc!r}")
                continue
            elements = [WebElement(h, self.config, alt.label()) for h in handles]
            if alt.filters:
                elements = [
                    e for e in elements
                    if await evaluate_predicates(alt.filters, e, ignore_errors=self.tolerate_errors)
                ]
            if elements:
                qlog.debug(f"Matched {len(elements)} element(s) via {alt.label()}")
                return elements
        return []

    async def _poll(self, *, until_found: bool) -> List[WebElement]:
        if not self.alternatives:
            raise QueryConfigError("query needs at least one selector")
        ticker = self.poller.ticker()
        while True:
            elements = await self._resolve()
            if bool(elements) == until_found:
                return elements
            if not await ticker.tick():
                log.debug(
                    f"Query gave up after {ticker.ticks} tick(s), {format_ms(ticker.elapsed_ms())} "
                    f"[{self.poller.describe()}]: {', '.join(self.tried())}"
                )
                return elements

    # ---------- Terminals ----------

    async def first(self) -> WebElement:
        """First match, or NoSuchElementError once the schedule is exhausted."""
        elements = await self._poll(until_found=True)
        if not elements:
            raise NoSuchElementError(self.tried(), detail=self.poller.describe())
        return elements[0]

    async def first_opt(self) -> Optional[WebElement]:
        elements = await self._poll(until_found=True)
        return elements[0] if elements else None

    async def all(self) -> List[WebElement]:
        """Every match of the winning selector; empty if nothing matched in time."""
        return await self._poll(until_found=True)

    async def all_required(self) -> List[WebElement]:
        elements = await self._poll(until_found=True)
        if not elements:
            raise NoSuchElementError(self.tried(), detail=self.poller.describe())
        return elements

    async def exists(self) -> bool:
        return bool(await self._poll(until_found=True))

    async def not_exists(self) -> bool:
        """True as soon as a tick finds no match for any selector."""
        return not await self._poll(until_found=False)

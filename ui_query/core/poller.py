# ui_query/core/poller.py
from __future__ import annotations

"""Polling strategies
---------------------
`ElementPoller` describes how repeated attempts are spaced; `PollerTicker` is
the single-use cursor that a wait drives through that schedule.

Every wait evaluates its predicates once before the first tick, so even a
zero timeout or zero attempt budget gets exactly one evaluation.
"""

from enum import Enum
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from ui_query.utils.timing import async_sleep_ms, format_ms, now_ms


class PollerKind(str, Enum):
    no_wait = "no_wait"
    fixed_count = "fixed_count"
    timeout_with_interval = "timeout_with_interval"


class ElementPoller(BaseModel):
    """
    Immutable polling strategy.

      - no_wait:                one evaluation, no retries
      - fixed_count:            `max_attempts` retries, `interval_ms` apart
      - timeout_with_interval:  retries every `interval_ms` until `timeout_ms` has passed
    """

    model_config = ConfigDict(frozen=True)

    kind: PollerKind = PollerKind.no_wait
    interval_ms: int = Field(default=0, ge=0)
    max_attempts: int = Field(default=0, ge=0)
    timeout_ms: int = Field(default=0, ge=0)

    @classmethod
    def no_wait(cls) -> "ElementPoller":
        return cls(kind=PollerKind.no_wait)

    @classmethod
    def fixed_count(cls, interval_ms: int, max_attempts: int) -> "ElementPoller":
        return cls(kind=PollerKind.fixed_count, interval_ms=interval_ms, max_attempts=max_attempts)

    @classmethod
    def timeout_with_interval(cls, timeout_ms: int, interval_ms: int) -> "ElementPoller":
        return cls(kind=PollerKind.timeout_with_interval, timeout_ms=timeout_ms, interval_ms=interval_ms)

    def ticker(
        self,
        *,
        clock: Optional[Callable[[], int]] = None,
        sleep: Optional[Callable[[int], Awaitable[None]]] = None,
    ) -> "PollerTicker":
        return PollerTicker(self, clock=clock, sleep=sleep)

    def describe(self) -> str:
        if self.kind == PollerKind.fixed_count:
            return f"fixed_count({self.max_attempts} retries every {format_ms(self.interval_ms)})"
        if self.kind == PollerKind.timeout_with_interval:
            return f"timeout_with_interval({format_ms(self.timeout_ms)}, every {format_ms(self.interval_ms)})"
        return "no_wait"


class PollerTicker:
    """
    Stateful cursor over an ElementPoller schedule.

    Retry k is due `k * interval_ms` after the ticker was created, so slow
    evaluations eat into the interval instead of stretching the schedule.
    Once `tick()` returns False it keeps returning False.
    """

    def __init__(
        self,
        poller: ElementPoller,
        *,
        clock: Optional[Callable[[], int]] = None,
        sleep: Optional[Callable[[int], Awaitable[None]]] = None,
    ) -> None:
        self.poller = poller
        self.ticks = 0
        self._clock = clock or now_ms
        self._sleep = sleep or async_sleep_ms
        self._start_ms = self._clock()
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def elapsed_ms(self) -> int:
        return max(0, self._clock() - self._start_ms)

    async def tick(self) -> bool:
        """
        Return True if another evaluation may run (after sleeping until it is due),
        False once the schedule is used up.
        """
        if self._exhausted:
            return False
        self.ticks += 1
        p = self.poller

        if p.kind == PollerKind.no_wait:
            return self._stop()

        if p.kind == PollerKind.fixed_count:
            if self.ticks > p.max_attempts:
                return self._stop()
            await self._sleep_until_due()
            return True

        # timeout_with_interval
        due_ms = p.interval_ms * self.ticks
        if self.elapsed_ms() >= p.timeout_ms or due_ms > p.timeout_ms:
            return self._stop()
        await self._sleep_until_due()
        return True

    async def _sleep_until_due(self) -> None:
        due_ms = self.poller.interval_ms * self.ticks
        await self._sleep(due_ms - self.elapsed_ms())

    def _stop(self) -> bool:
        self._exhausted = True
        return False

"""Cooperative timer set for one page session.

Stands in for the page's ``setTimeout``: callbacks are queued with a delay in
milliseconds and only run when the owner pumps the set. Everything happens on
the caller's thread, so callbacks never race the fill pass.
"""
from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from autoapply.log import get_logger

log = get_logger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(order=True)
class _Timer:
    deadline: float
    seq: int
    timer_id: int = field(compare=False)
    callback: Callable[..., Any] = field(compare=False)
    args: tuple = field(compare=False, default=())


class TimerSet:
    """Pending timers, keyed by id, fired in deadline order."""

    def __init__(self, clock: Callable[[], float] = monotonic_ms) -> None:
        self._clock = clock
        self._heap: list[_Timer] = []
        self._live: dict[int, _Timer] = {}
        self._ids = itertools.count(1)
        self._seq = itertools.count()
        # deadline of the timer whose callback is running
        self._firing: float | None = None

    def __len__(self) -> int:
        return len(self._live)

    def __contains__(self, timer_id: int) -> bool:
        return timer_id in self._live

    def now(self) -> float:
        """Current time; inside a callback, the deadline of the timer being fired."""
        return self._clock() if self._firing is None else self._firing

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> int:
        timer_id = next(self._ids)
        timer = _Timer(self.now() + max(delay_ms, 0), next(self._seq), timer_id, callback, args)
        heapq.heappush(self._heap, timer)
        self._live[timer_id] = timer
        return timer_id

    def cancel(self, timer_id: int | None) -> bool:
        if timer_id is None:
            return False
        return self._live.pop(timer_id, None) is not None

    def cancel_all(self) -> int:
        count = len(self._live)
        self._live.clear()
        self._heap.clear()
        return count

    def next_delay(self) -> float | None:
        """Milliseconds until the next live timer, or None when idle."""
        self._drop_cancelled()
        if not self._heap:
            return None
        return max(self._heap[0].deadline - self._clock(), 0.0)

    def run_due(self) -> int:
        """Fire every timer whose deadline has passed, including ones they schedule.

        A timer set from inside a callback counts its delay from the parent's
        deadline, so a chain that fits before the current time runs in one call.
        """
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._heap or self._heap[0].deadline > self._clock():
                return fired
            timer = heapq.heappop(self._heap)
            self._live.pop(timer.timer_id, None)
            self._firing = timer.deadline
            try:
                timer.callback(*timer.args)
            except Exception as exc:
                log.debug("Timer %d callback failed: %s", timer.timer_id, exc)
            finally:
                self._firing = None
            fired += 1

    def run_until_idle(
        self,
        sleep: Callable[[float], None] | None = None,
        *,
        max_wait_ms: float = 30_000,
    ) -> int:
        """Block until every timer has fired, sleeping between deadlines.

        ``sleep`` takes milliseconds (Playwright's ``page.wait_for_timeout``
        fits); defaults to ``time.sleep``.
        """
        sleep = sleep or (lambda ms: time.sleep(ms / 1000.0))
        waited = 0.0
        fired = self.run_due()
        while True:
            delay = self.next_delay()
            if delay is None:
                return fired
            if waited + delay > max_wait_ms:
                log.warning("Timers still pending after %.0f ms", waited)
                return fired
            if delay > 0:
                sleep(delay)
                waited += delay
            fired += self.run_due()

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].timer_id not in self._live:
            heapq.heappop(self._heap)

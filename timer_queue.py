"""
Title: Clock-Driven Timer Queue
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Provides the one-shot timers used by the guard controller for the countdown
tick and the deferred monitor start. Timers are driven by an injected clock and
fired only when the owner pumps the queue, so every callback runs on the
owner's single execution context and tests can step time deterministically.

Scope and Limitations:
- One-shot only; periodic behaviour is built by rescheduling from the callback.
- Each timer carries the generation it was scheduled under. The queue does not
  interpret generations; the owner drops stale ones when they fire.
- Not thread-safe on its own; the owner serialises access.

Dependencies:
- Python 3.10+
- heapq (standard library)
- dataclasses (standard library)
"""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class ScheduledTimer:
    due_s: float
    seq: int
    name: str = field(compare=False)
    generation: int = field(compare=False)
    callback: Callable[["ScheduledTimer"], None] = field(compare=False, repr=False)


class TimerQueue:
    def __init__(self, clock: Callable[[], float]):
        self._clock = clock
        self._heap: list[ScheduledTimer] = []
        self._seq = itertools.count()

    def schedule(
        self,
        delay_s: float,
        name: str,
        generation: int,
        callback: Callable[[ScheduledTimer], None],
        *,
        base_s: float | None = None,
    ) -> ScheduledTimer:
        # base_s lets a periodic timer reschedule from its own due time, not from "now".
        start = self._clock() if base_s is None else float(base_s)
        timer = ScheduledTimer(
            due_s=start + max(0.0, float(delay_s)),
            seq=next(self._seq),
            name=name,
            generation=generation,
            callback=callback,
        )
        heapq.heappush(self._heap, timer)
        return timer

    def cancel_all(self) -> int:
        n = len(self._heap)
        self._heap.clear()
        return n

    def pop_due(self, now: float) -> ScheduledTimer | None:
        if self._heap and self._heap[0].due_s <= now:
            return heapq.heappop(self._heap)
        return None

    def pending(self) -> list[ScheduledTimer]:
        return sorted(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

"""Clock - fractional accumulator that turns elapsed time into whole seconds."""
from __future__ import annotations

import threading
import time
from typing import Callable

TimeFn = Callable[[], float]


class Clock:
    def __init__(self, time_fn: TimeFn = time.monotonic, tick_length: float = 1.0) -> None:
        if not tick_length > 0:
            raise ValueError("tick_length must be positive")
        self._time_fn = time_fn
        self._tick_length = tick_length
        self._accumulated = 0.0
        self._mark: float | None = None

    @property
    def tick_length(self) -> float:
        return self._tick_length

    @property
    def accumulated(self) -> float:
        return self._accumulated

    @property
    def marked(self) -> bool:
        return self._mark is not None

    def mark(self) -> None:
        self._mark = self._time_fn()

    def unmark(self) -> None:
        self._mark = None

    def collect(self) -> float:
        """Fold time elapsed since the last mark into the accumulator.

        Returns the amount added. Does nothing while unmarked, so time spent
        paused is never counted.
        """
        if self._mark is None:
            return 0.0
        now = self._time_fn()
        delta = max(0.0, now - self._mark)
        self._mark = now
        self._accumulated += delta
        return delta

    def consume(self) -> bool:
        """Take exactly one tick_length from the accumulator, keeping the surplus."""
        if self._accumulated < self._tick_length:
            return False
        self._accumulated -= self._tick_length
        return True

    def reset(self, accumulated: float = 0.0) -> None:
        self._accumulated = accumulated
        self._mark = None


class ManualTime:
    """Time source that only moves when advanced. Use as Clock(time_fn=...)."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            return self._now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("cannot move time backwards")
        with self._lock:
            self._now += seconds
            return self._now

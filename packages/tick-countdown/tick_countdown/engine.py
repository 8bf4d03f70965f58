"""TickEngine - the countdown state machine and its suspendable timing loop."""
from __future__ import annotations

import logging
import threading
import time

from tick_countdown.clock import Clock, TimeFn
from tick_countdown.config import CountdownConfig
from tick_countdown.dispatch import TaskDispatcher
from tick_countdown.registry import TaskRegistry
from tick_countdown.signals import FINISHED, TICK, EventChannel
from tick_countdown.types import AlreadyRunningError, CountdownState

logger = logging.getLogger(__name__)

_ALIVE = (CountdownState.RUNNING, CountdownState.PAUSED)


class TickEngine:
    """Drives one countdown on a single execution context.

    State flows ``IDLE -> RUNNING <-> PAUSED -> FINISHED``, with
    ``DESTROYED`` reachable from any state. All state lives behind one
    condition variable; the loop thread waits on it for the next quantum
    and while paused, and every transition notifies it, so pause and stop
    are seen on the very next wake-up.

    Ticks are fired outside the lock: drain the registry's removal queue,
    dispatch due tasks, publish ``tick`` (and ``finished`` at zero), flush.
    """

    def __init__(
        self,
        duration: int,
        registry: TaskRegistry,
        channel: EventChannel,
        dispatcher: TaskDispatcher,
        config: CountdownConfig | None = None,
        time_fn: TimeFn = time.monotonic,
    ) -> None:
        self._config = config or CountdownConfig()
        self._duration = duration
        self._seconds_left = duration
        self._registry = registry
        self._channel = channel
        self._dispatcher = dispatcher
        self._clock = Clock(time_fn, self._config.tick_length)
        self._state = CountdownState.IDLE
        self._cond = threading.Condition()
        self._thread: threading.Thread | None = None

    # --- Queries ---

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def seconds_left(self) -> int:
        with self._cond:
            return self._seconds_left

    @property
    def state(self) -> CountdownState:
        with self._cond:
            return self._state

    @property
    def accumulated(self) -> float:
        with self._cond:
            return self._clock.accumulated

    # --- Transitions ---

    def start(self) -> None:
        with self._cond:
            if self._state in _ALIVE:
                raise AlreadyRunningError("Countdown is already running")
            if self._state is CountdownState.DESTROYED:
                return
            if self._state is CountdownState.FINISHED:
                self._seconds_left = self._duration
                self._clock.reset()
            self._state = CountdownState.RUNNING
            self._clock.mark()
            self._thread = threading.Thread(
                target=self._run,
                name=f"{self._config.thread_name}-{id(self):x}",
                daemon=True,
            )
            self._thread.start()
            seconds_left = self._seconds_left
        logger.debug("countdown started with %ds left", seconds_left)

    def pause(self) -> bool:
        """Suspend counting. Returns False if the countdown was not running."""
        with self._cond:
            if self._state is not CountdownState.RUNNING:
                return False
            self._clock.collect()
            self._clock.unmark()
            self._state = CountdownState.PAUSED
            self._cond.notify_all()
        logger.debug("countdown paused")
        return True

    def resume(self) -> bool:
        """Continue counting. Returns False if the countdown was not paused."""
        with self._cond:
            if self._state is not CountdownState.PAUSED:
                return False
            self._clock.mark()
            self._state = CountdownState.RUNNING
            self._cond.notify_all()
        logger.debug("countdown resumed")
        return True

    def stop(self) -> None:
        """Abort for good. The loop exits on its next wake-up without notifying."""
        with self._cond:
            self._state = CountdownState.DESTROYED
            self._clock.unmark()
            self._cond.notify_all()
        logger.debug("countdown destroyed")

    def restore(self, seconds_left: int, accumulated: float) -> None:
        """Overwrite progress. Only valid while no execution context is alive."""
        with self._cond:
            self._seconds_left = seconds_left
            self._clock.reset(accumulated)
            if seconds_left == 0:
                self._state = CountdownState.FINISHED
            else:
                self._state = CountdownState.IDLE

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the execution context to end. True if it has."""
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # --- Loop ---

    def _next_second(self) -> int | None:
        """Block until one countdown second is consumed.

        Returns the new seconds_left, or None once destroyed.
        """
        with self._cond:
            while True:
                while self._state is CountdownState.PAUSED:
                    self._cond.wait()
                if self._state is not CountdownState.RUNNING:
                    return None
                self._clock.collect()
                if self._clock.consume():
                    self._seconds_left -= 1
                    return self._seconds_left
                self._cond.wait(self._config.quantum)

    def _fire(self, seconds_left: int) -> None:
        with self._cond:
            if self._state is CountdownState.DESTROYED:
                return
        self._registry.drain()
        for task in self._registry.due(seconds_left):
            self._dispatcher.dispatch(task, seconds_left)
        self._channel.publish(TICK, seconds_left=seconds_left)
        if seconds_left == 0:
            self._channel.publish(FINISHED)
        self._channel.flush()

    def _run(self) -> None:
        while True:
            seconds_left = self._next_second()
            if seconds_left is None:
                return
            self._fire(seconds_left)
            if seconds_left == 0:
                break
        with self._cond:
            if self._state in _ALIVE:
                self._state = CountdownState.FINISHED
        logger.debug("countdown finished")

"""Countdown - the public handle: lifecycle, validation, and state queries."""
from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from tick_countdown.clock import TimeFn
from tick_countdown.config import CountdownConfig
from tick_countdown.dispatch import ErrorHook, TaskDispatcher
from tick_countdown.engine import TickEngine
from tick_countdown.registry import TaskRegistry
from tick_countdown.signals import SIGNALS, EventChannel, Handler
from tick_countdown.types import (
    CountdownState,
    InvalidArgumentError,
    ObjectDestroyedError,
    SnapshotError,
    TaskCallback,
    TaskId,
    is_finite_real,
    require_whole_positive,
)

logger = logging.getLogger(__name__)

_SNAPSHOT_VERSION = 1


class Countdown:
    """A pausable countdown of ``duration`` whole seconds with interval tasks.

    ``start()`` spawns one execution context that consumes a second at a
    time until zero. Each second it runs the tasks whose interval divides the
    seconds left, then notifies ``"tick"`` subscribers with
    ``{"seconds_left": n}``. After the zero tick, ``"finished"`` subscribers
    are notified once. Ticks go ``duration - 1`` down to ``0``.

    After ``destroy()`` every method and property except ``destroyed``
    raises ObjectDestroyedError.
    """

    def __init__(
        self,
        duration: int,
        config: CountdownConfig | None = None,
        time_fn: TimeFn = time.monotonic,
    ) -> None:
        require_whole_positive(duration, "duration")
        self._config = config or CountdownConfig()
        self._registry = TaskRegistry()
        self._channel = EventChannel()
        self._dispatcher = TaskDispatcher(
            max_workers=self._config.task_workers,
            thread_name=self._config.thread_name,
        )
        self._engine = TickEngine(
            duration,
            self._registry,
            self._channel,
            self._dispatcher,
            config=self._config,
            time_fn=time_fn,
        )
        self._destroyed = False

    def _check_alive(self) -> None:
        if self._destroyed:
            raise ObjectDestroyedError("Countdown object is destroyed")

    # --- Lifecycle ---

    def start(self) -> None:
        """Begin counting. Restarts from ``duration`` once finished.

        Raises AlreadyRunningError while running or paused.
        """
        self._check_alive()
        self._engine.start()

    def pause(self) -> None:
        self._check_alive()
        if not self._engine.pause():
            logger.warning("Countdown is already paused (state: %s)", self._engine.state.value)

    def resume(self) -> None:
        self._check_alive()
        if not self._engine.resume():
            logger.warning("Countdown is already active (state: %s)", self._engine.state.value)

    def destroy(self) -> None:
        """Stop the execution context, detach observers, and drop every task."""
        self._check_alive()
        self._destroyed = True
        self._channel.close()
        self._dispatcher.shutdown()
        self._engine.stop()
        self._registry.clear()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the execution context and in-flight task callbacks.

        Returns True if both have ended within ``timeout`` seconds. From inside
        a task callback, that callback itself is not waited for.
        """
        self._check_alive()
        deadline = None if timeout is None else time.monotonic() + timeout
        if not self._engine.join(timeout):
            return False
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        return self._dispatcher.join(remaining)

    # --- Tasks ---

    def add_task(self, interval: int, callback: TaskCallback, *args: Any) -> TaskId:
        """Run ``callback(seconds_left, *args)`` on ticks where seconds_left % interval == 0."""
        self._check_alive()
        return self._registry.add(interval, callback, args).id

    def remove_task(self, task_id: TaskId) -> None:
        """Remove a task before the next tick. Safe to call from any callback."""
        self._check_alive()
        if task_id is None:
            raise InvalidArgumentError("task_id is missing")
        self._registry.remove(task_id)

    def task_ids(self) -> list[TaskId]:
        self._check_alive()
        return self._registry.ids()

    # --- Observers ---

    def subscribe(self, signal_name: str, handler: Handler) -> None:
        self._check_alive()
        if signal_name not in SIGNALS:
            raise InvalidArgumentError(f"Unknown signal {signal_name!r}")
        if handler is None or not callable(handler):
            raise InvalidArgumentError("handler must be callable")
        self._channel.subscribe(signal_name, handler)

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        self._check_alive()
        self._channel.unsubscribe(signal_name, handler)

    def on_task_error(self, hook: ErrorHook) -> None:
        """Call ``hook(task_id, exc)`` whenever a task callback raises."""
        self._check_alive()
        self._dispatcher.on_error(hook)

    # --- Queries ---

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def duration(self) -> int:
        self._check_alive()
        return self._engine.duration

    @property
    def seconds_left(self) -> int:
        self._check_alive()
        return self._engine.seconds_left

    @property
    def state(self) -> CountdownState:
        self._check_alive()
        return self._engine.state

    def is_paused(self) -> bool:
        return self.state is CountdownState.PAUSED

    def is_running(self) -> bool:
        return self.state is CountdownState.RUNNING

    def is_finished(self) -> bool:
        return self.state is CountdownState.FINISHED

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        """Serialize progress. Tasks and subscribers are not included."""
        self._check_alive()
        return {
            "version": _SNAPSHOT_VERSION,
            "duration": self._engine.duration,
            "seconds_left": self._engine.seconds_left,
            "accumulated": self._engine.accumulated,
        }

    def restore(self, data: Mapping[str, Any]) -> None:
        """Restore progress into a countdown that is idle or finished."""
        self._check_alive()
        if not isinstance(data, Mapping):
            raise SnapshotError(f"Snapshot must be a mapping, got {type(data).__name__}")
        version = data.get("version")
        if version != _SNAPSHOT_VERSION:
            raise SnapshotError(
                f"Unsupported snapshot version {version!r}, expected {_SNAPSHOT_VERSION}"
            )
        duration = data.get("duration")
        if duration != self._engine.duration:
            raise SnapshotError(
                f"Duration mismatch: snapshot has {duration}, countdown has {self._engine.duration}"
            )
        state = self._engine.state
        if state not in (CountdownState.IDLE, CountdownState.FINISHED):
            raise SnapshotError(f"Cannot restore while {state.value}")
        seconds_left = data.get("seconds_left")
        if isinstance(seconds_left, bool) or not isinstance(seconds_left, int):
            raise SnapshotError(f"seconds_left must be a whole number, got {seconds_left!r}")
        if not 0 <= seconds_left <= duration:
            raise SnapshotError(f"seconds_left {seconds_left} outside 0..{duration}")
        accumulated = data.get("accumulated", 0.0)
        if not is_finite_real(accumulated) or accumulated < 0:
            raise SnapshotError(
                f"accumulated must be a finite non-negative number, got {accumulated!r}"
            )
        self._engine.restore(seconds_left, float(accumulated))


def make_countdown(
    duration: int,
    config: CountdownConfig | None = None,
    time_fn: TimeFn = time.monotonic,
) -> Countdown:
    """Create a countdown of ``duration`` whole seconds. It starts idle."""
    return Countdown(duration, config=config, time_fn=time_fn)

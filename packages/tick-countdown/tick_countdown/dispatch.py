"""TaskDispatcher - fire-and-forget execution of due tasks on a thread pool."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable

from tick_countdown.types import ScheduledTask, TaskId

logger = logging.getLogger(__name__)

ErrorHook = Callable[[TaskId, BaseException], None]


class TaskDispatcher:
    """Runs task callbacks off the tick loop.

    A callback's failure is isolated to that callback: it is logged and
    passed to the error hooks, and never reaches the caller of
    ``dispatch``. A callback that never returns occupies one worker and
    nothing else.
    """

    def __init__(self, max_workers: int = 4, thread_name: str = "tick-countdown") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=f"{thread_name}-task",
        )
        self._pending: dict[Future[None], object] = {}
        self._local = threading.local()
        self._hooks: list[ErrorHook] = []
        self._lock = threading.Lock()
        self._shutdown = False

    def on_error(self, hook: ErrorHook) -> None:
        with self._lock:
            self._hooks.append(hook)

    def dispatch(self, task: ScheduledTask, seconds_left: int) -> None:
        """Submit ``task.callback(seconds_left, *task.args)`` and return."""
        with self._lock:
            if self._shutdown:
                return
            token = object()
            future = self._executor.submit(self._call, token, task, seconds_left)
            self._pending[future] = token
        future.add_done_callback(lambda f: self._harvest(task, seconds_left, f))

    def join(self, timeout: float | None = None) -> bool:
        """Wait for in-flight callbacks. Returns True if none are left.

        Called from inside a callback, that callback itself is not waited for.
        """
        own = getattr(self._local, "token", None)
        with self._lock:
            pending = {f for f, token in self._pending.items() if token is not own}
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self) -> None:
        """Stop accepting work and cancel callbacks that have not started.

        Does not wait for running callbacks.
        """
        with self._lock:
            self._shutdown = True
            self._hooks.clear()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _call(self, token: object, task: ScheduledTask, seconds_left: int) -> None:
        self._local.token = token
        try:
            task.callback(seconds_left, *task.args)
        finally:
            self._local.token = None

    def _harvest(self, task: ScheduledTask, seconds_left: int, future: Future[None]) -> None:
        with self._lock:
            self._pending.pop(future, None)
            hooks = list(self._hooks)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        logger.error(
            "task %s failed at %ds left",
            task.id,
            seconds_left,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        for hook in hooks:
            try:
                hook(task.id, exc)
            except Exception:
                logger.exception("task error hook %r failed", hook)

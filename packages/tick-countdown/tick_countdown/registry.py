"""TaskRegistry - ordered interval tasks with deferred removal."""
from __future__ import annotations

import threading
import uuid
from typing import Any, Iterator

from tick_countdown.types import (
    InvalidArgumentError,
    ScheduledTask,
    TaskCallback,
    TaskId,
    TaskNotFoundError,
    require_whole_positive,
)


class TaskRegistry:
    """Holds ScheduledTask entries in insertion order.

    Removal is two-phase: ``remove()`` only marks the task, and ``drain()``
    deletes marked tasks before the next dispatch pass. A marked task is
    invisible to lookups and never reported as due, so a callback can remove
    itself or a sibling while a pass is in flight.
    """

    def __init__(self) -> None:
        self._tasks: dict[TaskId, ScheduledTask] = {}
        self._removal_queue: list[TaskId] = []
        self._lock = threading.Lock()

    def add(
        self, interval: int, callback: TaskCallback, args: tuple[Any, ...] = (),
    ) -> ScheduledTask:
        """Validate and append a task. Returns the stored task."""
        require_whole_positive(interval, "interval")
        if callback is None:
            raise InvalidArgumentError("callback is missing")
        if not callable(callback):
            raise InvalidArgumentError(
                f"callback must be callable, got {type(callback).__name__}"
            )
        task = ScheduledTask(
            id=str(uuid.uuid4()), interval=interval, callback=callback, args=tuple(args),
        )
        with self._lock:
            self._tasks[task.id] = task
        return task

    def remove(self, task_id: TaskId) -> None:
        """Mark a task for removal at the next drain."""
        with self._lock:
            if task_id not in self._tasks or task_id in self._removal_queue:
                raise TaskNotFoundError(task_id, f"No task with id {task_id!r}")
            self._removal_queue.append(task_id)

    def drain(self) -> int:
        """Delete every marked task. Returns the number removed."""
        with self._lock:
            queue = self._removal_queue
            self._removal_queue = []
            for task_id in queue:
                self._tasks.pop(task_id, None)
        return len(queue)

    def get(self, task_id: TaskId) -> ScheduledTask:
        with self._lock:
            if task_id in self._tasks and task_id not in self._removal_queue:
                return self._tasks[task_id]
        raise TaskNotFoundError(task_id, f"No task with id {task_id!r}")

    def due(self, seconds_left: int) -> Iterator[ScheduledTask]:
        """Yield live tasks whose interval divides seconds_left, in insertion order.

        Iterates a snapshot. Marks are checked lazily, so a task marked by an
        earlier task in the same pass is skipped.
        """
        with self._lock:
            snapshot = list(self._tasks.values())
        for task in snapshot:
            if task.is_due(seconds_left) and not self.is_marked(task.id):
                yield task

    def is_marked(self, task_id: TaskId) -> bool:
        with self._lock:
            return task_id in self._removal_queue

    def ids(self) -> list[TaskId]:
        with self._lock:
            return [tid for tid in self._tasks if tid not in self._removal_queue]

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()
            self._removal_queue.clear()

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return task_id in self._tasks and task_id not in self._removal_queue

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks) - len(self._removal_queue)

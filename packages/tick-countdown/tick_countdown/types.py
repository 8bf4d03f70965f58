"""Shared types and errors for the countdown."""
from __future__ import annotations

import enum
import math
import numbers
from dataclasses import dataclass
from typing import Any, Callable

TaskId = str

TaskCallback = Callable[..., None]


class CountdownState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"
    DESTROYED = "destroyed"


@dataclass(frozen=True, slots=True)
class ScheduledTask:
    """Interval callback. Fires on every tick where seconds_left % interval == 0."""

    id: TaskId
    interval: int
    callback: TaskCallback
    args: tuple[Any, ...] = ()

    def is_due(self, seconds_left: int) -> bool:
        return seconds_left % self.interval == 0


class CountdownError(Exception):
    """Base class for countdown errors."""


class InvalidArgumentError(CountdownError, ValueError):
    """Raised on missing or wrong-shaped input."""


class ObjectDestroyedError(CountdownError, RuntimeError):
    """Raised when operating on a countdown after destroy()."""


class TaskNotFoundError(CountdownError, KeyError):
    """Raised when removing a task id that is unknown or already removed."""

    def __init__(self, task_id: TaskId, message: str) -> None:
        self.task_id = task_id
        super().__init__(message)


class AlreadyRunningError(CountdownError, RuntimeError):
    """Raised by start() while the execution context is alive."""


class SnapshotError(CountdownError):
    """Raised on restore failures (version mismatch, restore while running)."""


def require_whole_positive(value: Any, name: str) -> int:
    """Return value if it is a positive int, else raise InvalidArgumentError."""
    if value is None:
        raise InvalidArgumentError(f"{name} is missing")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(
            f"{name} must be a whole number, got {type(value).__name__}"
        )
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be positive, got {value}")
    return value


def is_finite_real(value: Any) -> bool:
    """True for int or float values other than bool, nan and the infinities."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)

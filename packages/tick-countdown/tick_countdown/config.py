"""Countdown configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass

from tick_countdown.types import (
    InvalidArgumentError,
    is_finite_real,
    require_whole_positive,
)


@dataclass(frozen=True)
class CountdownConfig:
    """Immutable configuration for a countdown.

    Attributes:
        tick_length: Clock seconds that make up one countdown second.
        quantum: Longest sleep between accumulator updates, in clock seconds.
        task_workers: ThreadPoolExecutor max workers for task callbacks.
        thread_name: Prefix for the execution context and worker threads.
    """

    tick_length: float = 1.0
    quantum: float = 1.0 / 60
    task_workers: int = 4
    thread_name: str = "tick-countdown"

    def __post_init__(self) -> None:
        if not is_finite_real(self.tick_length) or self.tick_length <= 0:
            raise InvalidArgumentError(
                f"tick_length must be a finite positive number, got {self.tick_length!r}"
            )
        if not is_finite_real(self.quantum) or self.quantum <= 0:
            raise InvalidArgumentError(
                f"quantum must be a finite positive number, got {self.quantum!r}"
            )
        require_whole_positive(self.task_workers, "task_workers")

"""tick-countdown - Pausable countdown with interval tasks."""
from __future__ import annotations

from tick_countdown.clock import Clock, ManualTime
from tick_countdown.config import CountdownConfig
from tick_countdown.countdown import Countdown, make_countdown
from tick_countdown.dispatch import TaskDispatcher
from tick_countdown.engine import TickEngine
from tick_countdown.registry import TaskRegistry
from tick_countdown.signals import FINISHED, TICK, EventChannel
from tick_countdown.types import (
    AlreadyRunningError,
    CountdownError,
    CountdownState,
    InvalidArgumentError,
    ObjectDestroyedError,
    ScheduledTask,
    SnapshotError,
    TaskId,
    TaskNotFoundError,
)

__all__ = [
    "AlreadyRunningError",
    "Clock",
    "Countdown",
    "CountdownConfig",
    "CountdownError",
    "CountdownState",
    "EventChannel",
    "FINISHED",
    "InvalidArgumentError",
    "ManualTime",
    "ObjectDestroyedError",
    "ScheduledTask",
    "SnapshotError",
    "TICK",
    "TaskDispatcher",
    "TaskId",
    "TaskNotFoundError",
    "TaskRegistry",
    "TickEngine",
    "make_countdown",
]

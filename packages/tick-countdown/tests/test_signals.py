"""Unit tests for EventChannel."""
from __future__ import annotations

import logging

from tick_countdown import FINISHED, TICK, EventChannel


def test_publish_and_flush():
    """Published signals reach handlers only on flush."""
    channel = EventChannel()
    received = []

    def handler(signal_name: str, data: dict) -> None:
        received.append((signal_name, data))

    channel.subscribe(TICK, handler)
    channel.publish(TICK, seconds_left=4)
    assert received == []

    channel.flush()
    assert received == [(TICK, {"seconds_left": 4})]


def test_flush_preserves_publish_order():
    channel = EventChannel()
    received = []

    def handler(signal_name: str, data: dict) -> None:
        received.append(signal_name)

    channel.subscribe(TICK, handler)
    channel.subscribe(FINISHED, handler)
    channel.publish(TICK, seconds_left=0)
    channel.publish(FINISHED)
    channel.flush()

    assert received == [TICK, FINISHED]


def test_no_replay_for_late_subscribers():
    channel = EventChannel()
    channel.publish(TICK, seconds_left=2)
    channel.flush()

    received = []
    channel.subscribe(TICK, lambda name, data: received.append(data))
    channel.flush()
    assert received == []


def test_unsubscribe():
    channel = EventChannel()
    received = []

    def handler(signal_name: str, data: dict) -> None:
        received.append(data)

    channel.subscribe(TICK, handler)
    channel.unsubscribe(TICK, handler)
    channel.unsubscribe(TICK, handler)  # Second removal is a no-op
    channel.unsubscribe(FINISHED, handler)
    channel.publish(TICK, seconds_left=1)
    channel.flush()
    assert received == []


def test_failing_handler_does_not_block_others(caplog):
    channel = EventChannel()
    received = []

    def broken(signal_name: str, data: dict) -> None:
        raise RuntimeError("boom")

    channel.subscribe(TICK, broken)
    channel.subscribe(TICK, lambda name, data: received.append(data))

    with caplog.at_level(logging.ERROR, logger="tick_countdown.signals"):
        channel.publish(TICK, seconds_left=3)
        channel.flush()

    assert received == [{"seconds_left": 3}]
    assert "boom" in caplog.text


def test_clear_drops_queue():
    channel = EventChannel()
    received = []
    channel.subscribe(TICK, lambda name, data: received.append(data))
    channel.publish(TICK, seconds_left=1)
    channel.clear()
    channel.flush()
    assert received == []


def test_close_suppresses_delivery():
    """After close, publish, flush and subscribe are silently ignored."""
    channel = EventChannel()
    received = []
    channel.subscribe(TICK, lambda name, data: received.append(data))
    channel.publish(TICK, seconds_left=5)

    channel.close()
    assert channel.closed

    channel.flush()
    channel.publish(TICK, seconds_left=4)
    channel.subscribe(TICK, lambda name, data: received.append(data))
    channel.flush()
    assert received == []


def test_close_from_handler_stops_remaining_signals():
    channel = EventChannel()
    received = []

    def closer(signal_name: str, data: dict) -> None:
        received.append(signal_name)
        channel.close()

    channel.subscribe(TICK, closer)
    channel.subscribe(FINISHED, lambda name, data: received.append(name))
    channel.publish(TICK, seconds_left=0)
    channel.publish(FINISHED)
    channel.flush()

    assert received == [TICK]

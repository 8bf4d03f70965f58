"""Tests for TaskDispatcher."""
from __future__ import annotations

import logging
import threading

from tick_countdown import ScheduledTask, TaskDispatcher


def _task(callback, *args, interval=1, task_id="t1"):
    return ScheduledTask(id=task_id, interval=interval, callback=callback, args=args)


class TestDispatch:
    def test_callback_receives_seconds_left_then_bound_args(self):
        """The callback gets seconds_left then its bound arguments."""
        dispatcher = TaskDispatcher()
        calls = []

        dispatcher.dispatch(_task(lambda *a: calls.append(a), "x", 7), 4)

        assert dispatcher.join(timeout=2)
        assert calls == [(4, "x", 7)]
        dispatcher.shutdown()

    def test_dispatch_does_not_block_on_slow_callback(self):
        """dispatch() returns while a callback is still running."""
        dispatcher = TaskDispatcher(max_workers=2)
        release = threading.Event()
        started = threading.Event()

        def stuck(seconds_left):
            started.set()
            release.wait(5)

        dispatcher.dispatch(_task(stuck), 3)
        assert started.wait(2)
        assert dispatcher.join(timeout=0.05) is False

        calls = []
        dispatcher.dispatch(_task(lambda s: calls.append(s), task_id="t2"), 2)
        release.set()
        assert dispatcher.join(timeout=2)
        assert calls == [2]
        dispatcher.shutdown()

    def test_join_with_nothing_pending(self):
        """join() with no work returns True at once."""
        dispatcher = TaskDispatcher()
        assert dispatcher.join(timeout=0)
        dispatcher.shutdown()


class TestErrors:
    def test_failure_is_logged_and_reported(self, caplog):
        """A raising callback is logged and passed to the error hooks."""
        dispatcher = TaskDispatcher()
        reported = []
        done = threading.Event()

        def hook(task_id, exc):
            reported.append((task_id, str(exc)))
            done.set()

        def broken(seconds_left):
            raise ValueError("bad task")

        dispatcher.on_error(hook)
        with caplog.at_level(logging.ERROR, logger="tick_countdown.dispatch"):
            dispatcher.dispatch(_task(broken, task_id="broken"), 1)
            assert done.wait(2)

        assert reported == [("broken", "bad task")]
        assert "broken" in caplog.text
        dispatcher.shutdown()

    def test_failing_hook_does_not_stop_other_hooks(self):
        """A raising error hook does not stop the hooks after it."""
        dispatcher = TaskDispatcher()
        done = threading.Event()

        def bad_hook(task_id, exc):
            raise RuntimeError("hook failed")

        dispatcher.on_error(bad_hook)
        dispatcher.on_error(lambda task_id, exc: done.set())

        def broken(seconds_left):
            raise ValueError("bad task")

        dispatcher.dispatch(_task(broken), 1)
        assert done.wait(2)
        dispatcher.shutdown()


class TestShutdown:
    def test_dispatch_after_shutdown_is_ignored(self):
        """Nothing runs once the dispatcher is shut down."""
        dispatcher = TaskDispatcher()
        dispatcher.shutdown()
        calls = []
        dispatcher.dispatch(_task(lambda s: calls.append(s)), 1)
        assert dispatcher.join(timeout=0)
        assert calls == []


class TestJoin:
    def test_join_from_inside_callback_returns(self):
        """A callback joining its own dispatcher does not wait for itself."""
        dispatcher = TaskDispatcher()
        results = []
        done = threading.Event()

        def joiner(seconds_left):
            results.append(dispatcher.join(timeout=2))
            done.set()

        dispatcher.dispatch(_task(joiner), 1)
        assert done.wait(5)
        assert results == [True]
        assert dispatcher.join(timeout=2)
        dispatcher.shutdown()

    def test_join_from_inside_callback_still_waits_for_others(self):
        """Only the caller's own callback is skipped."""
        dispatcher = TaskDispatcher(max_workers=2)
        release = threading.Event()
        started = threading.Event()
        results = []
        done = threading.Event()

        def stuck(seconds_left):
            started.set()
            release.wait(5)

        def joiner(seconds_left):
            results.append(dispatcher.join(timeout=0.05))
            done.set()

        dispatcher.dispatch(_task(stuck), 2)
        assert started.wait(2)
        dispatcher.dispatch(_task(joiner, task_id="t2"), 1)
        assert done.wait(2)
        assert results == [False]
        release.set()
        assert dispatcher.join(timeout=2)
        dispatcher.shutdown()

import logging
import threading

import pytest

from emojigallery.services.dispatch import ImmediateDispatcher, ThreadedDispatcher


def test_immediate_dispatcher_runs_inline():
    d = ImmediateDispatcher()
    fut = d.submit_io(lambda: 42)
    assert fut.done() and fut.result() == 42
    ran = []
    d.post_ui(lambda: ran.append(threading.current_thread()))
    assert ran == [threading.current_thread()]


def test_immediate_dispatcher_captures_exceptions():
    d = ImmediateDispatcher()

    def fail():
        raise ValueError("nope")

    fut = d.submit_io(fail)
    with pytest.raises(ValueError):
        fut.result()


def test_threaded_dispatcher_runs_io_off_ui_thread():
    d = ThreadedDispatcher()
    try:
        worker = d.submit_io(threading.current_thread).result(timeout=5)
        assert worker is not threading.current_thread()
        assert worker.name.startswith("prefs-io")
    finally:
        d.shutdown()


def test_threaded_dispatcher_ui_posts_wait_for_drain():
    d = ThreadedDispatcher()
    try:
        order = []
        done = d.submit_io(lambda: d.post_ui(lambda: order.append("ui")))
        done.result(timeout=5)
        assert order == []
        assert d.pending()
        assert d.drain() == 1
        assert order == ["ui"]
    finally:
        d.shutdown()


def test_threaded_dispatcher_preserves_submission_order():
    d = ThreadedDispatcher()
    try:
        seen = []
        futures = [d.submit_io(lambda i=i: seen.append(i)) for i in range(20)]
        for f in futures:
            f.result(timeout=5)
        assert seen == list(range(20))
    finally:
        d.shutdown()


def test_drain_with_timeout_waits_for_first_callback():
    d = ThreadedDispatcher()
    try:
        ran = []
        d.submit_io(lambda: d.post_ui(lambda: ran.append(1)))
        assert d.drain(timeout=5) == 1
        assert ran == [1]
        assert d.drain() == 0
    finally:
        d.shutdown()


def test_drain_runs_remaining_callbacks_after_failure(caplog):
    d = ThreadedDispatcher()
    try:
        seen = []

        def broken():
            raise RuntimeError("boom")

        d.post_ui(broken)
        d.post_ui(lambda: seen.append("after"))
        with caplog.at_level(logging.ERROR):
            assert d.drain() == 2
        assert seen == ["after"]
        assert "UI callback failed" in caplog.text
        assert not d.pending()
    finally:
        d.shutdown()

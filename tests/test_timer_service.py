import threading

import pytest

from src.utils.timer_service import TimerService


def test_callback_fires_once_after_delay():
    service = TimerService()
    fired = threading.Event()
    calls = []

    def callback():
        calls.append(threading.current_thread().name)
        fired.set()

    service.schedule(callback, 0.01)

    assert fired.wait(timeout=2.0)
    assert len(calls) == 1


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        TimerService().schedule(lambda: None, -1)


def test_shutdown_cancels_pending():
    service = TimerService()
    calls = []
    service.schedule(lambda: calls.append(1), 30)
    assert service.pending_count() == 1

    service.shutdown()

    assert service.pending_count() == 0
    assert calls == []


def test_failing_callback_does_not_escape_timer_thread():
    service = TimerService()
    done = threading.Event()

    def broken():
        try:
            raise RuntimeError("boom")
        finally:
            done.set()

    service.schedule(broken, 0)
    assert done.wait(timeout=2.0)

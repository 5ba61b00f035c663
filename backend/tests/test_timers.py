import logging

from quizroom.game.timers import SocketIOScheduler, TimerHandle, TimerSet


class FakeSocketIO:
    def __init__(self):
        self.tasks = []
        self.sleeps = []

    def start_background_task(self, target, *args, **kwargs):
        self.tasks.append(target)

    def sleep(self, seconds):
        self.sleeps.append(seconds)


def test_call_later_runs_in_background_task():
    sio = FakeSocketIO()
    calls = []

    SocketIOScheduler(sio).call_later(2.5, lambda: calls.append("fired"))
    assert calls == []

    sio.tasks[0]()
    assert sio.sleeps == [2.5]
    assert calls == ["fired"]


def test_cancelled_call_later_never_fires():
    sio = FakeSocketIO()
    calls = []

    handle = SocketIOScheduler(sio).call_later(1, lambda: calls.append("fired"))
    handle.cancel()
    sio.tasks[0]()

    assert calls == []


def test_call_every_stops_once_cancelled():
    sio = FakeSocketIO()
    calls = []
    handle = None

    def tick():
        calls.append(len(calls))
        if len(calls) == 3:
            handle.cancel()

    handle = SocketIOScheduler(sio).call_every(1, tick)
    sio.tasks[0]()

    assert calls == [0, 1, 2]
    assert sio.sleeps == [1, 1, 1, 1]


def test_failing_callback_is_logged(caplog):
    sio = FakeSocketIO()

    def boom():
        raise RuntimeError("boom")

    SocketIOScheduler(sio).call_later(0, boom)
    with caplog.at_level(logging.ERROR, logger="quizroom.game.timers"):
        sio.tasks[0]()

    assert "timer callback failed" in caplog.text


def test_timer_set_cancel_all():
    timers = TimerSet()
    first = timers.add(TimerHandle())
    second = timers.add(TimerHandle())
    assert len(timers) == 2

    second.cancel()
    assert len(timers) == 1

    timers.cancel_all()
    assert first.cancelled and second.cancelled
    assert len(timers) == 0

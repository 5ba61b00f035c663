import heapq
import itertools

import pytest

from quizroom.config import Config
from quizroom.game.models import Question, SessionSettings
from quizroom.game.registry import RoomRegistry
from quizroom.game.timers import TimerHandle
from quizroom.routes import REGISTRY_EXTENSION
from quizroom.server import create_app


class ManualScheduler:
    """Virtual clock: timers fire only when a test calls ``advance``."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._seq = itertools.count()
        self._queue = []

    def now(self):
        return self._now

    def call_later(self, delay, callback):
        return self._push(delay, callback, None, TimerHandle())

    def call_every(self, interval, callback):
        return self._push(interval, callback, interval, TimerHandle())

    def advance(self, seconds):
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, handle, callback, interval = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, due)
            callback()
            if interval is not None and not handle.cancelled:
                self._push(interval, callback, interval, handle)
        self._now = target

    def pending(self):
        return sum(1 for entry in self._queue if not entry[2].cancelled)

    def _push(self, delay, callback, interval, handle):
        heapq.heappush(self._queue, (self._now + delay, next(self._seq), handle, callback, interval))
        return handle


class RecordingTransport:
    def __init__(self):
        self.broadcasts = []
        self.sent = []
        self.disconnected = []
        self.dropped = set()

    def broadcast(self, room_code, event, payload=None):
        self.broadcasts.append((room_code, event, payload))

    def send(self, identity, event, payload=None):
        self.sent.append((identity, event, payload))

    def disconnect(self, identity):
        self.disconnected.append(identity)
        self.dropped.add(identity)

    def is_connected(self, identity):
        return identity not in self.dropped

    def payloads(self, event):
        return [payload for (_, name, payload) in self.broadcasts if name == event]

    def names(self):
        return [name for (_, name, _) in self.broadcasts]

    def clear(self):
        self.broadcasts.clear()
        self.sent.clear()


def make_question(text="2 + 2?", correct="4", time_limit=10, options=("3", "4", "5", "22")):
    return Question(
        text=text,
        options=tuple(options),
        correct_option=correct,
        time_limit_sec=time_limit,
    )


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    AUTO_ADVANCE = True
    NOTIFY_PLAYERS_ON_HOST_DISCONNECT = False


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def settings():
    return SessionSettings()


@pytest.fixture()
def registry(transport, scheduler, settings):
    return RoomRegistry(transport, scheduler, settings)


@pytest.fixture()
def app_and_socketio(scheduler):
    return create_app(TestConfig, scheduler=scheduler)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def app_registry(flask_app):
    return flask_app.extensions[REGISTRY_EXTENSION]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app, socketio):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect

    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass

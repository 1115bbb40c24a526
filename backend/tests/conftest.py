import os
import sys

import pytest

# Ensure the backend root (containing the `brokenphone` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from brokenphone.config import Config
from brokenphone.game.service import RoomRegistry


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = 'threading'
    DEFAULT_MAX_ROUNDS = 3
    DEFAULT_SECONDS_PER_TURN = 60
    MIN_SECONDS_PER_TURN = 10
    DEFAULT_MODE = 'classic'
    REVEAL_GRACE_SEC = 5
    MAX_TEXT_LEN = 140
    ROOM_CODE_LENGTH = 6


class RecordingTransport:
    """Collects everything the core would put on the wire."""

    def __init__(self):
        self.sent = []

    def broadcast(self, room_id, event, payload):
        self.sent.append(('room', room_id, event, payload))

    def send(self, player_id, event, payload):
        self.sent.append(('player', player_id, event, payload))

    def events(self, name):
        return [s for s in self.sent if s[2] == name]

    def payloads(self, name):
        return [s[3] for s in self.events(name)]

    def to_player(self, player_id, name):
        return [s[3] for s in self.sent if s[0] == 'player' and s[1] == player_id and s[2] == name]

    def clear(self):
        self.sent = []


class ManualRunner:
    """Records countdown tasks instead of running them; tests drive timers by hand."""

    def __init__(self):
        self.tasks = []

    def start_background_task(self, fn, *args):
        self.tasks.append((fn, args))

    def sleep(self, seconds):
        pass


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def runner():
    return ManualRunner()


@pytest.fixture()
def registry(transport, runner):
    return RoomRegistry(transport=transport, runner=runner, config=TestConfig)


@pytest.fixture()
def make_room(registry):
    def _make(players=('A', 'B', 'C'), **settings):
        settings.setdefault('maxRounds', 1)
        settings.setdefault('secondsPerTurn', 60)
        room = registry.create_room(settings)
        for pid in players:
            registry.join_room(room.id, pid, f'player-{pid}')
        return room

    return _make


@pytest.fixture()
def run_out():
    """Tick a countdown down to zero, firing its expiry once."""

    def _run_out(timer):
        while timer.tick():
            pass

    return _run_out


@pytest.fixture()
def started_room(registry, make_room, transport):
    room = make_room()
    registry.start_game(room.id, 'A')
    transport.clear()
    return room


@pytest.fixture()
def flask_app(runner):
    from brokenphone.server import create_app

    application, sio = create_app(TestConfig, runner=runner)
    application.extensions['test_socketio'] = sio
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def socketio(flask_app):
    return flask_app.extensions['test_socketio']


@pytest.fixture()
def sio_clients(flask_app, socketio):
    created = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _connect
    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass

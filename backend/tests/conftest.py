import os
import sys
import pytest

# Ensure the backend root (containing the `tictactoe` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tictactoe import create_app, get_services, socketio
from tictactoe.services.games.store import GameStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SESSION_TIMEOUT_SEC = 2
    SWEEP_INTERVAL_SEC = 2
    CLIENT_POLL_SEC = 1
    BOARD_SIZE = 3
    MAX_PLAYERS = 2
    MAX_NAME_LENGTH = 32


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    return GameStore(session_timeout=2, clock=clock)


@pytest.fixture()
def flask_app():
    return create_app(TestConfig)


@pytest.fixture()
def services(flask_app):
    return get_services(flask_app)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_client(flask_app):
    """Independent HTTP clients, one cookie jar per simulated user."""
    def factory():
        return flask_app.test_client()
    return factory


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass

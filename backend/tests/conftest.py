import os
import sys
import pytest

# Ensure the backend root (containing the `partyvote` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from partyvote import create_app, socketio
from partyvote.services.session import SessionStateMachine


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    HOST = '127.0.0.1'
    PORT = 3000
    PUBLIC_URL = 'http://party.test:3000'
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    MIN_PLAYERS = 2
    MAX_NAME_LENGTH = 20
    ENFORCE_HOST_ROLE = True
    HOST_KEY = ''
    PURGE_VOTES_ON_DISCONNECT = True


class KeepVotesConfig(TestConfig):
    PURGE_VOTES_ON_DISCONNECT = False


class HostKeyConfig(TestConfig):
    HOST_KEY = 'letmein'


class OpenHostConfig(TestConfig):
    ENFORCE_HOST_ROLE = False


def _build_app(config_class):
    application = create_app(config_class)
    with application.app_context():
        yield application


@pytest.fixture()
def flask_app():
    yield from _build_app(TestConfig)


@pytest.fixture()
def keep_votes_app():
    yield from _build_app(KeepVotesConfig)


@pytest.fixture()
def host_key_app():
    yield from _build_app(HostKeyConfig)


@pytest.fixture()
def open_host_app():
    yield from _build_app(OpenHostConfig)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def session():
    """A bare state machine, no Flask involved."""
    return SessionStateMachine(min_players=2)


@pytest.fixture()
def sio_factory():
    """Open Socket.IO test clients against one of the app fixtures."""
    opened = []

    def _open(app):
        test_client = socketio.test_client(app, namespace='/')
        opened.append(test_client)
        return test_client

    yield _open
    for test_client in opened:
        try:
            if test_client.is_connected('/'):
                test_client.disconnect(namespace='/')
        except Exception:
            pass


def events(test_client, name=None):
    """Drain a client's queue, optionally keeping only ``name`` packets."""
    received = test_client.get_received('/')
    if name is None:
        return received
    return [pkt for pkt in received if pkt['name'] == name]


def join(test_client, name):
    """Join as a player and return the connection id the server assigned."""
    test_client.emit('join-game', name, namespace='/')
    joined = events(test_client, 'player-joined')
    assert joined, f"{name} did not join"
    return joined[-1]['args'][0]['id']


def become_host(test_client, payload=None):
    if payload is None:
        test_client.emit('join-host', namespace='/')
    else:
        test_client.emit('join-host', payload, namespace='/')
    return events(test_client)

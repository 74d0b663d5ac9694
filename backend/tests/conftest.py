import os
import sys
import pytest

# Ensure the backend root (containing the `overunder` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from overunder import create_app, registry, socketio
from overunder.api.games import _last_guess_at


# Counts in tests/data/counts; Delta is below the eligibility threshold
DATASET_COUNTS = {'Alpha': 150, 'Beta': 150, 'Gamma': 9999, 'Delta': 50}


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    DATASET_PATH = os.path.join(CURRENT_DIR, 'data', 'counts')
    MIN_COUNT = 100
    RANDOM_SEED = 7
    GUESS_DEBOUNCE_MS = 0
    SESSION_GRACE_SEC = 0.0
    LOG_LEVEL = 'DEBUG'


class ScriptedRng:
    """Stands in for random.Random: hands out preset indices in order."""

    def __init__(self, *picks):
        self.picks = list(picks)
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        pick = self.picks.pop(0) if self.picks else 0
        assert 0 <= pick < stop
        return pick


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    _last_guess_at.clear()
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


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
    except RuntimeError:
        pass


@pytest.fixture()
def game_registry(flask_app):
    return registry


@pytest.fixture()
def scripted_rng():
    return ScriptedRng

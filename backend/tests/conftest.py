import os
import random
import sys
import pytest

# Ensure the backend root (containing the `wordplay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from wordplay import create_app, db, socketio
from wordplay.services.games import UnscrambleRules, WordChainRules
from wordplay.services.sessions import ManualClock, SessionRegistry
from wordplay.services.sessions.engine import SessionEngine
from wordplay.services.sessions.factory import get_engine
from wordplay.services.words import WordListProvider


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_CLOCK = 'manual'
    JOIN_DURATION_SEC = 30
    JOIN_REMINDERS_SEC = (10,)
    ROUND_REMINDERS_SEC = (5,)
    ROUND_GRACE_SEC = 2
    SESSION_WATCHDOG_SEC = 600
    UNSCRAMBLE_ROUND_SEC = 20
    UNSCRAMBLE_ROUNDS = 3


TEST_WORDS = """
cat
dog
apple
bread
chair
garden
balance
cabinet
elephant
adventure
beautiful
lighthouse
"""


class RecordingSink:
    """Notification sink that keeps everything it is asked to send."""

    def __init__(self):
        self.messages = []
        self.reactions = []
        self.states = []

    def send_text(self, channel_id, text, mentions=()):
        self.messages.append((channel_id, text, list(mentions)))
        return True

    def send_reaction(self, channel_id, message_ref, emoji):
        if not message_ref:
            return False
        self.reactions.append((channel_id, message_ref, emoji))
        return True

    def send_state(self, channel_id, state):
        self.states.append((channel_id, state))
        return True

    def texts(self, channel_id=None):
        return [text for ch, text, _ in self.messages if channel_id is None or ch == channel_id]


class StubDictionary:
    def __init__(self, words=(), accept_all=False, on_lookup=None):
        self.words = {w.upper() for w in words}
        self.accept_all = accept_all
        self.on_lookup = on_lookup
        self.calls = []

    def is_valid_word(self, word):
        self.calls.append(word)
        if self.on_lookup:
            self.on_lookup(word)
        return self.accept_all or word.upper() in self.words


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def app_engine(flask_app):
    engine = get_engine(flask_app)
    engine.rules['wordchain'].dictionary = StubDictionary(accept_all=True)
    return engine


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


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def words(tmp_path):
    path = tmp_path / 'words.txt'
    path.write_text(TEST_WORDS, encoding='utf-8')
    return WordListProvider(str(path))


@pytest.fixture()
def dictionary():
    return StubDictionary(accept_all=True)


@pytest.fixture()
def make_engine(clock, sink, words, dictionary):
    """Build an isolated engine on the manual clock.

    Keyword arguments prefixed ``unscramble_`` / ``wordchain_`` go to the
    rules; the rest go to the engine. ``engine.records`` collects finished
    session summaries.
    """
    def _make(**overrides):
        unscramble_kwargs = {'rounds': 3, 'round_seconds': 20, 'grace': 2, 'rng': random.Random(7)}
        wordchain_kwargs = {'max_rounds': 10, 'grace': 2, 'rng': random.Random(7)}
        engine_kwargs = {
            'join_seconds': 30,
            'join_reminders': (10,),
            'round_reminders': (5,),
            'watchdog_seconds': 600,
            'leaderboard_every': 5,
        }
        for key, value in overrides.items():
            if key.startswith('unscramble_'):
                unscramble_kwargs[key[len('unscramble_'):]] = value
            elif key.startswith('wordchain_'):
                wordchain_kwargs[key[len('wordchain_'):]] = value
            else:
                engine_kwargs[key] = value
        word_source = unscramble_kwargs.pop('words', words)
        rules = {
            'unscramble': UnscrambleRules(word_source, **unscramble_kwargs),
            'wordchain': WordChainRules(wordchain_kwargs.pop('dictionary', dictionary), **wordchain_kwargs),
        }
        records = []
        engine = SessionEngine(SessionRegistry(clock), rules, sink, on_finished=records.append, **engine_kwargs)
        engine.records = records
        return engine

    return _make

import os


def _env_seconds(name, default):
    """Parse a comma separated list of seconds, e.g. "30,10"."""
    raw = os.environ.get(name, default)
    return tuple(int(part) for part in raw.split(',') if part.strip())


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///wordplay.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = [o for o in os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173').split(',') if o]

    # Session timers (seconds)
    JOIN_DURATION_SEC = int(os.environ.get('JOIN_DURATION_SEC', '60'))
    JOIN_REMINDERS_SEC = _env_seconds('JOIN_REMINDERS_SEC', '30,10')
    ROUND_REMINDERS_SEC = _env_seconds('ROUND_REMINDERS_SEC', '10')
    ROUND_GRACE_SEC = float(os.environ.get('ROUND_GRACE_SEC', '3'))
    # Hard cap on a session's lifetime, whatever state it is in
    SESSION_WATCHDOG_SEC = int(os.environ.get('SESSION_WATCHDOG_SEC', '900'))
    LEADERBOARD_EVERY_ROUNDS = int(os.environ.get('LEADERBOARD_EVERY_ROUNDS', '5'))
    # 'socketio' runs timers as background tasks; 'manual' is driven by tests
    SESSION_CLOCK = os.environ.get('SESSION_CLOCK', 'socketio')

    # Unscramble
    UNSCRAMBLE_ROUNDS = int(os.environ.get('UNSCRAMBLE_ROUNDS', '10'))
    UNSCRAMBLE_ROUND_SEC = int(os.environ.get('UNSCRAMBLE_ROUND_SEC', '30'))
    UNSCRAMBLE_MIN_PLAYERS = int(os.environ.get('UNSCRAMBLE_MIN_PLAYERS', '1'))
    # (last round of tier, min length, max length); the last tier is open ended
    UNSCRAMBLE_TIERS = ((3, 5, 6), (7, 7, 8), (None, 9, 12))

    # Word chain
    WORDCHAIN_MIN_PLAYERS = int(os.environ.get('WORDCHAIN_MIN_PLAYERS', '2'))
    WORDCHAIN_MAX_ROUNDS = int(os.environ.get('WORDCHAIN_MAX_ROUNDS', '40'))
    # (last round of tier, min length range, turn seconds)
    WORDCHAIN_TIERS = ((5, (3, 4), 30), (10, (4, 6), 25), (None, (5, 8), 20))

    # Word sources
    WORDLIST_PATH = os.environ.get('WORDLIST_PATH') or os.path.join(
        os.path.dirname(os.path.abspath(__file__)), 'wordplay', 'data', 'words.txt'
    )
    DICTIONARY_API_URL = os.environ.get('DICTIONARY_API_URL', 'https://api.dictionaryapi.dev/api/v2/entries/en')
    DICTIONARY_TIMEOUT_SEC = float(os.environ.get('DICTIONARY_TIMEOUT_SEC', '3'))
    DICTIONARY_CACHE_SIZE = int(os.environ.get('DICTIONARY_CACHE_SIZE', '2048'))

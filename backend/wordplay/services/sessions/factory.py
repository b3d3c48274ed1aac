from functools import partial

from flask import current_app

from ..games import UnscrambleRules, WordChainRules
from ..games import unscramble, wordchain
from ..words import DictionaryValidator, WordListProvider
from .engine import SessionEngine
from .history import record_session
from .notify import SocketIONotifier
from .registry import SessionRegistry
from .timers import ManualClock, SocketIOClock

EXTENSION_KEY = 'wordplay'


def build_engine(app, socketio) -> SessionEngine:
    """Wire one engine (and its own registry) from the app config."""
    cfg = app.config
    if cfg.get('SESSION_CLOCK', 'socketio') == 'manual':
        clock = ManualClock()
    else:
        clock = SocketIOClock(socketio)
    registry = SessionRegistry(clock)

    words = WordListProvider(cfg['WORDLIST_PATH'])
    dictionary = DictionaryValidator(
        cfg.get('DICTIONARY_API_URL', 'https://api.dictionaryapi.dev/api/v2/entries/en'),
        timeout=float(cfg.get('DICTIONARY_TIMEOUT_SEC', 3)),
        cache_size=int(cfg.get('DICTIONARY_CACHE_SIZE', 2048)),
    )
    grace = float(cfg.get('ROUND_GRACE_SEC', 3))
    rules = {
        UnscrambleRules.name: UnscrambleRules(
            words,
            rounds=int(cfg.get('UNSCRAMBLE_ROUNDS', 10)),
            round_seconds=int(cfg.get('UNSCRAMBLE_ROUND_SEC', 30)),
            min_players=int(cfg.get('UNSCRAMBLE_MIN_PLAYERS', 1)),
            grace=grace,
            tiers=cfg.get('UNSCRAMBLE_TIERS', unscramble.DEFAULT_TIERS),
        ),
        WordChainRules.name: WordChainRules(
            dictionary,
            max_rounds=int(cfg.get('WORDCHAIN_MAX_ROUNDS', 40)),
            min_players=int(cfg.get('WORDCHAIN_MIN_PLAYERS', 2)),
            grace=grace,
            tiers=cfg.get('WORDCHAIN_TIERS', wordchain.DEFAULT_TIERS),
        ),
    }
    return SessionEngine(
        registry,
        rules,
        SocketIONotifier(socketio, logger_=app.logger),
        join_seconds=float(cfg.get('JOIN_DURATION_SEC', 60)),
        join_reminders=cfg.get('JOIN_REMINDERS_SEC', (30, 10)),
        round_reminders=cfg.get('ROUND_REMINDERS_SEC', (10,)),
        watchdog_seconds=float(cfg.get('SESSION_WATCHDOG_SEC', 900)),
        leaderboard_every=int(cfg.get('LEADERBOARD_EVERY_ROUNDS', 5)),
        on_finished=partial(record_session, app),
        logger=app.logger,
    )


def get_engine(app=None) -> SessionEngine:
    return (app or current_app).extensions[EXTENSION_KEY]

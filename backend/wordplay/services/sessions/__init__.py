"""Per-channel game sessions: state, timers, registry and the engine.

The engine lives in ``sessions.engine`` and is imported from there; it
depends on the game rules, which in turn depend on the session types below.
"""

from .errors import (
    ConfigurationError,
    InvalidTransition,
    SessionAlreadyActive,
    SessionError,
    SessionNotFound,
    UnknownGame,
)
from .registry import SessionRegistry
from .session import Phase, Player, Session
from .timers import ManualClock, SessionTimers, SocketIOClock

__all__ = [
    'ConfigurationError',
    'InvalidTransition',
    'SessionAlreadyActive',
    'SessionError',
    'SessionNotFound',
    'UnknownGame',
    'SessionRegistry',
    'Phase',
    'Player',
    'Session',
    'ManualClock',
    'SessionTimers',
    'SocketIOClock',
]

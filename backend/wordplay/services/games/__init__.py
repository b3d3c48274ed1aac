"""Game rules: round payloads, answer checks and scoring.

Rules are pure(ish): they read and update a session's game fields but never
touch timers, the registry or the transport. The session engine drives them.
"""

from .base import GameRules, Verdict
from .unscramble import UnscrambleRules
from .wordchain import WordChainRules

__all__ = ['GameRules', 'Verdict', 'UnscrambleRules', 'WordChainRules']

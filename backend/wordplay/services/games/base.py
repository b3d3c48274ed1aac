from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..sessions.session import Session


@dataclass(frozen=True)
class Verdict:
    """Outcome of checking one submission against the current round."""
    accepted: bool
    word: str
    reason: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, word: str) -> 'Verdict':
        return cls(True, word)

    @classmethod
    def reject(cls, word: str, reason: str, message: Optional[str] = None) -> 'Verdict':
        return cls(False, word, reason, message)


def tier_for(round_no: int, tiers: Iterable[tuple]) -> tuple:
    """Pick the tier whose last round is >= round_no; ``None`` means open ended."""
    tiers = list(tiers)
    for tier in tiers:
        last_round = tier[0]
        if last_round is None or round_no <= last_round:
            return tier
    return tiers[-1]


class GameRules:
    """Pure rules for one game type.

    The engine owns timing and state transitions; rules only decide what a
    round asks for, whether a submission answers it, and what happens to
    scores and turn order.
    """
    name = ''
    turn_based = False
    needs_lookup = False

    def __init__(self, min_players: int, max_rounds: int, grace: float):
        self.min_players = min_players
        self.max_rounds = max_rounds
        self.grace = grace

    def prepare(self) -> None:
        """Load anything the game needs up front; raise ConfigurationError if unusable."""

    def new_round(self, session: Session):
        raise NotImplementedError

    def prompt(self, session: Session) -> Tuple[str, List[str]]:
        raise NotImplementedError

    def may_submit(self, session: Session, player_id: str) -> bool:
        return player_id in session.players

    def check(self, session: Session, text: str) -> Verdict:
        raise NotImplementedError

    def lookup(self, verdict: Verdict) -> Verdict:
        """Slow follow-up check, run without the engine lock held."""
        return verdict

    def accept(self, session: Session, player_id: str, verdict: Verdict) -> str:
        raise NotImplementedError

    def timeout(self, session: Session) -> str:
        raise NotImplementedError

    def is_over(self, session: Session) -> bool:
        return False

    def winner(self, session: Session) -> Optional[str]:
        standings = session.standings()
        if standings and standings[0].score > 0:
            return standings[0].player_id
        return None

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..sessions.session import Session
from .base import GameRules, Verdict, tier_for

# (last round of tier, min length, max length)
DEFAULT_TIERS = ((3, 5, 6), (7, 7, 8), (None, 9, 12))


@dataclass(frozen=True)
class UnscramblePayload:
    target: str
    scrambled: str
    duration: int

    def public(self) -> dict:
        return {'scrambled': self.scrambled, 'length': len(self.target), 'duration': self.duration}


def scramble(word: str, rng: Optional[random.Random] = None) -> str:
    """Shuffle the letters of ``word`` so the result differs from it.

    Words of one or two letters may come back unchanged, as may words made of
    a single repeated letter (no other arrangement exists).
    """
    rng = rng or random
    letters = list(word)
    if len(word) <= 2 or len(set(word)) == 1:
        rng.shuffle(letters)
        return ''.join(letters)
    for _ in range(50):
        rng.shuffle(letters)
        candidate = ''.join(letters)
        if candidate != word:
            return candidate
    # A one step rotation always differs once two distinct letters exist
    return word[1:] + word[0]


class UnscrambleRules(GameRules):
    name = 'unscramble'

    def __init__(self, words, rounds: int = 10, round_seconds: int = 30, min_players: int = 1,
                 grace: float = 3, tiers=DEFAULT_TIERS, rng: Optional[random.Random] = None):
        super().__init__(min_players=min_players, max_rounds=rounds, grace=grace)
        self.words = words
        self.round_seconds = round_seconds
        self.tiers = tiers
        self.rng = rng or random.Random()

    def prepare(self) -> None:
        self.words.load_words()

    def length_range(self, round_no: int) -> Tuple[int, int]:
        _, low, high = tier_for(round_no, self.tiers)
        return low, high

    def new_round(self, session: Session) -> UnscramblePayload:
        low, high = self.length_range(session.round)
        target = self.words.random_word(low, high, self.rng)
        return UnscramblePayload(target=target, scrambled=scramble(target, self.rng), duration=self.round_seconds)

    def prompt(self, session: Session) -> Tuple[str, List[str]]:
        payload = session.payload
        text = (
            f"🔤 *Round {session.round}/{self.max_rounds}*\n"
            f"Unscramble: *{' '.join(payload.scrambled)}*\n"
            f"({len(payload.target)} letters, {payload.duration}s)"
        )
        return text, []

    def check(self, session: Session, text: str) -> Verdict:
        candidate = (text or '').strip().upper()
        if candidate == session.payload.target:
            return Verdict.ok(candidate)
        return Verdict.reject(candidate, 'wrong')

    def accept(self, session: Session, player_id: str, verdict: Verdict) -> str:
        player = session.players[player_id]
        player.score += 1
        return f"✅ {player.name} got it: *{verdict.word}* (+1, total {player.score})"

    def timeout(self, session: Session) -> str:
        return f"⌛ Time's up! The word was *{session.payload.target}*"

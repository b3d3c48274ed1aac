import random
import string
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..sessions.session import Session
from .base import GameRules, Verdict, tier_for

RARE_LETTERS = 'JQVXZ'
LETTERS = [c for c in string.ascii_uppercase if c not in RARE_LETTERS]

# (last round of tier, (min length low, min length high), turn seconds)
DEFAULT_TIERS = ((5, (3, 4), 30), (10, (4, 6), 25), (None, (5, 8), 20))


@dataclass(frozen=True)
class ChainPayload:
    letter: str
    min_length: int
    duration: int
    player_id: str

    def public(self) -> dict:
        return {
            'letter': self.letter,
            'min_length': self.min_length,
            'duration': self.duration,
            'player_id': self.player_id,
        }


class WordChainRules(GameRules):
    """Players take turns naming a word that starts with a given letter.

    Missing a turn knocks the player out; the last one standing wins.
    """
    name = 'wordchain'
    turn_based = True
    needs_lookup = True

    def __init__(self, dictionary, max_rounds: int = 40, min_players: int = 2, grace: float = 3,
                 tiers=DEFAULT_TIERS, letters=None, rng: Optional[random.Random] = None):
        super().__init__(min_players=min_players, max_rounds=max_rounds, grace=grace)
        self.dictionary = dictionary
        self.tiers = tiers
        self.letters = list(letters or LETTERS)
        self.rng = rng or random.Random()

    def new_round(self, session: Session) -> ChainPayload:
        _, (low, high), seconds = tier_for(session.round, self.tiers)
        return ChainPayload(
            letter=self.rng.choice(self.letters),
            min_length=self.rng.randint(low, high),
            duration=seconds,
            player_id=session.current_player_id,
        )

    def prompt(self, session: Session) -> Tuple[str, List[str]]:
        payload = session.payload
        player = session.players[payload.player_id]
        text = (
            f"🔗 *Round {session.round}* - {player.name}, your turn!\n"
            f"Word starting with *{payload.letter}*, at least *{payload.min_length}* letters "
            f"({payload.duration}s)"
        )
        return text, [player.player_id]

    def may_submit(self, session: Session, player_id: str) -> bool:
        return player_id == session.current_player_id

    def check(self, session: Session, text: str) -> Verdict:
        payload = session.payload
        candidate = (text or '').strip().upper()
        if not candidate.startswith(payload.letter):
            return Verdict.reject(candidate, 'letter', f"❌ *{candidate}* doesn't start with *{payload.letter}*")
        if len(candidate) < payload.min_length:
            return Verdict.reject(
                candidate, 'length',
                f"❌ *{candidate}* is too short, need at least {payload.min_length} letters",
            )
        if candidate in session.used_words:
            return Verdict.reject(candidate, 'used', f"❌ *{candidate}* was already used this game")
        return Verdict.ok(candidate)

    def lookup(self, verdict: Verdict) -> Verdict:
        if not verdict.accepted:
            return verdict
        if self.dictionary.is_valid_word(verdict.word):
            return verdict
        return Verdict.reject(verdict.word, 'dictionary', f"❌ *{verdict.word}* is not in the dictionary")

    def accept(self, session: Session, player_id: str, verdict: Verdict) -> str:
        player = session.players[player_id]
        session.used_words.add(verdict.word)
        player.score += 1
        session.advance_turn()
        return f"✅ *{verdict.word}* accepted, {player.name} +1"

    def timeout(self, session: Session) -> str:
        player_id = session.eliminate_current()
        name = session.players[player_id].name if player_id in session.players else player_id
        return f"💥 {name} ran out of time and is eliminated! ({len(session.turn_order)} left)"

    def is_over(self, session: Session) -> bool:
        return len(session.turn_order) <= 1

    def winner(self, session: Session) -> Optional[str]:
        if len(session.turn_order) == 1:
            return session.turn_order[0]
        remaining = [session.players[pid] for pid in session.turn_order]
        remaining.sort(key=lambda p: -p.score)
        if remaining and remaining[0].score > 0:
            return remaining[0].player_id
        return None

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set
import uuid

from .errors import InvalidTransition
from .timers import SessionTimers


class Phase(Enum):
    JOINING = 'joining'
    PLAYING = 'playing'
    FINISHED = 'finished'


_PHASE_ORDER = {Phase.JOINING: 0, Phase.PLAYING: 1, Phase.FINISHED: 2}


@dataclass
class Player:
    player_id: str
    name: str
    joined_at: float
    score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'name': self.name,
            'score': self.score,
            'joined_at': self.joined_at,
        }


@dataclass
class Session:
    """One running game bound to a channel.

    Only the engine mutates a session. Timers scheduled for it capture
    ``token`` and ``generation`` and compare them again when they fire.
    """
    channel_id: str
    game: str
    created_at: float
    timers: SessionTimers
    token: str = field(default_factory=lambda: uuid.uuid4().hex)
    phase: Phase = Phase.JOINING
    generation: int = 0
    round: int = 0
    players: Dict[str, Player] = field(default_factory=dict)
    turn_order: List[str] = field(default_factory=list)
    current_index: int = 0
    eliminated: List[str] = field(default_factory=list)
    used_words: Set[str] = field(default_factory=set)
    payload: Any = None
    turn_based: bool = False
    outcome: Optional[str] = None
    winner_id: Optional[str] = None
    phase_history: List[Phase] = field(default_factory=lambda: [Phase.JOINING])

    def enter(self, phase: Phase) -> None:
        if _PHASE_ORDER[phase] <= _PHASE_ORDER[self.phase]:
            raise InvalidTransition(f"{self.channel_id}: {self.phase.value} -> {phase.value}")
        if self.phase is Phase.JOINING and phase is Phase.FINISHED:
            raise InvalidTransition(f"{self.channel_id}: cannot finish before any round started")
        self.phase = phase
        self.phase_history.append(phase)

    def bump_generation(self) -> int:
        self.generation += 1
        return self.generation

    @property
    def current_player_id(self) -> Optional[str]:
        if not self.turn_order:
            return None
        return self.turn_order[self.current_index % len(self.turn_order)]

    def advance_turn(self) -> None:
        if self.turn_order:
            self.current_index = (self.current_index + 1) % len(self.turn_order)

    def eliminate_current(self) -> Optional[str]:
        """Drop the player on turn; the next player slides into the same index."""
        if not self.turn_order:
            return None
        idx = self.current_index % len(self.turn_order)
        player_id = self.turn_order.pop(idx)
        self.eliminated.append(player_id)
        self.current_index = idx % len(self.turn_order) if self.turn_order else 0
        return player_id

    def standings(self) -> List[Player]:
        # Stable sort keeps join order among equal scores
        return sorted(self.players.values(), key=lambda p: -p.score)

    def to_dict(self) -> Dict[str, Any]:
        payload = self.payload.public() if self.payload is not None else None
        return {
            'channel_id': self.channel_id,
            'game': self.game,
            'phase': self.phase.value,
            'generation': self.generation,
            'round': self.round,
            'players': [p.to_dict() for p in self.players.values()],
            'turn_order': list(self.turn_order),
            'current_player_id': self.current_player_id if self.turn_based else None,
            'eliminated': list(self.eliminated),
            'round_payload': payload,
            'created_at': self.created_at,
            'timers': self.timers.active_slots(),
        }

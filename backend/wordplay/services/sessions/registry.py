from typing import Dict, List, Optional

from .errors import SessionAlreadyActive
from .session import Session
from .timers import SessionTimers


class SessionRegistry:
    """Channel id -> the one live session for that channel.

    The registry does no locking of its own; the engine serialises every
    handler turn, so a get-check-create sequence inside one turn is atomic.
    """

    def __init__(self, clock):
        self.clock = clock
        self._sessions: Dict[str, Session] = {}

    def create(self, channel_id: str, game: str, created_at: Optional[float] = None) -> Session:
        if channel_id in self._sessions:
            raise SessionAlreadyActive(channel_id)
        session = Session(
            channel_id=channel_id,
            game=game,
            created_at=self.clock.now() if created_at is None else created_at,
            timers=SessionTimers(self.clock),
        )
        self._sessions[channel_id] = session
        return session

    def get(self, channel_id: str) -> Optional[Session]:
        return self._sessions.get(channel_id)

    def remove(self, channel_id: str, session: Optional[Session] = None) -> bool:
        """Drop the channel's session. Safe to call any number of times.

        When ``session`` is given, only that exact instance is removed, so a
        late cleanup never evicts a newer session on the same channel.
        """
        current = self._sessions.get(channel_id)
        if current is None:
            return False
        if session is not None and current is not session:
            return False
        del self._sessions[channel_id]
        return True

    def channels(self) -> List[str]:
        return list(self._sessions)

    def __contains__(self, channel_id) -> bool:
        return channel_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

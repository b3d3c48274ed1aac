import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


def channel_room(channel_id: str) -> str:
    return f"channel:{channel_id}"


class SocketIONotifier:
    """Delivers session messages to the channel's Socket.IO room.

    Delivery is best effort: a failed emit is logged and dropped, never
    retried, and never raised into the game.
    """

    def __init__(self, socketio, namespace: str = '/ws', logger_=None):
        self.socketio = socketio
        self.namespace = namespace
        self.logger = logger_ or logger

    def send_text(self, channel_id: str, text: str, mentions: Iterable[str] = ()) -> bool:
        return self._emit('session_message', channel_id, {
            'channel_id': channel_id,
            'text': text,
            'mentions': list(mentions),
        })

    def send_reaction(self, channel_id: str, message_ref: Optional[str], emoji: str) -> bool:
        if not message_ref:
            return False
        return self._emit('reaction', channel_id, {
            'channel_id': channel_id,
            'message_ref': message_ref,
            'emoji': emoji,
        })

    def send_state(self, channel_id: str, state: dict) -> bool:
        return self._emit('session_update', channel_id, state)

    def _emit(self, event: str, channel_id: str, payload: dict) -> bool:
        try:
            self.socketio.emit(event, payload, to=channel_room(channel_id), namespace=self.namespace)
            return True
        except Exception as exc:
            self.logger.warning(f"[notify-failed] channel={channel_id} event={event} error={exc}")
            return False

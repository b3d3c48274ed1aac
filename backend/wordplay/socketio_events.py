from flask_socketio import join_room, leave_room, emit
from wordplay import socketio
from wordplay.services.sessions import (
    ConfigurationError,
    SessionAlreadyActive,
    UnknownGame,
)
from wordplay.services.sessions.factory import get_engine
from wordplay.services.sessions.notify import channel_room


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_subscribe(data):
    channel_id = (data or {}).get('channel_id')
    if not channel_id:
        emit('error', {'message': 'channel_id is required'})
        return
    room = channel_room(channel_id)
    join_room(room)
    emit('subscribed', {'room': room, 'state': get_engine().state(channel_id)})


def handle_unsubscribe(data):
    channel_id = (data or {}).get('channel_id')
    if not channel_id:
        emit('error', {'message': 'channel_id is required'})
        return
    room = channel_room(channel_id)
    leave_room(room)
    emit('unsubscribed', {'room': room})


def handle_create_session(data):
    data = data or {}
    channel_id = data.get('channel_id')
    game = (data.get('game') or 'unscramble').lower()
    if not channel_id:
        emit('error', {'message': 'channel_id is required'})
        return
    try:
        session = get_engine().create(channel_id, game)
    except (UnknownGame, SessionAlreadyActive, ConfigurationError) as exc:
        emit('error', {'message': str(exc), 'channel_id': channel_id})
        return
    emit('session_created', session.to_dict())


def handle_join_session(data):
    data = data or {}
    channel_id, player_id = data.get('channel_id'), data.get('player_id')
    if not all([channel_id, player_id]):
        emit('error', {'message': 'channel_id and player_id are required'})
        return
    result = get_engine().join(channel_id, str(player_id), data.get('name'))
    emit('join_result', {'channel_id': channel_id, 'player_id': player_id, 'result': result})


def handle_submit_answer(data):
    data = data or {}
    channel_id, player_id, text = data.get('channel_id'), data.get('player_id'), data.get('text')
    if not all([channel_id, player_id, text]):
        emit('error', {'message': 'channel_id, player_id and text are required'})
        return
    result = get_engine().answer(channel_id, str(player_id), str(text), data.get('message_ref'))
    emit('answer_result', {'channel_id': channel_id, 'player_id': player_id, 'result': result})


def handle_force_end(data):
    data = data or {}
    channel_id = data.get('channel_id')
    if not channel_id:
        emit('error', {'message': 'channel_id is required'})
        return
    ended = get_engine().force_end(channel_id, data.get('requester_id'))
    emit('force_end_result', {'channel_id': channel_id, 'ended': ended})


def handle_ping(data):
    emit('pong', data or {})


HANDLERS = {
    'connect': handle_connect,
    'subscribe': handle_subscribe,
    'unsubscribe': handle_unsubscribe,
    'create_session': handle_create_session,
    'join_session': handle_join_session,
    'submit_answer': handle_submit_answer,
    'force_end': handle_force_end,
    'ping': handle_ping,
}


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace='/ws')
    if testing:
        for event, handler in HANDLERS.items():
            socketio.on_event(event, handler, namespace='/')

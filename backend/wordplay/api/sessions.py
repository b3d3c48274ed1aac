from flask import Blueprint, jsonify, request, current_app

from wordplay.services.sessions import (
    ConfigurationError,
    SessionAlreadyActive,
    SessionNotFound,
    UnknownGame,
)
from wordplay.services.sessions.factory import get_engine
from wordplay.services.sessions.history import session_history


sessions = Blueprint('sessions', __name__)


@sessions.errorhandler(SessionNotFound)
def handle_session_not_found(exc):
    return jsonify({'error': 'No game in this channel', 'channel_id': exc.channel_id}), 404


@sessions.route('', methods=['GET'])
def list_sessions():
    return jsonify({'channels': get_engine().active_channels()})


@sessions.route('/<string:channel_id>', methods=['POST'])
def create_session(channel_id):
    data = request.get_json(silent=True) or {}
    game = (data.get('game') or 'unscramble').lower()
    engine = get_engine()
    try:
        session = engine.create(channel_id, game)
    except UnknownGame:
        return jsonify({'error': f'Unknown game: {game}'}), 400
    except SessionAlreadyActive:
        return jsonify({'error': 'A game is already running in this channel'}), 409
    except ConfigurationError as exc:
        return jsonify({'error': str(exc)}), 422
    current_app.logger.info(f"[api-create] channel={channel_id} game={game} by={data.get('requester_id')}")
    return jsonify(session.to_dict()), 201


@sessions.route('/<string:channel_id>', methods=['GET'])
def get_session_state(channel_id):
    state = get_engine().state(channel_id)
    if state is None:
        raise SessionNotFound(channel_id)
    return jsonify(state)


@sessions.route('/<string:channel_id>/join', methods=['POST'])
def join_session(channel_id):
    data = request.get_json(silent=True) or {}
    player_id = data.get('player_id')
    if not player_id:
        return jsonify({'error': 'player_id is required'}), 400
    result = get_engine().join(channel_id, str(player_id), data.get('name'))
    if result == 'no_session':
        raise SessionNotFound(channel_id)
    if result == 'closed':
        return jsonify({'error': 'Joining is closed for this game'}), 409
    status = 201 if result == 'joined' else 200
    return jsonify({'result': result, 'state': get_engine().state(channel_id)}), status


@sessions.route('/<string:channel_id>/answer', methods=['POST'])
def submit_answer(channel_id):
    data = request.get_json(silent=True) or {}
    player_id = data.get('player_id')
    text = data.get('text')
    if not all([player_id, text]):
        return jsonify({'error': 'player_id and text are required'}), 400
    result = get_engine().answer(channel_id, str(player_id), str(text), data.get('message_ref'))
    return jsonify({'result': result})


@sessions.route('/<string:channel_id>/end', methods=['POST'])
def end_session(channel_id):
    data = request.get_json(silent=True) or {}
    ended = get_engine().force_end(channel_id, data.get('requester_id'))
    if not ended:
        raise SessionNotFound(channel_id)
    return jsonify({'ended': True})


@sessions.route('/<string:channel_id>/history', methods=['GET'])
def get_history(channel_id):
    try:
        limit = max(1, min(100, int(request.args.get('limit', 20))))
    except ValueError:
        limit = 20
    return jsonify([r.to_dict() for r in session_history(channel_id, limit)])

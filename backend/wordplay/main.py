from flask import Blueprint, jsonify

from wordplay.services.sessions.factory import get_engine

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the wordplay session server!'})


@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'active_sessions': len(get_engine().active_channels())})

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Models must be imported before create_all / migrations see them
    from wordplay import models  # noqa: F401

    # One engine (and one session registry) per app instance
    from wordplay.services.sessions.factory import EXTENSION_KEY, build_engine
    flask_app.extensions[EXTENSION_KEY] = build_engine(flask_app, socketio)

    from wordplay.main import main
    flask_app.register_blueprint(main)

    from wordplay.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from wordplay.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('wordlist-stats')
    def wordlist_stats_command():
        """Loads the word list and prints how many words each unscramble tier can draw from."""
        from wordplay.services.sessions import ConfigurationError
        from wordplay.services.sessions.factory import get_engine
        rules = get_engine(flask_app).rules['unscramble']
        try:
            total = len(rules.words.load_words())
        except ConfigurationError as exc:
            raise click.ClickException(str(exc))
        click.echo(f"{total} words in {rules.words.path}")
        for last_round, low, high in rules.tiers:
            label = f"rounds up to {last_round}" if last_round is not None else 'later rounds'
            click.echo(f"  {label}: {low}-{high} letters -> {len(rules.words.words_between(low, high))} words")

    flask_app.cli.add_command(wordlist_stats_command)

    return flask_app

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One ephemeral session per process, owned by the state machine
    from partyvote.network import resolve_public_url
    from partyvote.services.session import SessionStateMachine
    flask_app.extensions['party_session'] = SessionStateMachine.from_config(
        flask_app.config, logger=flask_app.logger
    )
    flask_app.extensions['party_public_url'] = resolve_public_url(flask_app.config)

    from partyvote.main import main
    flask_app.register_blueprint(main)

    from partyvote.api.session import session_api
    flask_app.register_blueprint(session_api, url_prefix='/api/session')

    # Register Socket.IO event handlers
    # Importing here ensures the handlers bind to the initialized socketio instance
    from partyvote.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('public-url')
    def public_url_command():
        """Prints the address players should open to join."""
        click.echo(flask_app.extensions['party_public_url'])

    flask_app.cli.add_command(public_url_command)

    return flask_app

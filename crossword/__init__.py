"""
Crossword Game Server Application Package

Multiplayer crossword server: players log in, create or join matches on a
shared puzzle, and race to fill it in while long-poll connections are woken
when the state they wait on changes.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    The game service must be initialized before requests are served.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance and its SocketIO server
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading',
                        logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.session_controller import session_bp
    from .controllers.game_controller import game_bp
    from .controllers.lobby_controller import lobby_bp

    app.register_blueprint(session_bp, url_prefix='/api')
    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(lobby_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio

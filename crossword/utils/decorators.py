"""
Player Decorators

Contains decorators that resolve the calling player for HTTP and WebSocket handlers.
"""

from functools import wraps
from flask import request, jsonify
from flask_socketio import emit

from .helpers import get_player_id, is_valid_token


def require_player(f):
    """
    Decorator for endpoints that need a logged-in player.

    The player id comes from the X-Player-Id header (or a 'player_id' field in
    the JSON body) and is stored on request.player_id.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        player_id = get_player_id()
        if not is_valid_token(player_id):
            return jsonify({
                'success': False,
                'error': 'Player ID required',
                'code': 'InvalidPlayerId'
            }), 401

        if not game_service.is_logged_in(player_id):
            return jsonify({
                'success': False,
                'error': 'Player is not logged in',
                'code': 'NotLoggedIn'
            }), 401

        request.player_id = player_id
        return f(*args, **kwargs)

    return decorated_function


def websocket_player_required(f):
    """Decorator for WebSocket events that need a logged-in player."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        data = args[0] if args and isinstance(args[0], dict) else {}
        player_id = data.get('player_id')
        if not game_service or not is_valid_token(player_id):
            emit('error', {'error': 'Player ID required'})
            return
        if not game_service.is_logged_in(player_id):
            emit('error', {'error': 'Player is not logged in', 'code': 'NotLoggedIn'})
            return

        kwargs['player_id'] = player_id
        return f(*args, **kwargs)

    return decorated_function

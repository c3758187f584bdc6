"""
Session Controller

Handles login and logout HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..services.game_service import get_game_service
from ..utils.decorators import require_player
from ..utils.game_logger import game_logger
from ..utils.helpers import json_result

session_bp = Blueprint('session', __name__)


@session_bp.route('/login', methods=['POST'])
def login():
    """Log a player in and return the puzzles and waiting matches."""
    try:
        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        data = request.get_json(silent=True)
        if not data:
            return jsonify({
                'success': False,
                'error': 'Request body is required'
            }), 400

        player_id = data.get('player_id')

        # Log user action
        game_logger.log_user_action(request, 'login', player=player_id)

        result = game_service.login(player_id)
        return json_result('login', result)

    except Exception as e:
        game_logger.log_error(request, e, 'login')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'login', False, error_response)
        return jsonify(error_response), 500


@session_bp.route('/logout', methods=['POST'])
@require_player
def logout():
    """Log the calling player out."""
    try:
        game_service = get_game_service()
        game_logger.log_user_action(request, 'logout')

        result = game_service.logout(request.player_id)
        return json_result('logout', result)

    except Exception as e:
        game_logger.log_error(request, e, 'logout')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'logout', False, error_response)
        return jsonify(error_response), 500

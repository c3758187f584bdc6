"""
Lobby Controller

Handles puzzle listings, match creation and joining, and the long-poll
endpoints used while browsing or waiting for an opponent.
"""

from flask import Blueprint, current_app, request, jsonify
from ..services.game_service import get_game_service
from ..utils.decorators import require_player
from ..utils.game_logger import game_logger
from ..utils.helpers import json_result, wait_for_listener

lobby_bp = Blueprint('lobby', __name__)


def _service_unavailable():
    return jsonify({
        'success': False,
        'error': 'Game service unavailable'
    }), 500


def _internal_error(action, e, match_id=None):
    game_logger.log_error(request, e, action, match_id)
    error_response = {
        'success': False,
        'error': str(e)
    }
    game_logger.log_server_response(request, action, False, error_response, match_id)
    return jsonify(error_response), 500


@lobby_bp.route('/puzzles', methods=['GET'])
def get_puzzles():
    """List puzzle names."""
    game_service = get_game_service()
    if not game_service:
        return _service_unavailable()
    return jsonify({'success': True, 'puzzles': game_service.get_puzzle_names()})


@lobby_bp.route('/puzzles/<name>', methods=['GET'])
def get_puzzle(name):
    """Puzzle layout without answers."""
    game_service = get_game_service()
    if not game_service:
        return _service_unavailable()

    layout = game_service.get_puzzle_layout(name)
    if layout is None:
        return jsonify({
            'success': False,
            'error': 'Puzzle not found',
            'code': 'PuzzleNotFound'
        }), 404
    return jsonify({'success': True, 'name': name, 'puzzle': layout})


@lobby_bp.route('/matches', methods=['GET'])
def get_matches():
    """List matches waiting for a second player."""
    game_service = get_game_service()
    if not game_service:
        return _service_unavailable()
    result = {'success': True}
    result.update(game_service.watch_snapshot())
    return jsonify(result)


@lobby_bp.route('/matches', methods=['POST'])
@require_player
def create_match():
    """Create a match and wait in it."""
    try:
        game_service = get_game_service()

        data = request.get_json(silent=True) or {}
        match_id = data.get('match_id')
        puzzle = data.get('puzzle')
        description = data.get('description', '')

        # Log user action
        game_logger.log_user_action(request, 'create_match', match_id, puzzle=puzzle)

        result = game_service.create_match(request.player_id, match_id, puzzle, description)
        return json_result('create_match', result, match_id, success_status=201)

    except Exception as e:
        return _internal_error('create_match', e)


@lobby_bp.route('/matches/<match_id>/join', methods=['POST'])
@require_player
def join_match(match_id):
    """Join a waiting match and receive its puzzle."""
    try:
        game_service = get_game_service()
        game_logger.log_user_action(request, 'join_match', match_id)

        result = game_service.join_match(request.player_id, match_id)
        return json_result('join_match', result, match_id)

    except Exception as e:
        return _internal_error('join_match', e, match_id)


@lobby_bp.route('/matches/watch', methods=['GET'])
def watch_matches():
    """
    Long-poll until the list of waiting matches changes.

    Pass ?since=<version> from the previous reply so that a change made
    between two polls is not missed.
    """
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        since = request.args.get('since', type=int)
        game_logger.log_user_action(request, 'watch', since=since)

        registration = game_service.add_watch_listener(since=since)
        listener = registration['listener']
        changed = wait_for_listener(listener, current_app.config.get('LONG_POLL_TIMEOUT_SECONDS'))
        if not changed:
            game_service.remove_watch_listener(listener)
            changed = listener.fired

        result = {'success': True, 'changed': changed}
        result.update(game_service.watch_snapshot())
        return json_result('watch', result)

    except Exception as e:
        return _internal_error('watch', e)


@lobby_bp.route('/match/wait', methods=['GET'])
@require_player
def wait_for_opponent():
    """Long-poll until an opponent joins the caller's match."""
    try:
        game_service = get_game_service()
        player_id = request.player_id
        match_id = game_service.get_match_id(player_id)
        game_logger.log_user_action(request, 'wait', match_id)

        registration = game_service.add_wait_listener(player_id)
        if not registration['success']:
            return json_result('wait', registration, match_id)

        listener = registration['listener']
        started = wait_for_listener(listener, current_app.config.get('LONG_POLL_TIMEOUT_SECONDS'))
        if not started:
            game_service.remove_wait_listener(player_id, listener)
        if not listener.fired:
            return json_result('wait', {'success': True, 'started': False}, match_id)

        result = game_service.get_match_puzzle(player_id)
        if not result['success']:
            # The caller abandoned the match while waiting.
            return json_result('wait', {'success': True, 'started': False}, match_id)
        result['started'] = result['match']['status'] != 'WAITING'
        return json_result('wait', result, match_id)

    except Exception as e:
        return _internal_error('wait', e)


@lobby_bp.route('/match/exit_wait', methods=['POST'])
@require_player
def exit_wait():
    """Abandon a match that nobody has joined yet."""
    try:
        game_service = get_game_service()
        match_id = game_service.get_match_id(request.player_id)
        game_logger.log_user_action(request, 'exit_wait', match_id)

        result = game_service.exit_wait(request.player_id)
        return json_result('exit_wait', result, match_id)

    except Exception as e:
        return _internal_error('exit_wait', e)

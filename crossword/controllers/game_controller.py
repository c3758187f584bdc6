"""
Game Controller

Handles HTTP endpoints for playing a match: trying and challenging words,
reading the board, long-polling for changes and leaving.
"""

from flask import Blueprint, current_app, request, jsonify
from ..services.game_service import get_game_service
from ..utils.decorators import require_player
from ..utils.game_logger import game_logger
from ..utils.helpers import json_result, wait_for_listener

game_bp = Blueprint('game', __name__)


def _internal_error(action, e, match_id=None):
    game_logger.log_error(request, e, action, match_id)
    error_response = {
        'success': False,
        'error': str(e)
    }
    game_logger.log_server_response(request, action, False, error_response, match_id)
    return jsonify(error_response), 500


def _read_guess():
    """Entry id and word from the request body, or an error response."""
    data = request.get_json(silent=True)
    if not data or 'entry_id' not in data or 'word' not in data:
        return None, None, (jsonify({
            'success': False,
            'error': 'entry_id and word are required'
        }), 400)
    try:
        entry_id = int(data['entry_id'])
    except (TypeError, ValueError):
        return None, None, (jsonify({
            'success': False,
            'error': 'entry_id must be an integer'
        }), 400)
    word = data['word']
    if not isinstance(word, str) or not word.strip():
        return None, None, (jsonify({
            'success': False,
            'error': 'word must be a non-empty string'
        }), 400)
    return entry_id, word, None


@game_bp.route('/match/state', methods=['GET'])
@require_player
def get_state():
    """Guesses, scores and status of the caller's match."""
    try:
        game_service = get_game_service()
        result = game_service.get_play_state(request.player_id)
        match_id = result['state']['match_id'] if result['success'] else None
        return json_result('get_state', result, match_id)

    except Exception as e:
        return _internal_error('get_state', e)


@game_bp.route('/match/puzzle', methods=['GET'])
@require_player
def get_match_puzzle():
    """Layout of the puzzle the caller's match is played on."""
    try:
        game_service = get_game_service()
        result = game_service.get_match_puzzle(request.player_id)
        return json_result('get_match_puzzle', result, game_service.get_match_id(request.player_id))

    except Exception as e:
        return _internal_error('get_match_puzzle', e)


@game_bp.route('/match/listen', methods=['GET'])
@require_player
def listen():
    """
    Long-poll until the caller's match changes.

    Pass ?since=<version> from the previous state so that an event between
    two polls is not missed.
    """
    try:
        game_service = get_game_service()
        player_id = request.player_id
        match_id = game_service.get_match_id(player_id)
        since = request.args.get('since', type=int)
        game_logger.log_user_action(request, 'listen', match_id, since=since)

        registration = game_service.add_play_listener(player_id, since=since)
        if not registration['success']:
            return json_result('listen', registration, match_id)

        listener = registration['listener']
        changed = wait_for_listener(listener, current_app.config.get('LONG_POLL_TIMEOUT_SECONDS'))
        if not changed:
            game_service.remove_play_listener(player_id, listener)
            changed = listener.fired

        result = game_service.get_play_state(player_id)
        if not result['success']:
            # The caller left the match while listening.
            return json_result('listen', {'success': True, 'changed': changed, 'ended': True}, match_id)
        result['changed'] = changed
        result['ended'] = result['state']['status'] == 'DONE'
        return json_result('listen', result, match_id)

    except Exception as e:
        return _internal_error('listen', e)


@game_bp.route('/match/try', methods=['POST'])
@require_player
def try_word():
    """Guess a word for an entry."""
    try:
        game_service = get_game_service()
        entry_id, word, error = _read_guess()
        if error:
            return error

        match_id = game_service.get_match_id(request.player_id)
        game_logger.log_user_action(request, 'try_word', match_id, entry_id=entry_id, word=word)

        result = game_service.try_word(request.player_id, entry_id, word)
        return json_result('try_word', result, match_id)

    except Exception as e:
        return _internal_error('try_word', e)


@game_bp.route('/match/challenge', methods=['POST'])
@require_player
def challenge_word():
    """Challenge the opponent's word for an entry."""
    try:
        game_service = get_game_service()
        entry_id, word, error = _read_guess()
        if error:
            return error

        match_id = game_service.get_match_id(request.player_id)
        game_logger.log_user_action(request, 'challenge_word', match_id, entry_id=entry_id, word=word)

        result = game_service.challenge_word(request.player_id, entry_id, word)
        return json_result('challenge_word', result, match_id)

    except Exception as e:
        return _internal_error('challenge_word', e)


@game_bp.route('/match/exit', methods=['POST'])
@require_player
def exit_play():
    """Forfeit an ongoing match, or leave a finished one."""
    try:
        game_service = get_game_service()
        match_id = game_service.get_match_id(request.player_id)
        game_logger.log_user_action(request, 'exit_play', match_id)

        result = game_service.exit_play(request.player_id)
        return json_result('exit_play', result, match_id)

    except Exception as e:
        return _internal_error('exit_play', e)


@game_bp.route('/match/score', methods=['GET'])
@require_player
def show_score():
    """Scores of the caller's match."""
    try:
        game_service = get_game_service()
        result = game_service.show_score(request.player_id)
        return json_result('show_score', result, game_service.get_match_id(request.player_id))

    except Exception as e:
        return _internal_error('show_score', e)

"""
Helper Functions

Contains utility functions used throughout the application.
"""

import re
from typing import Dict, Optional
from flask import jsonify, request

PLAYER_ID_HEADER = 'X-Player-Id'

_TOKEN_PATTERN = re.compile(r'^[0-9A-Za-z]+$')


def is_valid_token(value) -> bool:
    """Player and match ids are non-empty alphanumeric strings."""
    return isinstance(value, str) and bool(_TOKEN_PATTERN.match(value))


def get_player_id(request_obj=None) -> Optional[str]:
    """Player id sent with the request, from the header or the JSON body."""
    if request_obj is None:
        request_obj = request

    player_id = request_obj.headers.get(PLAYER_ID_HEADER)
    if not player_id:
        data = request_obj.get_json(silent=True) or {}
        player_id = data.get('player_id')
    return player_id


def get_user_identity(request_obj=None) -> Dict[str, Optional[str]]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    user_ip = getattr(request_obj, 'remote_addr', None) or 'unknown'
    headers = getattr(request_obj, 'headers', None)

    return {
        'user_ip': user_ip,
        'player_id': headers.get(PLAYER_ID_HEADER) if headers is not None else None
    }


_NOT_FOUND_CODES = {'MatchNotFound', 'PuzzleNotFound', 'EntryNotFound'}


def status_for(result: Dict) -> int:
    """HTTP status for a game service result."""
    if result.get('success'):
        return 200
    if result.get('code') in _NOT_FOUND_CODES:
        return 404
    return 400


def json_result(action: str, result: Dict, match_id: Optional[str] = None, success_status: int = 200):
    """Log a game service result and turn it into a JSON response."""
    from .game_logger import game_logger

    status = success_status if result.get('success') else status_for(result)
    game_logger.log_server_response(request, action, bool(result.get('success')), result, match_id)
    return jsonify(result), status


def wait_for_listener(listener, timeout: Optional[float]) -> bool:
    """Block on a listener outside the game lock. 0 or None waits forever."""
    return listener.wait(timeout or None)

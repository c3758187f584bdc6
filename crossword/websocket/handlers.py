"""
WebSocket Event Handlers

Socket.IO version of the game commands. Commands answer with a
'<event>_result' message. The blocking commands (watch, wait, listen)
register a listener, wait for it in a background task and then push the
fresh state to the requesting socket.
"""

import threading

from flask import request
from flask_socketio import emit
from ..models.listener import ListenerKind
from ..services.game_service import get_game_service
from ..utils.decorators import websocket_player_required
from ..utils.game_logger import game_logger

# Simple tracking of connected players
connected_players = {}  # player_id -> socket_id

# Listeners each socket is blocked on, so a disconnect can drop them
pending_listeners = {}  # socket_id -> list of listeners
_pending_lock = threading.Lock()


def _since(data):
    try:
        return int(data['since'])
    except (KeyError, TypeError, ValueError):
        return None


def _strip_listener(result):
    return {key: value for key, value in result.items() if key != 'listener'}


def _track(sid, listener):
    with _pending_lock:
        pending_listeners.setdefault(sid, []).append(listener)


def _untrack(sid, listener):
    with _pending_lock:
        listeners = pending_listeners.get(sid, [])
        if listener in listeners:
            listeners.remove(listener)
        if not listeners:
            pending_listeners.pop(sid, None)


def _started_payload(game_service, player_id):
    result = game_service.get_match_puzzle(player_id)
    if not result['success']:
        return {'success': True, 'started': False}
    result['started'] = result['match']['status'] != 'WAITING'
    return result


def _play_payload(game_service, player_id):
    result = game_service.get_play_state(player_id)
    if not result['success']:
        return {'success': True, 'ended': True}
    result['ended'] = result['state']['status'] == 'DONE'
    return result


def drop_pending_listeners(sid):
    """Deregister everything a closed socket was waiting on."""
    game_service = get_game_service()
    with _pending_lock:
        listeners = pending_listeners.pop(sid, [])
    for listener in listeners:
        if listener.done or not game_service:
            continue
        if listener.kind == ListenerKind.WATCH:
            game_service.remove_watch_listener(listener)
        elif listener.kind == ListenerKind.WAIT:
            game_service.remove_wait_listener(listener.player, listener)
        else:
            game_service.remove_play_listener(listener.player, listener)


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    def await_and_emit(sid, listener, event, build_payload):
        def task():
            try:
                listener.wait()
                _untrack(sid, listener)
                if listener.cancelled:
                    return
                socketio.emit(event, build_payload(), to=sid)
            except Exception as e:
                game_logger.logger.error(f"Error delivering {event} to {sid}: {e}")
        socketio.start_background_task(task)

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('disconnect')
    def handle_disconnect():
        """Drop the socket's pending listeners."""
        sid = request.sid
        drop_pending_listeners(sid)
        for player_id, socket_id in list(connected_players.items()):
            if socket_id == sid:
                del connected_players[player_id]
                game_logger.logger.info(f"WebSocket: {player_id} disconnected")

    @socketio.on('login')
    def handle_login(data=None):
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return
        player_id = (data or {}).get('player_id')
        result = game_service.login(player_id)
        if result['success']:
            connected_players[player_id] = request.sid
        emit('login_result', result)

    @socketio.on('logout')
    @websocket_player_required
    def handle_logout(data, player_id=None):
        result = get_game_service().logout(player_id)
        if result['success']:
            connected_players.pop(player_id, None)
        emit('logout_result', result)

    @socketio.on('new_match')
    @websocket_player_required
    def handle_new_match(data, player_id=None):
        result = get_game_service().create_match(
            player_id, data.get('match_id'), data.get('puzzle'), data.get('description', '')
        )
        emit('new_match_result', result)

    @socketio.on('join_match')
    @websocket_player_required
    def handle_join_match(data, player_id=None):
        result = get_game_service().join_match(player_id, data.get('match_id'))
        emit('join_match_result', result)

    @socketio.on('exit_wait')
    @websocket_player_required
    def handle_exit_wait(data, player_id=None):
        emit('exit_wait_result', get_game_service().exit_wait(player_id))

    @socketio.on('exit_play')
    @websocket_player_required
    def handle_exit_play(data, player_id=None):
        emit('exit_play_result', get_game_service().exit_play(player_id))

    @socketio.on('try_word')
    @websocket_player_required
    def handle_try_word(data, player_id=None):
        try:
            entry_id = int(data.get('entry_id'))
        except (TypeError, ValueError):
            emit('try_word_result', {'success': False, 'error': 'entry_id must be an integer'})
            return
        result = get_game_service().try_word(player_id, entry_id, str(data.get('word', '')))
        emit('try_word_result', result)

    @socketio.on('challenge_word')
    @websocket_player_required
    def handle_challenge_word(data, player_id=None):
        try:
            entry_id = int(data.get('entry_id'))
        except (TypeError, ValueError):
            emit('challenge_word_result', {'success': False, 'error': 'entry_id must be an integer'})
            return
        result = get_game_service().challenge_word(player_id, entry_id, str(data.get('word', '')))
        emit('challenge_word_result', result)

    @socketio.on('watch')
    def handle_watch(data=None):
        """Push 'matches_update' once the list of waiting matches changes."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return
        sid = request.sid
        registration = game_service.add_watch_listener(since=_since(data))
        listener = registration['listener']
        _track(sid, listener)
        await_and_emit(sid, listener, 'matches_update', game_service.watch_snapshot)
        emit('watch_result', _strip_listener(registration))

    @socketio.on('wait')
    @websocket_player_required
    def handle_wait(data, player_id=None):
        """Push 'match_started' once an opponent joins."""
        game_service = get_game_service()
        sid = request.sid
        registration = game_service.add_wait_listener(player_id)
        if not registration['success']:
            emit('wait_result', registration)
            return
        listener = registration['listener']
        _track(sid, listener)
        await_and_emit(sid, listener, 'match_started', lambda: _started_payload(game_service, player_id))
        emit('wait_result', _strip_listener(registration))

    @socketio.on('listen')
    @websocket_player_required
    def handle_listen(data, player_id=None):
        """Push 'play_update' once the player's match changes."""
        game_service = get_game_service()
        sid = request.sid
        registration = game_service.add_play_listener(player_id, since=_since(data))
        if not registration['success']:
            emit('listen_result', registration)
            return
        listener = registration['listener']
        _track(sid, listener)
        await_and_emit(sid, listener, 'play_update', lambda: _play_payload(game_service, player_id))
        emit('listen_result', _strip_listener(registration))

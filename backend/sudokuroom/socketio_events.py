import json

from flask import current_app, request
from flask_socketio import emit

from sudokuroom import socketio
from sudokuroom.events import ROOM_EVENT_KEY, JOIN, parse_event


def _engine():
    return current_app.extensions['session_engine']


def _observers():
    return current_app.extensions['observers']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    player_id = _observers().add(_get_sid())
    emit('connected', {'player_id': player_id})
    # Joining goes through the same parser as room events from the wire
    _engine().apply_event(parse_event({ROOM_EVENT_KEY: JOIN, 'id': player_id}))


def handle_disconnect(*args):
    player_id = _observers().remove(_get_sid())
    if player_id is not None:
        current_app.logger.info(f"[player-leave] player={player_id}")


def handle_message(data):
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError:
            data = None
    _engine().apply_event(parse_event(data))


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('disconnect', handle_disconnect, namespace='/ws')
    socketio.on_event('message', handle_message, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

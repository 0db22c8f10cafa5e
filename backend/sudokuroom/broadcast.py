import itertools
import threading
from typing import Dict, List, Optional

from sudokuroom.render import render_board, render_cell, render_message, render_progress

FRAGMENT_EVENT = 'fragment'


class ObserverRegistry:
    """Maps Socket.IO session ids to the integer player ids used by join events."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._sid_to_player: Dict[str, int] = {}
        self._player_to_sid: Dict[int, str] = {}

    def add(self, sid: str) -> int:
        with self._lock:
            player_id = next(self._ids)
            self._sid_to_player[sid] = player_id
            self._player_to_sid[player_id] = sid
            return player_id

    def remove(self, sid: str) -> Optional[int]:
        with self._lock:
            player_id = self._sid_to_player.pop(sid, None)
            if player_id is not None:
                self._player_to_sid.pop(player_id, None)
            return player_id

    def sid_for(self, player_id) -> Optional[str]:
        return self._player_to_sid.get(player_id)

    def __len__(self):
        return len(self._sid_to_player)


class SocketIOBroadcaster:
    """Renders engine output and pushes it to the ``/ws`` room as HTML fragments."""

    def __init__(self, socketio, registry: ObserverRegistry, namespace: str = '/ws', logger=None):
        self.socketio = socketio
        self.registry = registry
        self.namespace = namespace
        self.logger = logger

    def _emit(self, fragments: List[str], to=None) -> None:
        self.socketio.emit(FRAGMENT_EVENT, '\n'.join(fragments), to=to, namespace=self.namespace)

    def board(self, board, template, player_id=None) -> None:
        fragments = render_board(board, template)
        if player_id is None:
            self._emit(fragments)
            return
        sid = self.registry.sid_for(player_id)
        if sid is None:
            if self.logger:
                self.logger.info(f"[snapshot-skip] player={player_id} not connected")
            return
        self._emit(fragments, to=sid)

    def cell(self, x: int, y: int, value: int, fixed: bool) -> None:
        self._emit([render_cell(value, x, y, fixed)])

    def status(self, message: str) -> None:
        self._emit([render_message(message)])

    def error(self, message: str) -> None:
        self._emit([render_message(message, id='error')])

    def progress(self, completion, timing) -> None:
        self._emit(render_progress(completion.percent_complete, timing.percent_time, timing.time_remaining))

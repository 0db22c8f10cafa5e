"""Inbound event parsing.

Two unrelated wire shapes reach the room:

* HTMX websocket triggers, ``{"cell_x_y": "5", "HEADERS": {"HX-Trigger": "cell_x_y", ...}}``
* room join events, ``{"t": "Join", "id": 123}``

Both are reduced to one of the :data:`Event` variants. Parsing never raises:
anything malformed or out of range becomes :class:`Noop` and is dropped.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple, Union

TRIGGER_HEADER = 'HX-Trigger'
CELL_PREFIX = 'cell'
ROOM_EVENT_KEY = 't'
JOIN = 'Join'
MIN_VALUE, MAX_VALUE = 0, 9
_DECIMAL = re.compile(r'[+-]?[0-9]+')


@dataclass(frozen=True)
class SetCell:
    x: int
    y: int
    value: int


@dataclass(frozen=True)
class NewPlayer:
    id: Any


@dataclass(frozen=True)
class StartGame:
    pass


@dataclass(frozen=True)
class Noop:
    pass


Event = Union[SetCell, NewPlayer, StartGame, Noop]

NOOP = Noop()


def event_kind(event: Event) -> str:
    return {SetCell: 'set_cell', NewPlayer: 'new_player', StartGame: 'start_game'}.get(type(event), 'noop')


def _as_int(raw) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        # plain ASCII decimal only, no underscores or other digit scripts
        return int(text) if _DECIMAL.fullmatch(text) else None
    return None


def _in_bounds(value: Optional[int]) -> bool:
    return value is not None and MIN_VALUE <= value <= MAX_VALUE


def _trigger(data: Mapping) -> Optional[str]:
    headers = data.get('HEADERS')
    if not isinstance(headers, Mapping):
        return None
    trigger = headers.get(TRIGGER_HEADER)
    return trigger if isinstance(trigger, str) and trigger else None


def _parse_cell_trigger(data: Mapping) -> Event:
    trigger = _trigger(data)
    prefix, *coordinates = trigger.split('_')
    payload = data.get(trigger)
    if prefix != CELL_PREFIX or len(coordinates) != 2 or payload is None:
        return NOOP

    x, y, value = (_as_int(token) for token in (*coordinates, payload))
    if not all(_in_bounds(v) for v in (x, y, value)):
        return NOOP
    return SetCell(x, y, value)


def _parse_room_event(data: Mapping) -> Event:
    if data.get(ROOM_EVENT_KEY) == JOIN and data.get('id') is not None:
        return NewPlayer(data['id'])
    return NOOP


# Checked in order; the first shape whose discriminator is present wins.
_SHAPES: Tuple[Tuple[Callable[[Mapping], bool], Callable[[Mapping], Event]], ...] = (
    (lambda data: _trigger(data) is not None, _parse_cell_trigger),
    (lambda data: ROOM_EVENT_KEY in data, _parse_room_event),
)


def parse_event(data: Any) -> Event:
    if not isinstance(data, Mapping):
        return NOOP
    for matches, parse in _SHAPES:
        if matches(data):
            return parse(data)
    return NOOP

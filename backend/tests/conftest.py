import copy
import logging
import os
import sys
import pytest

# Ensure the backend root (containing the `sudokuroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from sudokuroom import create_app, socketio
from sudokuroom.services.puzzles import Puzzle, SessionEngine
from sudokuroom.services.puzzles.scheduler import ScheduledTask


SOLUTION_ROWS = [
    [1, 2, 3, 4],
    [3, 4, 1, 2],
    [2, 1, 4, 3],
    [4, 3, 2, 1],
]
PUZZLE_GRID = [
    [1, 0, 3, 0],
    [0, 4, 0, 2],
    [2, 0, 4, 0],
    [0, 3, 0, 1],
]
SOLUTION = [value for row in SOLUTION_ROWS for value in row]


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ALLOWED_ORIGINS = ['http://localhost:9000']
    ROUND_DURATION_MIN = 10
    CHECK_INTERVAL_SEC = 2.5
    RESTART_DELAY_SEC = 5
    PUZZLE_DIFFICULTY = 'EASY'
    ENGINE_AUTOSTART = False
    LOG_LEVEL = 'DEBUG'


class FixedSource:
    """Always hands out the same 4x4 puzzle, or raises ``error`` when set."""

    def __init__(self, grid=None, solution=None):
        self.grid = grid or PUZZLE_GRID
        self.solution = solution or SOLUTION
        self.error = None
        self.calls = []

    def generate(self, difficulty='EASY'):
        self.calls.append(difficulty)
        if self.error is not None:
            raise self.error
        return Puzzle(grid=copy.deepcopy(self.grid), solution=list(self.solution))


class ManualScheduler:
    """Records timers instead of running them; tests fire them by hand."""

    def __init__(self):
        self.entries = []

    def every(self, interval, callback, *args, name='interval'):
        return self._add(ScheduledTask(name, interval, repeat=True), callback, args)

    def after(self, delay, callback, *args, name='timeout'):
        return self._add(ScheduledTask(name, delay, repeat=False), callback, args)

    def _add(self, task, callback, args):
        self.entries.append((task, callback, args))
        return task

    def pending(self, repeat=None):
        return [
            task for task, _, _ in self.entries
            if not task.cancelled and (repeat is None or task.repeat == repeat)
        ]

    def fire(self, task):
        """Run the task's callback the way a worker would after waking up."""
        for entry in self.entries:
            if entry[0] is task:
                break
        else:
            raise AssertionError(f'{task!r} was never scheduled')
        if task.cancelled:
            return False
        if not task.repeat:
            self.entries.remove(entry)
        entry[1](*entry[2])
        return True

    def force(self, task):
        """Run the callback even if cancelled, like a worker that woke up just before cancel()."""
        for scheduled, callback, args in self.entries:
            if scheduled is task:
                callback(*args)
                return
        raise AssertionError(f'{task!r} was never scheduled')


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingBroadcaster:
    def __init__(self):
        self.calls = []

    def kinds(self):
        return [kind for kind, _ in self.calls]

    def of(self, kind):
        return [args for k, args in self.calls if k == kind]

    def board(self, board, template, player_id=None):
        self.calls.append(('board', {'board': [list(r) for r in board], 'player_id': player_id}))

    def cell(self, x, y, value, fixed):
        self.calls.append(('cell', {'x': x, 'y': y, 'value': value, 'fixed': fixed}))

    def status(self, message):
        self.calls.append(('status', message))

    def error(self, message):
        self.calls.append(('error', message))

    def progress(self, completion, timing):
        self.calls.append(('progress', (completion, timing)))


def blank_cells(grid=PUZZLE_GRID):
    return [(x, y) for y, row in enumerate(grid) for x, value in enumerate(row) if value == 0]


@pytest.fixture()
def source():
    return FixedSource()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def engine(source, broadcaster, scheduler, clock):
    return SessionEngine(
        source=source,
        broadcaster=broadcaster,
        scheduler=scheduler,
        round_duration_sec=600,
        check_interval_sec=2.5,
        restart_delay_sec=5,
        clock=clock,
        logger=logging.getLogger('tests.engine'),
    )


@pytest.fixture()
def flask_app(source, scheduler, clock):
    application = create_app(TestConfig, puzzle_source=source, scheduler=scheduler, clock=clock)
    with application.app_context():
        application.extensions['session_engine'].start_round()
        yield application
        application.extensions['session_engine'].shutdown()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')

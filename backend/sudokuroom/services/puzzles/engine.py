import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from sudokuroom.events import Event, NewPlayer, Noop, SetCell, StartGame
from sudokuroom.render import FAILED, SUCCESS

from .errors import PuzzleError
from .progress import evaluate_completion, evaluate_time
from .scheduler import ScheduledTask
from .state import Session

IDLE = 'idle'
ACTIVE = 'active'
TRANSITIONING = 'transitioning'


class SessionEngine:
    """Owns the live round and every timer armed against it.

    Edits, joins, periodic checks and restarts all go through one lock, so
    no two of them ever touch the session at the same time. Timers are bound
    to the ``round_id`` they were armed for and give up once a newer round
    has replaced it.
    """

    def __init__(
        self,
        source,
        broadcaster,
        scheduler,
        round_duration_sec: float = 600,
        check_interval_sec: float = 2.5,
        restart_delay_sec: float = 5,
        difficulty: str = 'EASY',
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ):
        self.source = source
        self.broadcaster = broadcaster
        self.scheduler = scheduler
        self.round_duration_sec = round_duration_sec
        self.check_interval_sec = check_interval_sec
        self.restart_delay_sec = restart_delay_sec
        self.difficulty = difficulty
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

        self._lock = threading.RLock()
        self._session: Optional[Session] = None
        self._phase = IDLE
        self._rounds_started = 0
        self._check_task: Optional[ScheduledTask] = None
        self._restart_task: Optional[ScheduledTask] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def phase(self) -> str:
        return self._phase

    def start_round(self) -> Session:
        """Replace the current session with a freshly generated one.

        ``GenerationError`` and ``SolveError`` propagate to the caller and
        leave the current round, if any, untouched.
        """
        with self._lock:
            puzzle = self.source.generate(self.difficulty)
            session = Session.create(
                round_id=self._rounds_started + 1,
                puzzle=puzzle,
                start_time=self.clock(),
                duration_sec=self.round_duration_sec,
            )
            self._rounds_started = session.round_id

            self._cancel_timers()
            self._session = session
            self._phase = ACTIVE
            self.logger.info(
                f"[round-start] round={session.round_id} size={session.size} blanks={session.blank_count} "
                f"duration={self.round_duration_sec}s"
            )

            self.broadcaster.status('')
            self.broadcaster.board(session.board, session.template)
            self._check_task = self.scheduler.every(
                self.check_interval_sec, self.tick, session.round_id, name=f'check:{session.round_id}'
            )
            return session

    def start_round_or_report(self) -> Optional[Session]:
        """Start a round from a timer or at boot, reporting failures instead of raising."""
        try:
            return self.start_round()
        except PuzzleError as exc:
            self.logger.error(f"[round-error] {exc}")
            self.broadcaster.error(str(exc))
            return None

    def apply_event(self, event: Event) -> None:
        with self._lock:
            if isinstance(event, StartGame):
                self.start_round()
                return
            if isinstance(event, Noop):
                return

            session = self._session
            if session is None:
                self.logger.debug(f"[event-skip] {event!r} before first round")
                return

            if isinstance(event, SetCell):
                if not (0 <= event.x < session.size and 0 <= event.y < session.size):
                    self.logger.debug(f"[event-skip] {event!r} outside {session.size}x{session.size} board")
                    return
                session.board[event.y][event.x] = event.value
                self.broadcaster.cell(event.x, event.y, event.value, session.is_fixed(event.x, event.y))
            elif isinstance(event, NewPlayer):
                self.logger.info(f"[player-join] player={event.id} round={session.round_id}")
                self.broadcaster.board(session.board, session.template, player_id=event.id)

    def targets_fixed_cell(self, event: Event) -> bool:
        with self._lock:
            session = self._session
            if session is None or not isinstance(event, SetCell):
                return False
            if not (0 <= event.x < session.size and 0 <= event.y < session.size):
                return False
            return session.is_fixed(event.x, event.y)

    def tick(self, round_id: int) -> None:
        with self._lock:
            session = self._session
            if session is None or session.round_id != round_id or self._phase != ACTIVE:
                self.logger.info(f"[timer-abort] round={round_id} current={session.round_id if session else None} phase={self._phase}")
                return

            completion = evaluate_completion(session.board, session.solution, session.blank_count)
            timing = evaluate_time(session.start_time, session.end_time, self.clock())

            if completion.is_complete or timing.is_outta_time:
                outcome = SUCCESS if completion.is_complete else FAILED
                self._cancel(self._check_task)
                self._check_task = None
                self._phase = TRANSITIONING
                self.logger.info(f"[round-end] round={round_id} outcome={outcome} restart_in={self.restart_delay_sec}s")
                self.broadcaster.status(outcome)
                self._restart_task = self.scheduler.after(
                    self.restart_delay_sec, self._restart, round_id, name=f'restart:{round_id}'
                )

            self.broadcaster.progress(completion, timing)

    def _restart(self, round_id: int) -> None:
        with self._lock:
            session = self._session
            if self._phase != TRANSITIONING or session is None or session.round_id != round_id:
                self.logger.info(f"[restart-abort] round={round_id} phase={self._phase}")
                return
            self._restart_task = None
            self.start_round_or_report()

    def snapshot(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            session = self._session
            if session is None:
                return None
            completion = evaluate_completion(session.board, session.solution, session.blank_count)
            timing = evaluate_time(session.start_time, session.end_time, self.clock())
            return {
                'round_id': session.round_id,
                'phase': self._phase,
                'board': session.board_copy(),
                'fixed': session.fixed_mask(),
                'blank_count': session.blank_count,
                'start_time': session.start_time,
                'end_time': session.end_time,
                'percent_complete': completion.percent_complete,
                'is_complete': completion.is_complete,
                'percent_time': timing.percent_time,
                'time_remaining': timing.time_remaining,
                'is_outta_time': timing.is_outta_time,
            }

    def shutdown(self) -> None:
        with self._lock:
            self._cancel_timers()

    def _cancel_timers(self) -> None:
        self._cancel(self._check_task)
        self._cancel(self._restart_task)
        self._check_task = None
        self._restart_task = None

    def _cancel(self, task: Optional[ScheduledTask]) -> None:
        if task is not None and not task.cancelled:
            task.cancel()
            self.logger.debug(f"[timer-cancel] {task!r}")

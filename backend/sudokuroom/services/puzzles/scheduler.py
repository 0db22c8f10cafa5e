import itertools
from typing import Any, Callable


class ScheduledTask:
    """Handle for a timer armed by a scheduler.

    Cancelling is cooperative: the worker checks the flag every time it
    wakes up and never calls back once it is set.
    """

    _ids = itertools.count(1)

    def __init__(self, name: str, delay: float, repeat: bool):
        self.id = next(self._ids)
        self.name = name
        self.delay = delay
        self.repeat = repeat
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self):
        kind = 'every' if self.repeat else 'after'
        state = ' cancelled' if self.cancelled else ''
        return f'<ScheduledTask #{self.id} {self.name} {kind} {self.delay}s{state}>'


class SocketIOScheduler:
    """Runs timers as Socket.IO background tasks.

    ``socketio.sleep`` yields to the active async mode (threading, eventlet
    or gevent), so a sleeping timer never blocks the event handlers.
    """

    def __init__(self, socketio, logger=None):
        self.socketio = socketio
        self.logger = logger

    def every(self, interval: float, callback: Callable[..., Any], *args, name: str = 'interval') -> ScheduledTask:
        task = ScheduledTask(name, interval, repeat=True)
        self.socketio.start_background_task(self._run, task, callback, args)
        return task

    def after(self, delay: float, callback: Callable[..., Any], *args, name: str = 'timeout') -> ScheduledTask:
        task = ScheduledTask(name, delay, repeat=False)
        self.socketio.start_background_task(self._run, task, callback, args)
        return task

    def _run(self, task: ScheduledTask, callback: Callable[..., Any], args) -> None:
        while True:
            self.socketio.sleep(task.delay)
            if task.cancelled:
                if self.logger:
                    self.logger.debug(f"[timer-stop] task={task.id} name={task.name}")
                return
            callback(*args)
            if not task.repeat:
                return

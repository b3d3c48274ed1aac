"""Timer clocks and the per-session timer table.

A clock only knows how to run a callback later and hand back a cancellable
handle. ``SessionTimers`` groups a session's handles into named slots so the
engine can cancel a whole scope (join countdown, round countdown, watchdog)
in one call.

Two clocks exist:

- ``SocketIOClock`` runs each timer as a Socket.IO background task that
  sleeps with ``socketio.sleep`` (green threads under eventlet/gevent, plain
  threads otherwise).
- ``ManualClock`` keeps virtual time; tests call ``advance()`` and due timers
  fire synchronously in deadline order.
"""
import heapq
import itertools
import logging
import time
from typing import Callable, Dict, Iterable, List

logger = logging.getLogger(__name__)


class TimerHandle:
    __slots__ = ('deadline', 'callback', 'args', 'cancelled', 'fired')

    def __init__(self, deadline: float, callback: Callable, args: tuple):
        self.deadline = deadline
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """Returns True if the timer was still pending."""
        was_active = self.active
        self.cancelled = True
        return was_active


def _fire(handle: TimerHandle) -> None:
    if handle.cancelled:
        return
    handle.fired = True
    try:
        handle.callback(*handle.args)
    except Exception:
        logger.exception(f"[timer-error] callback={getattr(handle.callback, '__name__', handle.callback)}")


class SocketIOClock:
    def __init__(self, socketio):
        self.socketio = socketio

    def now(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback: Callable, *args) -> TimerHandle:
        handle = TimerHandle(self.now() + delay, callback, args)
        self.socketio.start_background_task(self._run, handle, delay)
        return handle

    def _run(self, handle: TimerHandle, delay: float) -> None:
        self.socketio.sleep(max(0.0, delay))
        _fire(handle)


class ManualClock:
    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable, *args) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (handle.deadline, next(self._seq), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing every timer that comes due.

        Timers scheduled by a firing callback also fire if their deadline
        falls inside the window. Returns the number of callbacks run.
        """
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, deadline)
            if handle.active:
                _fire(handle)
                fired += 1
        self._now = target
        return fired

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if h.active)


class SessionTimers:
    JOIN = 'join'
    ROUND = 'round'
    WATCHDOG = 'watchdog'

    def __init__(self, clock):
        self.clock = clock
        self._slots: Dict[str, List[TimerHandle]] = {}

    def schedule(self, slot: str, delay: float, callback: Callable, *args) -> TimerHandle:
        handle = self.clock.call_later(delay, callback, *args)
        handles = [h for h in self._slots.get(slot, []) if h.active]
        handles.append(handle)
        self._slots[slot] = handles
        return handle

    def countdown(self, slot: str, duration: float, reminders: Iterable[int],
                  on_reminder: Callable, on_expire: Callable, *args) -> TimerHandle:
        """Schedule ``on_expire(*args)`` after ``duration``.

        For every reminder threshold strictly inside the window,
        ``on_reminder(*args, remaining)`` fires when ``remaining`` seconds
        are left.
        """
        for remaining in sorted(set(reminders), reverse=True):
            if 0 < remaining < duration:
                self.schedule(slot, duration - remaining, on_reminder, *args, remaining)
        return self.schedule(slot, duration, on_expire, *args)

    def cancel(self, *slots: str) -> int:
        cancelled = 0
        for slot in slots:
            for handle in self._slots.pop(slot, []):
                if handle.cancel():
                    cancelled += 1
        return cancelled

    def cancel_all(self) -> int:
        return self.cancel(*list(self._slots))

    def active_slots(self) -> List[str]:
        return sorted(slot for slot, handles in self._slots.items() if any(h.active for h in handles))

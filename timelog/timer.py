"""
Single work-session timer: IDLE -> RUNNING -> IDLE.

The engine only tracks the running interval. Persisting the session returned
by stop() is up to the caller.
"""
import enum
import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from timelog import clock
from timelog.clock import as_aware
from timelog.errors import InvalidStateError
from timelog.models import WorkSession

logger = logging.getLogger(__name__)


class TimerState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class TimerEngine:
    def __init__(self, clock_fn: Optional[Callable[[], datetime]] = None):
        self._clock = clock_fn or clock.now
        self._start_time: Optional[datetime] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> TimerState:
        return TimerState.RUNNING if self._start_time is not None else TimerState.IDLE

    @property
    def is_running(self) -> bool:
        return self._start_time is not None

    @property
    def start_time(self) -> Optional[datetime]:
        return self._start_time

    def start(self) -> datetime:
        """Start the timer and return the start instant."""
        with self._lock:
            if self._start_time is not None:
                raise InvalidStateError(
                    f"Timer already running since {self._start_time.isoformat()}"
                )
            self._start_time = as_aware(self._clock())
            logger.info("Timer started at %s", self._start_time.isoformat())
            return self._start_time

    def stop(self) -> WorkSession:
        """Stop the timer and return the finished (not yet stored) session."""
        with self._lock:
            if self._start_time is None:
                raise InvalidStateError("Timer is not running")
            start = self._start_time
            end = as_aware(self._clock())
            # clamp if the wall clock went backwards while running
            duration = max(0.0, (end - start).total_seconds())
            self._start_time = None
        logger.info("Timer stopped after %.1f s", duration)
        return WorkSession(start_time=start, end_time=end, duration=duration)

    def now(self) -> datetime:
        return as_aware(self._clock())

    def elapsed(self, now: Optional[datetime] = None) -> float:
        """Seconds since start while running, 0.0 while idle."""
        start = self._start_time
        if start is None:
            return 0.0
        if now is None:
            now = self._clock()
        return max(0.0, (as_aware(now) - start).total_seconds())

    def reset(self) -> None:
        """Drop a running timer without producing a session."""
        with self._lock:
            if self._start_time is not None:
                logger.info("Timer reset; discarding run started at %s", self._start_time.isoformat())
            self._start_time = None

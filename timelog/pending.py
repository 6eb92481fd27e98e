"""
Finished sessions the store could not commit yet.

The timer is already idle once stop() returns, so a session whose insert
failed is held here and retried, oldest first, on the next stop.
"""
import logging
import threading

from timelog.errors import ValidationError
from timelog.models import WorkSession
from timelog.store import SessionStore

logger = logging.getLogger(__name__)


class PendingSessions:
    def __init__(self):
        self._sessions: list[WorkSession] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def snapshot(self) -> list[WorkSession]:
        with self._lock:
            return list(self._sessions)

    def add(self, session: WorkSession) -> None:
        with self._lock:
            self._sessions.append(session)

    def flush(self, store: SessionStore) -> None:
        """Insert held sessions in order; stops at the first failure and re-raises it."""
        with self._lock:
            while self._sessions:
                try:
                    store.insert(self._sessions[0])
                except ValidationError:
                    # never storable, so it is not kept for retry
                    self._sessions.pop(0)
                    raise
                self._sessions.pop(0)

    def clear(self) -> None:
        with self._lock:
            if self._sessions:
                logger.info("Dropping %d unsaved sessions", len(self._sessions))
            self._sessions.clear()

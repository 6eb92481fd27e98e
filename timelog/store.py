"""
Durable collection of finished work sessions (SQLModel / SQLite).

Every mutating call commits before returning. A failed commit is rolled back
and surfaced as PersistenceError, so callers never observe a partial change.
"""
import logging
import threading

from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from timelog.clock import as_aware
from timelog.errors import NotFoundError, PersistenceError, ValidationError
from timelog.models import SCHEMA_VERSION, StoreMeta, WorkSession

logger = logging.getLogger(__name__)


def validate_finished(session: WorkSession) -> None:
    """Raise ValidationError unless the session is complete and consistent."""
    if session.start_time is None:
        raise ValidationError("Session has no start_time")
    if session.end_time is None:
        raise ValidationError("Session has no end_time; unfinished sessions cannot be stored")
    if session.duration is None:
        raise ValidationError("Session has no duration; unfinished sessions cannot be stored")
    if session.duration < 0:
        raise ValidationError(f"Session duration is negative: {session.duration}")
    if as_aware(session.end_time) < as_aware(session.start_time):
        raise ValidationError("Session ends before it starts")


class SessionStore:
    def __init__(self, engine: Engine):
        self.engine = engine
        self._lock = threading.Lock()
        self._init_schema()

    def _init_schema(self) -> None:
        try:
            SQLModel.metadata.create_all(self.engine)
            with Session(self.engine) as db:
                meta = db.get(StoreMeta, "schema_version")
                if meta is None:
                    db.add(StoreMeta(key="schema_version", value=str(SCHEMA_VERSION)))
                    db.commit()
                    stored = SCHEMA_VERSION
                else:
                    stored = int(meta.value)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not open session store: {e}") from e
        except ValueError as e:
            raise PersistenceError(f"Session store has a corrupt schema version: {e}") from e
        if stored > SCHEMA_VERSION:
            raise PersistenceError(
                f"Session store has schema version {stored}, this build supports {SCHEMA_VERSION}"
            )
        self.schema_version = stored

    def insert(self, session: WorkSession) -> None:
        validate_finished(session)
        record = session.copy_detached()
        with self._lock, Session(self.engine, expire_on_commit=False) as db:
            try:
                db.add(record)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Failed to store session %s", session.id)
                raise PersistenceError(f"Could not store session {session.id}") from e
        logger.info("Stored session %s (%.1f s)", record.id, record.duration)

    def all(self) -> list[WorkSession]:
        """All stored sessions, oldest first. The list is a detached snapshot."""
        with Session(self.engine) as db:
            statement = select(WorkSession).order_by(WorkSession.start_time, WorkSession.id)
            sessions = list(db.exec(statement).all())
        logger.debug("Loaded %d sessions", len(sessions))
        return sessions

    def get(self, session_id: str) -> WorkSession:
        try:
            with Session(self.engine) as db:
                session = db.get(WorkSession, session_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not read session {session_id}") from e
        if session is None:
            raise NotFoundError(f"Session not found: {session_id}")
        return session

    def delete(self, session_id: str) -> None:
        """Remove one session. Raises NotFoundError if no session has that id."""
        with self._lock, Session(self.engine) as db:
            try:
                session = db.get(WorkSession, session_id)
                if session is not None:
                    db.delete(session)
                    db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Failed to delete session %s", session_id)
                raise PersistenceError(f"Could not delete session {session_id}") from e
        if session is None:
            raise NotFoundError(f"Session not found: {session_id}")
        logger.info("Deleted session %s", session_id)

    def delete_all(self) -> None:
        """Remove every session in one transaction (hard reset)."""
        with self._lock, Session(self.engine) as db:
            try:
                result = db.exec(delete(WorkSession))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Hard reset failed; sessions left untouched")
                raise PersistenceError("Could not delete sessions") from e
        logger.info("Deleted all %d sessions", result.rowcount)

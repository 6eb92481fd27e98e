from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import Column, DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field

from timelog.clock import as_aware

SCHEMA_VERSION = 1


class UTCDateTime(TypeDecorator):
    """Stores aware datetimes as naive UTC and hands them back tagged as UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_aware(value).astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class WorkSession(SQLModel, table=True):
    __tablename__ = "work_sessions"

    id: str = Field(default_factory=new_id, primary_key=True)
    start_time: datetime = Field(sa_column=Column(UTCDateTime(), nullable=False, index=True))
    end_time: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime(), nullable=True))
    duration: Optional[float] = None  # seconds

    def copy_detached(self) -> WorkSession:
        return WorkSession(
            id=self.id,
            start_time=self.start_time,
            end_time=self.end_time,
            duration=self.duration,
        )


class StoreMeta(SQLModel, table=True):
    __tablename__ = "store_meta"

    key: str = Field(primary_key=True)
    value: str


# --- API schemas ---


class SessionOut(BaseModel):
    id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[float] = None

    @classmethod
    def from_session(cls, session: WorkSession) -> SessionOut:
        return cls(
            id=session.id,
            start_time=session.start_time,
            end_time=session.end_time,
            duration=session.duration,
        )


class TimerOut(BaseModel):
    state: str
    start_time: Optional[datetime] = None
    elapsed: float
    duration_goal: float
    progress: float
    unsaved_sessions: int = 0


class StatsOut(BaseModel):
    daily_total: float
    weekly_total: float
    week_start: datetime
    duration_goal: float
    elapsed: float
    progress: float
    session_count: int

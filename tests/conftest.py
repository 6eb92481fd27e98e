"""Shared fixtures: a controllable clock and throwaway SQLite stores."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from timelog.config import Settings
from timelog.db import create_db_engine
from timelog.main import create_app
from timelog.store import SessionStore


class FakeClock:
    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current = self.current + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 10, 2, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'timelog.db'}"


@pytest.fixture
def store(db_url):
    engine = create_db_engine(db_url)
    yield SessionStore(engine)
    engine.dispose()


@pytest.fixture
def client(db_url, clock):
    settings = Settings(database_url=db_url, duration_goal=1800, first_weekday=0)
    app = create_app(settings, clock_fn=clock)
    with TestClient(app) as c:
        yield c

from fastapi import Request

from timelog.config import Settings
from timelog.pending import PendingSessions
from timelog.store import SessionStore
from timelog.timer import TimerEngine


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_timer(request: Request) -> TimerEngine:
    return request.app.state.timer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pending(request: Request) -> PendingSessions:
    return request.app.state.pending

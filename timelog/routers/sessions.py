"""
Stored sessions: list, delete one, hard reset, and daily/weekly stats.
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from timelog import aggregator
from timelog.config import Settings
from timelog.deps import get_pending, get_settings, get_store, get_timer
from timelog.errors import NotFoundError, PersistenceError
from timelog.models import SessionOut, StatsOut
from timelog.pending import PendingSessions
from timelog.store import SessionStore
from timelog.timer import TimerEngine

router = APIRouter(prefix="/api", tags=["sessions"])


@router.get("/sessions", response_model=list[SessionOut])
def list_sessions(
    limit: int = Query(default=20, ge=1),
    store: SessionStore = Depends(get_store),
):
    """List recent sessions (newest first)."""
    sessions = sorted(store.all(), key=lambda s: s.start_time, reverse=True)
    return [SessionOut.from_session(s) for s in sessions[:limit]]


@router.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(session_id: str, store: SessionStore = Depends(get_store)):
    try:
        return SessionOut.from_session(store.get(session_id))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(session_id: str, store: SessionStore = Depends(get_store)):
    try:
        store.delete(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/sessions", status_code=204)
def hard_reset(
    store: SessionStore = Depends(get_store),
    timer: TimerEngine = Depends(get_timer),
    pending: PendingSessions = Depends(get_pending),
):
    """Delete every stored and unsaved session and return the timer to idle."""
    try:
        store.delete_all()
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    pending.clear()
    timer.reset()


@router.get("/stats", response_model=StatsOut)
def get_stats(
    store: SessionStore = Depends(get_store),
    timer: TimerEngine = Depends(get_timer),
    settings: Settings = Depends(get_settings),
):
    """Time logged today and this week, plus live progress towards the goal."""
    now = timer.now()
    summary = aggregator.summarize(
        store.all(),
        now,
        settings.duration_goal,
        elapsed=timer.elapsed(now),
        first_weekday=settings.first_weekday,
    )
    return StatsOut(
        daily_total=summary.daily_total,
        weekly_total=summary.weekly_total,
        week_start=summary.week_start,
        duration_goal=summary.duration_goal,
        elapsed=summary.elapsed,
        progress=summary.progress,
        session_count=summary.session_count,
    )

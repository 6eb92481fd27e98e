"""
Live timer: start, stop, and poll elapsed time / goal progress.
Clients refresh the progress display by polling GET /api/timer.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from timelog import aggregator
from timelog.config import Settings
from timelog.deps import get_pending, get_settings, get_store, get_timer
from timelog.errors import InvalidStateError, PersistenceError, ValidationError
from timelog.models import SessionOut, TimerOut
from timelog.pending import PendingSessions
from timelog.store import SessionStore
from timelog.timer import TimerEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["timer"])


def _timer_out(timer: TimerEngine, settings: Settings, pending: PendingSessions) -> TimerOut:
    elapsed = timer.elapsed()
    return TimerOut(
        state=timer.state.value,
        start_time=timer.start_time,
        elapsed=elapsed,
        duration_goal=settings.duration_goal,
        progress=aggregator.progress(elapsed, settings.duration_goal),
        unsaved_sessions=len(pending),
    )


@router.get("/timer", response_model=TimerOut)
def timer_status(
    timer: TimerEngine = Depends(get_timer),
    settings: Settings = Depends(get_settings),
    pending: PendingSessions = Depends(get_pending),
):
    """Current timer state, elapsed seconds and progress towards the goal."""
    return _timer_out(timer, settings, pending)


@router.post("/timer/start", response_model=TimerOut)
def start_timer(
    timer: TimerEngine = Depends(get_timer),
    settings: Settings = Depends(get_settings),
    pending: PendingSessions = Depends(get_pending),
):
    try:
        timer.start()
    except InvalidStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _timer_out(timer, settings, pending)


@router.post("/timer/stop", response_model=SessionOut)
def stop_timer(
    timer: TimerEngine = Depends(get_timer),
    store: SessionStore = Depends(get_store),
    pending: PendingSessions = Depends(get_pending),
):
    """Stop the timer and store the finished session.

    Sessions from earlier stops that could not be stored are retried first.
    On a failed commit every unsaved session is returned in the 503 detail.
    """
    try:
        session = timer.stop()
    except InvalidStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    pending.add(session)
    try:
        pending.flush(store)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except PersistenceError as e:
        unsaved = pending.snapshot()
        logger.error("Could not store session %s; %d session(s) held for retry", session.id, len(unsaved))
        raise HTTPException(
            status_code=503,
            detail={
                "message": str(e),
                "unsaved": [SessionOut.from_session(s).model_dump(mode="json") for s in unsaved],
            },
        )
    return SessionOut.from_session(session)

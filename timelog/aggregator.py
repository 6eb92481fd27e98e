"""
Daily/weekly totals and goal progress over a collection of sessions.

Everything here is a pure function of its arguments. Durations are seconds;
instants are compared as aware datetimes, with naive values read as
host-local time. `tz=None` means the host's local zone.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Iterable, Optional

from timelog.clock import as_aware, locale_first_weekday
from timelog.models import WorkSession

DAY = timedelta(hours=24)


def _local_date(value, tz: Optional[tzinfo]) -> date:
    if isinstance(value, datetime):
        return as_aware(value).astimezone(tz).date()
    return value


def start_of_day(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Midnight at the beginning of `day` in `tz`."""
    if tz is None:
        return datetime.combine(day, time.min).astimezone()
    return datetime.combine(day, time.min, tzinfo=tz)


def _sum_durations(sessions: Iterable[WorkSession], keep) -> float:
    total = 0.0
    for s in sessions:
        if s.duration is None:
            continue
        if keep(as_aware(s.start_time)):
            total += s.duration
    return total


def total_for_day(
    sessions: Iterable[WorkSession],
    day,
    tz: Optional[tzinfo] = None,
    start_of_day: Callable[[date, Optional[tzinfo]], datetime] = start_of_day,
) -> float:
    """Sum of durations of sessions that started on `day` (a date or datetime)."""
    begin = start_of_day(_local_date(day, tz), tz)
    end = begin + DAY
    return _sum_durations(sessions, lambda started: begin <= started < end)


def week_start(
    reference: datetime,
    first_weekday: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> datetime:
    """Start of the week containing `reference`.

    Weekdays count from Monday = 0; `None` means the host locale's first day.
    """
    if first_weekday is None:
        first_weekday = locale_first_weekday()
    local = _local_date(reference, tz)
    back = (local.weekday() - first_weekday) % 7
    return start_of_day(local - timedelta(days=back), tz)


def total_for_week(
    sessions: Iterable[WorkSession],
    reference: datetime,
    first_weekday: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> float:
    """Sum of durations of sessions that started at or after the week start.

    There is no upper bound, so sessions dated after `reference` still count.
    """
    begin = week_start(reference, first_weekday, tz)
    return _sum_durations(sessions, lambda started: started >= begin)


def progress(elapsed: float, goal: float) -> float:
    """elapsed / goal clamped to [0, 1]; 0.0 when there is no positive goal."""
    if goal <= 0:
        return 0.0
    return min(max(elapsed / goal, 0.0), 1.0)


@dataclass(frozen=True)
class Summary:
    daily_total: float
    weekly_total: float
    week_start: datetime
    duration_goal: float
    elapsed: float
    progress: float
    session_count: int


def summarize(
    sessions: Iterable[WorkSession],
    now: datetime,
    goal: float,
    elapsed: float = 0.0,
    first_weekday: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> Summary:
    sessions = list(sessions)
    return Summary(
        daily_total=total_for_day(sessions, now, tz),
        weekly_total=total_for_week(sessions, now, first_weekday, tz),
        week_start=week_start(now, first_weekday, tz),
        duration_goal=goal,
        elapsed=elapsed,
        progress=progress(elapsed, goal),
        session_count=len(sessions),
    )

"""Tests for daily/weekly totals and goal progress."""

from datetime import date, datetime, timedelta, timezone

import pytest

from timelog import aggregator
from timelog.clock import locale_first_weekday
from timelog.models import WorkSession

UTC = timezone.utc
MONDAY = 0
SUNDAY = 6

# Wednesday
DAY_ONE = datetime(2024, 10, 2, 9, 0, tzinfo=UTC)


def finished(start, seconds):
    return WorkSession(start_time=start, end_time=start + timedelta(seconds=seconds), duration=seconds)


@pytest.fixture
def two_weeks():
    return [finished(DAY_ONE, 600), finished(DAY_ONE + timedelta(weeks=1), 300)]


def test_total_for_day_counts_only_that_day(two_weeks):
    assert aggregator.total_for_day(two_weeks, DAY_ONE.date(), tz=UTC) == 600
    assert aggregator.total_for_day(two_weeks, DAY_ONE, tz=UTC) == 600
    assert aggregator.total_for_day(two_weeks, date(2024, 10, 3), tz=UTC) == 0


def test_total_for_day_boundaries():
    midnight = datetime(2024, 10, 2, tzinfo=UTC)
    sessions = [
        finished(midnight, 10),
        finished(midnight + timedelta(hours=24) - timedelta(seconds=1), 20),
        finished(midnight + timedelta(hours=24), 40),
        finished(midnight - timedelta(seconds=1), 80),
    ]

    assert aggregator.total_for_day(sessions, midnight.date(), tz=UTC) == 30


def test_total_for_day_uses_the_given_zone():
    tokyo = timezone(timedelta(hours=9))
    # 20:00 UTC on Oct 1 is 05:00 on Oct 2 in Tokyo
    sessions = [finished(datetime(2024, 10, 1, 20, 0, tzinfo=UTC), 100)]

    assert aggregator.total_for_day(sessions, date(2024, 10, 1), tz=UTC) == 100
    assert aggregator.total_for_day(sessions, date(2024, 10, 2), tz=tokyo) == 100
    assert aggregator.total_for_day(sessions, date(2024, 10, 1), tz=tokyo) == 0


def test_total_for_day_accepts_custom_start_of_day():
    def starts_at_four(day, tz):
        return datetime(day.year, day.month, day.day, 4, tzinfo=tz)

    # 02:00 belongs to the previous "day" when days start at 04:00
    sessions = [finished(datetime(2024, 10, 3, 2, 0, tzinfo=UTC), 50)]

    assert aggregator.total_for_day(sessions, date(2024, 10, 2), tz=UTC, start_of_day=starts_at_four) == 50
    assert aggregator.total_for_day(sessions, date(2024, 10, 3), tz=UTC, start_of_day=starts_at_four) == 0


def test_unfinished_sessions_are_skipped():
    sessions = [WorkSession(start_time=DAY_ONE), finished(DAY_ONE, 120)]

    assert aggregator.total_for_day(sessions, DAY_ONE, tz=UTC) == 120
    assert aggregator.total_for_week(sessions, DAY_ONE, MONDAY, tz=UTC) == 120


def test_week_start_follows_first_weekday():
    assert aggregator.week_start(DAY_ONE, MONDAY, tz=UTC) == datetime(2024, 9, 30, tzinfo=UTC)
    assert aggregator.week_start(DAY_ONE, SUNDAY, tz=UTC) == datetime(2024, 9, 29, tzinfo=UTC)
    # a Monday reference with a Monday week start is its own week start
    assert aggregator.week_start(datetime(2024, 9, 30, 23, 59, tzinfo=UTC), MONDAY, tz=UTC) == datetime(
        2024, 9, 30, tzinfo=UTC
    )


def test_total_for_week_next_week_excludes_previous_week(two_weeks):
    second = two_weeks[1].start_time

    assert aggregator.total_for_week(two_weeks, second, MONDAY, tz=UTC) == 300


def test_total_for_week_has_no_upper_bound(two_weeks):
    # the session one week ahead still counts towards the current week
    assert aggregator.total_for_week(two_weeks, DAY_ONE, MONDAY, tz=UTC) == 900


def test_total_for_week_boundary_is_inclusive():
    monday = datetime(2024, 9, 30, tzinfo=UTC)
    sessions = [finished(monday, 60), finished(monday - timedelta(seconds=1), 30)]

    assert aggregator.total_for_week(sessions, DAY_ONE, MONDAY, tz=UTC) == 60
    assert aggregator.total_for_week(sessions, DAY_ONE, SUNDAY, tz=UTC) == 90


def test_totals_are_idempotent(two_weeks):
    day = aggregator.total_for_day(two_weeks, DAY_ONE, tz=UTC)
    week = aggregator.total_for_week(two_weeks, DAY_ONE, MONDAY, tz=UTC)

    assert aggregator.total_for_day(two_weeks, DAY_ONE, tz=UTC) == day
    assert aggregator.total_for_week(two_weeks, DAY_ONE, MONDAY, tz=UTC) == week


def test_totals_accept_naive_instants():
    naive = datetime(2024, 10, 2, 12, 0)
    sessions = [finished(naive, 15)]

    assert aggregator.total_for_day(sessions, naive) == 15
    assert aggregator.total_for_week(sessions, naive, MONDAY) == 15


@pytest.mark.parametrize(
    "elapsed, goal, expected",
    [
        (0, 1800, 0.0),
        (900, 1800, 0.5),
        (1800, 1800, 1.0),
        (5000, 1800, 1.0),
        (100, 0, 0.0),
        (100, -5, 0.0),
        (0, 0, 0.0),
    ],
)
def test_progress(elapsed, goal, expected):
    assert aggregator.progress(elapsed, goal) == expected


def test_progress_stays_in_unit_interval():
    for elapsed in range(0, 4000, 125):
        for goal in (-1, 0, 1, 60, 1800, 3600):
            assert 0.0 <= aggregator.progress(elapsed, goal) <= 1.0


def test_summarize(two_weeks):
    summary = aggregator.summarize(two_weeks, DAY_ONE, goal=1800, elapsed=450, first_weekday=MONDAY, tz=UTC)

    assert summary.daily_total == 600
    assert summary.weekly_total == 900
    assert summary.week_start == datetime(2024, 9, 30, tzinfo=UTC)
    assert summary.progress == 0.25
    assert summary.session_count == 2


def _pin_locale(monkeypatch, name):
    for var in ("LANGUAGE", "LC_ALL", "LC_CTYPE", "LANG"):
        monkeypatch.setenv(var, name)


@pytest.mark.parametrize("name, expected", [("en_US.UTF-8", SUNDAY), ("de_DE.UTF-8", MONDAY)])
def test_locale_first_weekday(monkeypatch, name, expected):
    _pin_locale(monkeypatch, name)

    assert locale_first_weekday() == expected


def test_default_week_start_follows_locale(monkeypatch):
    _pin_locale(monkeypatch, "en_US.UTF-8")
    assert aggregator.week_start(DAY_ONE, tz=UTC) == datetime(2024, 9, 29, tzinfo=UTC)

    _pin_locale(monkeypatch, "de_DE.UTF-8")
    assert aggregator.week_start(DAY_ONE, tz=UTC) == datetime(2024, 9, 30, tzinfo=UTC)


def test_default_week_total_follows_locale(monkeypatch):
    sunday = datetime(2024, 9, 29, 10, 0, tzinfo=UTC)
    sessions = [finished(sunday, 100), finished(DAY_ONE, 600)]

    _pin_locale(monkeypatch, "en_US.UTF-8")
    assert aggregator.total_for_week(sessions, DAY_ONE, tz=UTC) == 700

    _pin_locale(monkeypatch, "de_DE.UTF-8")
    assert aggregator.total_for_week(sessions, DAY_ONE, tz=UTC) == 600

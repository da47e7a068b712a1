from __future__ import annotations

from datetime import date, datetime, timezone

from volunteer_tracker.dates import resolve_active_date, resolve_active_date_from_store, today_in
from volunteer_tracker.models import GameDate
from volunteer_tracker.repository import InMemoryAttendanceRepository

MARCH_5 = GameDate(id="a", date=date(2024, 3, 5))
MARCH_15 = GameDate(id="b", date=date(2024, 3, 15))


def test_resolves_today_when_active():
    today = GameDate(id="t", date=date(2024, 3, 10))
    assert resolve_active_date(date(2024, 3, 10), [MARCH_5, today, MARCH_15]) == today


def test_falls_back_to_nearest_future_date():
    assert resolve_active_date(date(2024, 3, 10), [MARCH_5, MARCH_15]) == MARCH_15


def test_falls_back_to_nearest_past_date_when_no_future():
    assert resolve_active_date(date(2024, 3, 20), [MARCH_5, MARCH_15]) == MARCH_15


def test_past_fallback_takes_the_latest_earlier_date():
    inactive_later = GameDate(id="z", date=date(2024, 3, 28), is_active=False)
    resolved = resolve_active_date(date(2024, 3, 20), [MARCH_15, MARCH_5, inactive_later])
    assert resolved == MARCH_15


def test_inactive_dates_are_ignored():
    inactive_today = GameDate(id="t", date=date(2024, 3, 10), is_active=False)
    inactive_future = GameDate(id="f", date=date(2024, 3, 11), is_active=False)
    resolved = resolve_active_date(date(2024, 3, 10), [MARCH_5, inactive_today, inactive_future, MARCH_15])
    assert resolved == MARCH_15


def test_no_active_dates_resolves_to_none():
    assert resolve_active_date(date(2024, 3, 10), []) is None
    assert resolve_active_date(date(2024, 3, 10), [GameDate(id="x", date=date(2024, 3, 10), is_active=False)]) is None


def test_nearest_future_is_not_just_the_first_later_row():
    later = GameDate(id="c", date=date(2024, 4, 1))
    assert resolve_active_date(date(2024, 3, 10), [later, MARCH_15]) == MARCH_15


def test_ties_keep_first_row():
    twin = GameDate(id="b2", date=date(2024, 3, 15))
    assert resolve_active_date(date(2024, 3, 10), [MARCH_15, twin]).id == "b"


def test_store_resolution_follows_the_same_chain():
    repo = InMemoryAttendanceRepository(game_dates=[MARCH_15, MARCH_5])
    assert resolve_active_date_from_store(repo, date(2024, 3, 10)) == MARCH_15
    assert resolve_active_date_from_store(repo, date(2024, 3, 20)) == MARCH_15
    assert resolve_active_date_from_store(repo, date(2024, 3, 5)) == MARCH_5
    assert resolve_active_date_from_store(InMemoryAttendanceRepository(), date(2024, 3, 5)) is None


def test_today_in_uses_the_configured_timezone():
    instant = datetime(2024, 3, 10, 23, 30, tzinfo=timezone.utc)
    assert today_in("UTC", now=instant) == date(2024, 3, 10)
    assert today_in("Asia/Manila", now=instant) == date(2024, 3, 11)


def test_today_in_unknown_timezone_falls_back_to_utc():
    instant = datetime(2024, 3, 10, 23, 30, tzinfo=timezone.utc)
    assert today_in("Not/AZone", now=instant) == date(2024, 3, 10)

"""Tests for calendar-day helpers."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from actionplus.engine.dates import local_date, previous_day, resolve_timezone, start_of_day


def test_resolve_known_timezone():
    assert resolve_timezone("Asia/Tokyo") == ZoneInfo("Asia/Tokyo")


def test_unknown_timezone_falls_back_to_configured(monkeypatch):
    monkeypatch.setenv("ACTIONPLUS_TIMEZONE", "Europe/Madrid")
    assert resolve_timezone("Not/AZone") == ZoneInfo("Europe/Madrid")


def test_unknown_configured_timezone_falls_back_to_utc(monkeypatch):
    monkeypatch.setenv("ACTIONPLUS_TIMEZONE", "Not/AZone")
    assert resolve_timezone(None) == timezone.utc


def test_naive_timestamps_are_utc():
    value = datetime(2026, 3, 9, 23, 30)
    assert local_date(value, timezone.utc) == date(2026, 3, 9)
    assert local_date(value, ZoneInfo("Asia/Tokyo")) == date(2026, 3, 10)


def test_start_of_day_is_local_midnight():
    tokyo = ZoneInfo("Asia/Tokyo")
    midnight = start_of_day(date(2026, 3, 10), tokyo)
    assert midnight.tzinfo is tokyo
    assert midnight.astimezone(timezone.utc) == datetime(2026, 3, 9, 15, 0, tzinfo=timezone.utc)


def test_previous_day_crosses_month_boundary():
    assert previous_day(date(2026, 3, 1)) == date(2026, 2, 28)

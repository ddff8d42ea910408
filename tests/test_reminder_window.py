"""Tests for the reminder window calculator."""
import pytest
from datetime import datetime, timedelta, timezone

from core.exceptions import InvalidLeadTimeError, InvalidTimezoneError
from services.reminder_window import WINDOW_WIDTH, compute_window, resolve_timezone


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_window_at_lead_time_in_summer():
    """Canary summer time is UTC+1; target 11:15 local -> 11:00 local."""
    window = compute_window(utc(2025, 6, 1, 10, 15), timedelta(hours=48), "Atlantic/Canary")

    assert window.start == utc(2025, 6, 3, 10, 0)
    assert window.end == utc(2025, 6, 3, 11, 0)
    assert window.start_local.hour == 11
    assert window.start_local.utcoffset() == timedelta(hours=1)


def test_window_is_one_hour_on_whole_local_hour():
    start = utc(2025, 1, 10, 0, 0)
    for minutes in range(0, 24 * 60, 37):
        now = start + timedelta(minutes=minutes, seconds=13)
        window = compute_window(now, timedelta(hours=48), "Atlantic/Canary")

        assert window.end - window.start == WINDOW_WIDTH
        local = window.start_local
        assert (local.minute, local.second, local.microsecond) == (0, 0, 0)


def test_exact_hour_is_inclusive_start():
    window = compute_window(utc(2025, 1, 10, 9, 0), timedelta(hours=48), "Atlantic/Canary")

    assert window.start == utc(2025, 1, 12, 9, 0)
    assert window.contains(utc(2025, 1, 12, 9, 0))
    assert not window.contains(utc(2025, 1, 12, 10, 0))


def test_zero_lead_contains_now():
    now = utc(2025, 1, 10, 9, 59, 59, 999999)
    window = compute_window(now, timedelta(0), "UTC")

    assert window.start == utc(2025, 1, 10, 9, 0)
    assert window.contains(now)


def test_half_hour_offset_zone():
    """Kolkata is UTC+5:30, so local hours start at :30 UTC."""
    window = compute_window(utc(2025, 1, 10, 10, 15), timedelta(0), "Asia/Kolkata")

    assert window.start == utc(2025, 1, 10, 9, 30)
    assert window.end == utc(2025, 1, 10, 10, 30)
    assert window.start_local.hour == 15


def test_quarter_hour_offset_zone():
    """Kathmandu is UTC+5:45."""
    window = compute_window(utc(2025, 1, 10, 10, 15), timedelta(0), "Asia/Kathmandu")

    assert window.start == utc(2025, 1, 10, 10, 15)
    assert window.start_local.hour == 16


def test_spring_forward_skips_missing_hour():
    """Madrid jumps 02:00 CET -> 03:00 CEST at 01:00 UTC on 2025-03-30."""
    before = compute_window(utc(2025, 3, 30, 0, 59), timedelta(0), "Europe/Madrid")
    after = compute_window(utc(2025, 3, 30, 1, 30), timedelta(0), "Europe/Madrid")

    assert before.start == utc(2025, 3, 30, 0, 0)
    assert before.start_local.hour == 1
    assert after.start == utc(2025, 3, 30, 1, 0)
    assert after.start_local.hour == 3
    assert before.end == after.start


def test_fall_back_repeated_hour():
    """Madrid repeats 02:00-03:00 local on 2025-10-26."""
    first = compute_window(utc(2025, 10, 26, 0, 30), timedelta(0), "Europe/Madrid")
    second = compute_window(utc(2025, 10, 26, 1, 30), timedelta(0), "Europe/Madrid")

    assert first.start == utc(2025, 10, 26, 0, 0)
    assert second.start == utc(2025, 10, 26, 1, 0)
    assert first.start_local.hour == second.start_local.hour == 2
    assert first.start_local.utcoffset() == timedelta(hours=2)
    assert second.start_local.utcoffset() == timedelta(hours=1)


def test_hourly_runs_tile_across_dst_day():
    runs = [utc(2025, 10, 25, 22, 0) + timedelta(hours=h) for h in range(8)]
    windows = [compute_window(now, timedelta(0), "Europe/Madrid") for now in runs]

    for current, following in zip(windows, windows[1:]):
        assert current.end == following.start


def test_naive_now_is_utc():
    naive = compute_window(datetime(2025, 6, 1, 10, 15), timedelta(hours=2), "Atlantic/Canary")
    aware = compute_window(utc(2025, 6, 1, 10, 15), timedelta(hours=2), "Atlantic/Canary")

    assert naive == aware


def test_non_utc_now_is_normalized():
    madrid = resolve_timezone("Europe/Madrid")
    now = madrid.localize(datetime(2025, 6, 1, 12, 15))

    window = compute_window(now, timedelta(0), "UTC")

    assert window.start == utc(2025, 6, 1, 10, 0)
    assert window.start.tzinfo == timezone.utc


def test_negative_lead_time_rejected():
    with pytest.raises(InvalidLeadTimeError) as exc:
        compute_window(utc(2025, 6, 1), timedelta(hours=-1), "UTC")

    assert exc.value.category == "configuration"
    assert exc.value.hours == -1


def test_unknown_timezone_rejected():
    with pytest.raises(InvalidTimezoneError) as exc:
        compute_window(utc(2025, 6, 1), timedelta(hours=48), "Mars/Olympus_Mons")

    assert exc.value.zone == "Mars/Olympus_Mons"
    assert exc.value.category == "configuration"

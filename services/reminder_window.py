"""Reminder window calculation: one-hour slot at a fixed lead time."""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytz

from core.exceptions import InvalidLeadTimeError, InvalidTimezoneError

WINDOW_WIDTH = timedelta(hours=1)


@dataclass(frozen=True)
class ReminderWindow:
    """Half-open interval [start, end) in UTC."""
    start: datetime
    end: datetime
    zone: str

    @property
    def start_local(self) -> datetime:
        return self.start.astimezone(resolve_timezone(self.zone))

    @property
    def end_local(self) -> datetime:
        return self.end.astimezone(resolve_timezone(self.zone))

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


def resolve_timezone(zone: str) -> pytz.BaseTzInfo:
    """Resolve an IANA zone name or raise InvalidTimezoneError."""
    try:
        return pytz.timezone(zone)
    except (pytz.UnknownTimeZoneError, AttributeError):
        raise InvalidTimezoneError(str(zone))


def compute_window(now: datetime, lead_time: timedelta, zone: str) -> ReminderWindow:
    """
    Compute the candidate window for a run.

    The target instant (now + lead_time) is truncated to the start of its
    hour in the given zone. Running once per hour yields windows that tile
    the timeline without gaps or overlap.

    Args:
        now: Current instant (naive values are taken as UTC)
        lead_time: How far ahead reminders are due
        zone: Studio reference time zone

    Returns:
        ReminderWindow with UTC bounds

    Raises:
        InvalidLeadTimeError: If lead_time is negative
        InvalidTimezoneError: If zone is unknown
    """
    if lead_time < timedelta(0):
        raise InvalidLeadTimeError(lead_time.total_seconds() / 3600)
    tz = resolve_timezone(zone)

    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    target_local = (now.astimezone(timezone.utc) + lead_time).astimezone(tz)
    # UTC offset is constant within a local hour, so truncation keeps tzinfo valid
    start_local = target_local.replace(minute=0, second=0, microsecond=0)

    start = start_local.astimezone(timezone.utc)
    return ReminderWindow(start=start, end=start + WINDOW_WIDTH, zone=zone)

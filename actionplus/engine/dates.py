"""Calendar-day helpers for ActionPlus.

All day-granularity comparisons (streaks, deadline reminders) go through this
module so that a single timezone decides where one day ends and the next
begins.
"""

import os
import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from actionplus.models.constants import DEFAULT_TIMEZONE

load_dotenv()

logger = logging.getLogger(__name__)


def resolve_timezone(name: Optional[str] = None) -> tzinfo:
    """Resolve a timezone name, falling back to ACTIONPLUS_TIMEZONE / UTC.
    
    Args:
        name: IANA timezone name (e.g. "Asia/Tokyo"); None uses the configured default
        
    Returns:
        tzinfo instance
    """
    configured = os.getenv("ACTIONPLUS_TIMEZONE", DEFAULT_TIMEZONE)
    for candidate in (name, configured):
        if not candidate:
            continue
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone '{candidate}', falling back")
    return timezone.utc


def local_date(value: datetime, tz: Optional[tzinfo] = None) -> date:
    """Truncate a timestamp to a calendar day in the given timezone.
    
    Naive datetimes are treated as UTC (that is how the store writes them).
    """
    tz = tz or resolve_timezone()
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz).date()


def as_date(value, tz: Optional[tzinfo] = None) -> date:
    """Coerce a date or datetime to a calendar day."""
    if isinstance(value, datetime):
        return local_date(value, tz)
    return value


def today_in(tz: Optional[tzinfo] = None) -> date:
    """Current calendar day in the given timezone."""
    return local_date(datetime.now(timezone.utc), tz)


def start_of_day(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Timezone-aware midnight of `day` in the given timezone."""
    tz = tz or resolve_timezone()
    return datetime.combine(day, time.min, tzinfo=tz)


def days_between(start: date, end: date) -> int:
    """Whole days from `start` to `end` (negative when `end` is earlier)."""
    return (end - start).days


def previous_day(day: date) -> date:
    """Calendar day before `day`."""
    return day - timedelta(days=1)

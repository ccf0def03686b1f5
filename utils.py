"""
Utility helpers for studio-local dates and times.
"""
from datetime import date, datetime, time, timedelta
import pytz

from config import STUDIO_TIMEZONE

UTC = pytz.UTC


def studio_tz():
    """Timezone the studio schedules in (falls back to UTC if misconfigured)."""
    try:
        return pytz.timezone(STUDIO_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return UTC


def now_local() -> datetime:
    return datetime.now(studio_tz())


def today() -> date:
    """Today's date on the studio's wall clock."""
    return now_local().date()


def is_today_or_future(value: date) -> bool:
    return value >= today()


def end_time(start: time, duration_minutes: int) -> time:
    """Wall-clock end of a session; wraps past midnight."""
    start_dt = datetime.combine(date.min, start)
    return (start_dt + timedelta(minutes=duration_minutes)).time()


def format_date_range(start: date, end: date) -> str:
    return f"{start.isoformat()} to {end.isoformat()}"

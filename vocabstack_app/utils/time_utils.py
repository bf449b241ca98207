"""
Centralized Utilities for Time Handling in VocabStack.
Goal: Ensure consistent UTC storage and user-timezone day boundaries.
"""
from datetime import date, datetime, time, timedelta, timezone
import pytz
from flask import current_app, has_app_context


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utcnow() -> datetime:
    """
    Get the current timezone-aware UTC datetime.

    When the app config defines ``NOW_PROVIDER`` (a zero-argument callable),
    its value is used instead of the wall clock. Always use this instead of
    datetime.utcnow() or datetime.now().
    """
    if has_app_context():
        provider = current_app.config.get('NOW_PROVIDER')
        if provider is not None:
            return ensure_utc(provider())
    return datetime.now(timezone.utc)


def resolve_timezone(tz_name: str = None):
    """Return a pytz timezone for ``tz_name``, falling back to SYSTEM_TIMEZONE then UTC."""
    candidates = [tz_name]
    if has_app_context():
        candidates.append(current_app.config.get('SYSTEM_TIMEZONE'))
    for name in candidates:
        if not name:
            continue
        try:
            return pytz.timezone(name)
        except pytz.UnknownTimeZoneError:
            continue
    return pytz.UTC


def get_user_timezone(user):
    """Timezone of ``user`` (any object with a ``timezone`` attribute)."""
    return resolve_timezone(getattr(user, 'timezone', None) if user is not None else None)


def to_local(dt: datetime, tz) -> datetime:
    """Convert an instant to the given timezone."""
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(tz)


def local_date(dt: datetime, tz) -> date:
    """Calendar date of ``dt`` as seen in ``tz``."""
    return to_local(dt, tz).date()


def is_same_local_day(a: datetime, b: datetime, tz) -> bool:
    """True when both instants fall on the same calendar day in ``tz``."""
    if a is None or b is None:
        return False
    return local_date(a, tz) == local_date(b, tz)


def start_of_local_day(day: date, tz) -> datetime:
    """UTC instant at which ``day`` begins in ``tz``."""
    local_midnight = tz.localize(datetime.combine(day, time.min))
    return local_midnight.astimezone(timezone.utc)


def local_day_bounds(day: date, tz):
    """Half-open UTC interval ``[start, end)`` covering ``day`` in ``tz``."""
    return start_of_local_day(day, tz), start_of_local_day(day + timedelta(days=1), tz)


def isoformat_or_none(dt: datetime):
    return ensure_utc(dt).isoformat() if dt else None

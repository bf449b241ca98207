"""
Pure daily-goal and calendar helpers.
"""
import datetime
from typing import Iterable, Tuple

from vocabstack_app.utils.numbers import round_half_up
from vocabstack_app.utils.time_utils import ensure_utc

from .settings_logic import StudySettings


def is_daily_goal_met(settings: StudySettings, sessions: int, minutes: int) -> bool:
    mode = settings.daily_goal_mode
    sessions_ok = sessions >= settings.min_sessions_per_day
    minutes_ok = minutes >= settings.min_minutes_per_day
    if mode == 'minutes':
        return minutes_ok
    if mode == 'hybrid':
        return sessions_ok or minutes_ok
    return sessions_ok


def session_minutes(started_at: datetime.datetime, ended_at: datetime.datetime) -> int:
    """Whole minutes between start and end, half-up; never negative."""
    if started_at is None or ended_at is None:
        return 0
    elapsed_ms = (ensure_utc(ended_at) - ensure_utc(started_at)).total_seconds() * 1000
    return max(0, round_half_up(elapsed_ms / 60000))


def summarize_sessions(rows: Iterable[Tuple[datetime.datetime, datetime.datetime, int]]) -> dict:
    """Fold (started_at, ended_at, task_count) rows into a day's progress."""
    cards = minutes = sessions = 0
    for started_at, ended_at, task_count in rows:
        sessions += 1
        cards += task_count
        minutes += session_minutes(started_at, ended_at)
    return {
        'cards_completed': cards,
        'minutes_spent': minutes,
        'sessions_completed': sessions,
    }


def calendar_status(settings: StudySettings, sessions: int, minutes: int) -> str:
    """``none`` without sessions, else ``met`` or ``partial`` depending on the goal."""
    if sessions <= 0:
        return 'none'
    return 'met' if is_daily_goal_met(settings, sessions, minutes) else 'partial'

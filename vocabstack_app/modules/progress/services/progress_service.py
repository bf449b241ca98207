import calendar
import datetime
import logging
from typing import Optional

from flask import current_app

from vocabstack_app.core.error_handlers import NotFoundError, ValidationError
from vocabstack_app.core.extensions import db
from vocabstack_app.models import User
from vocabstack_app.modules.session.models import StudySession
from vocabstack_app.utils.db_session import run_in_transaction, run_read
from vocabstack_app.utils.time_utils import (
    ensure_utc,
    get_user_timezone,
    local_date,
    local_day_bounds,
    start_of_local_day,
    utcnow,
)

from ..logics.goal_logic import calendar_status, is_daily_goal_met, session_minutes, summarize_sessions
from ..logics.settings_logic import StudySettings, get_study_settings, sanitize_settings_update
from ..models import DailyAggregate

logger = logging.getLogger(__name__)


class ProgressService:
    """Daily progress, goal evaluation, calendar and study settings."""

    @staticmethod
    def _get_user(user_id: int) -> User:
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", resource='user')
        return user

    @staticmethod
    def get_study_settings(user_id: int) -> StudySettings:
        return run_read(lambda: get_study_settings(ProgressService._get_user(user_id)), label="study settings")

    @staticmethod
    def update_study_settings(user_id: int, changes: dict) -> StudySettings:
        """Merge a partial update into the stored settings."""
        try:
            clean = sanitize_settings_update(changes)
        except ValueError as exc:
            raise ValidationError(str(exc))

        def _work():
            user = ProgressService._get_user(user_id)
            stored = dict(user.study_settings or {})
            stored.update(clean)
            user.study_settings = stored
            db.session.add(user)
            return get_study_settings(user)

        settings = run_in_transaction(
            db.session, _work,
            retries=current_app.config.get('MAX_WRITE_RETRIES', 3),
            label=f"settings user={user_id}",
        )
        logger.info("Updated study settings for user %s: %s", user_id, sorted(clean))
        return settings

    @staticmethod
    def daily_progress(user_id: int, reference_day: Optional[datetime.date] = None, now: Optional[datetime.datetime] = None) -> dict:
        """
        Totals for sessions that ended on ``reference_day`` (default: today)
        in the user's timezone. Cards count every task snapshotted at start.
        """
        def _load():
            user = ProgressService._get_user(user_id)
            tz = get_user_timezone(user)
            day = reference_day or local_date(ensure_utc(now) if now else utcnow(), tz)
            start, end = local_day_bounds(day, tz)
            sessions = (
                StudySession.query
                .filter(
                    StudySession.user_id == user_id,
                    StudySession.ended_at.isnot(None),
                    StudySession.ended_at >= start,
                    StudySession.ended_at < end,
                )
                .all()
            )
            progress = summarize_sessions(
                (session.started_at, session.ended_at, len(session.tasks)) for session in sessions
            )
            progress['day'] = day.isoformat()
            return progress

        return run_read(_load, label="daily progress")

    @staticmethod
    def goal_status(user_id: int, reference_day: Optional[datetime.date] = None, now: Optional[datetime.datetime] = None) -> dict:
        progress = ProgressService.daily_progress(user_id, reference_day, now)
        settings = ProgressService.get_study_settings(user_id)
        progress['goal_met'] = is_daily_goal_met(settings, progress['sessions_completed'], progress['minutes_spent'])
        progress['settings'] = settings.to_dict()
        return progress

    @staticmethod
    def monthly_calendar(user_id: int, year: int, month: int, now: Optional[datetime.datetime] = None) -> dict:
        """
        One entry per day of the month: sessions started that local day,
        their minutes (at least one per session, open sessions measured up
        to now) and the goal status.
        """
        if not 1 <= int(month) <= 12:
            raise ValidationError("month must be between 1 and 12")
        now = ensure_utc(now) if now else utcnow()

        def _load():
            user = ProgressService._get_user(user_id)
            tz = get_user_timezone(user)
            settings = get_study_settings(user)
            days_in_month = calendar.monthrange(year, month)[1]
            first_day = datetime.date(year, month, 1)
            start = start_of_local_day(first_day, tz)
            end = start_of_local_day(first_day + datetime.timedelta(days=days_in_month), tz)

            sessions = (
                StudySession.query
                .filter(
                    StudySession.user_id == user_id,
                    StudySession.started_at >= start,
                    StudySession.started_at < end,
                )
                .order_by(StudySession.started_at)
                .all()
            )

            buckets = {}
            for session in sessions:
                finished = session.ended_at or now
                minutes = max(1, session_minutes(session.started_at, finished))
                key = local_date(session.started_at, tz)
                bucket = buckets.setdefault(key, {'sessions': 0, 'minutes': 0, 'items': []})
                bucket['sessions'] += 1
                bucket['minutes'] += minutes
                bucket['items'].append({
                    'session_id': session.session_id,
                    'mode': session.mode,
                    'deck_id': session.deck_id,
                    'accuracy': session.accuracy,
                    'minutes': minutes,
                    'started_at': session.started_at.isoformat(),
                    'ended_at': session.ended_at.isoformat() if session.ended_at else None,
                })

            days = []
            for offset in range(days_in_month):
                day = first_day + datetime.timedelta(days=offset)
                bucket = buckets.get(day, {'sessions': 0, 'minutes': 0, 'items': []})
                days.append({
                    'date': day.isoformat(),
                    'sessions': bucket['sessions'],
                    'minutes': bucket['minutes'],
                    'status': calendar_status(settings, bucket['sessions'], bucket['minutes']),
                    'items': bucket['items'],
                })
            return {'year': year, 'month': month, 'settings': settings.to_dict(), 'days': days}

        return run_read(_load, label="monthly calendar")

    @staticmethod
    def get_daily_aggregates(user_id: int, start_day: datetime.date, end_day: datetime.date) -> list:
        """Stored aggregates for ``start_day..end_day`` inclusive, oldest first."""
        return run_read(
            lambda: [
                row.to_dict()
                for row in DailyAggregate.query
                .filter(
                    DailyAggregate.user_id == user_id,
                    DailyAggregate.day >= start_day,
                    DailyAggregate.day <= end_day,
                )
                .order_by(DailyAggregate.day)
                .all()
            ],
            label="daily aggregates",
        )

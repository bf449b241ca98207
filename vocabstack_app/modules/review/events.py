# File: vocabstack_app/modules/review/events.py
"""
Backstop for the day-boundary reset.

Any flush that modifies a ReviewState without going through the scheduler
(which rewrites ``last_reviewed_at``) gets its ``today_*`` counters checked
by the same ``reset_daily_counters`` used on the scheduling path.
"""

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from vocabstack_app.utils.time_utils import get_user_timezone, utcnow

from .logics.scheduling import reset_daily_counters
from .models import ReviewState


@event.listens_for(Session, 'before_flush')
def reset_counters_before_flush(session, flush_context, instances):
    now = None
    with session.no_autoflush:
        for obj in list(session.dirty):
            if not isinstance(obj, ReviewState):
                continue
            if not session.is_modified(obj, include_collections=False):
                continue
            if inspect(obj).attrs.last_reviewed_at.history.has_changes():
                continue
            if now is None:
                now = utcnow()
            reset_daily_counters(obj, now, get_user_timezone(obj.user))

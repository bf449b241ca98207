"""
Signal receivers that keep DailyAggregate rows in step with reviews and
finished sessions. They run inside the sender's transaction and never commit.

Counters are bumped with ``UPDATE ... SET col = col + n`` so concurrent
senders for the same user and day never read-modify-write the shared row.
"""
import logging

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite

from vocabstack_app.core.extensions import db
from vocabstack_app.core.signals import card_reviewed, session_completed
from vocabstack_app.models import User
from vocabstack_app.utils.time_utils import get_user_timezone, local_date

from .logics.goal_logic import session_minutes
from .models import DailyAggregate

logger = logging.getLogger(__name__)

COUNTER_COLUMNS = ('sessions', 'minutes', 'cards', 'questions', 'correct', 'wrong')

_UPSERT_INSERTS = {
    'sqlite': sqlite.insert,
    'postgresql': postgresql.insert,
}


def _ensure_aggregate_row(user_id, day):
    zeros = {column: 0 for column in COUNTER_COLUMNS}
    insert = _UPSERT_INSERTS.get(db.session.get_bind().dialect.name)
    if insert is not None:
        db.session.execute(
            insert(DailyAggregate)
            .values(user_id=user_id, day=day, **zeros)
            .on_conflict_do_nothing(index_elements=['user_id', 'day'])
        )
        return
    exists = (
        db.session.query(DailyAggregate.aggregate_id)
        .filter_by(user_id=user_id, day=day)
        .first()
    )
    if exists is None:
        db.session.add(DailyAggregate(user_id=user_id, day=day, **zeros))
        db.session.flush()


def bump_daily_aggregate(user_id, when, **increments):
    """Add ``increments`` to the user's aggregate for the local day of ``when``."""
    user = db.session.get(User, user_id)
    day = local_date(when, get_user_timezone(user))
    _ensure_aggregate_row(user_id, day)

    values = {
        getattr(DailyAggregate, column): getattr(DailyAggregate, column) + amount
        for column, amount in increments.items()
        if amount
    }
    if not values:
        return day
    db.session.execute(
        update(DailyAggregate)
        .where(DailyAggregate.user_id == user_id, DailyAggregate.day == day)
        .values(values)
        .execution_options(synchronize_session=False)
    )
    return day


@card_reviewed.connect
def on_card_reviewed(sender, **kwargs):
    correct = 1 if kwargs.get('is_correct') else 0
    bump_daily_aggregate(
        kwargs['user_id'], kwargs['reviewed_at'],
        questions=1, correct=correct, wrong=1 - correct,
    )


@session_completed.connect
def on_session_completed(sender, **kwargs):
    day = bump_daily_aggregate(
        kwargs['user_id'], kwargs['ended_at'],
        sessions=1,
        cards=kwargs.get('task_count') or 0,
        minutes=session_minutes(kwargs.get('started_at'), kwargs['ended_at']),
    )
    logger.debug("Daily aggregate %s for user %s: session %s counted", day, kwargs['user_id'], kwargs.get('session_id'))

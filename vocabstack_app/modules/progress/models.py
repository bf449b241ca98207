from datetime import datetime, timezone

from vocabstack_app.core.extensions import db
from vocabstack_app.models.types import UTCDateTime


class DailyAggregate(db.Model):
    """Per user and local calendar day activity totals."""
    __tablename__ = 'daily_aggregates'

    aggregate_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    day = db.Column(db.Date, nullable=False)

    sessions = db.Column(db.Integer, nullable=False, default=0)
    minutes = db.Column(db.Integer, nullable=False, default=0)
    cards = db.Column(db.Integer, nullable=False, default=0)
    questions = db.Column(db.Integer, nullable=False, default=0)
    correct = db.Column(db.Integer, nullable=False, default=0)
    wrong = db.Column(db.Integer, nullable=False, default=0)

    updated_at = db.Column(UTCDateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('user_id', 'day', name='uq_daily_aggregate_user_day'),
    )

    def to_dict(self):
        return {
            'day': self.day.isoformat() if self.day else None,
            'sessions': self.sessions,
            'minutes': self.minutes,
            'cards': self.cards,
            'questions': self.questions,
            'correct': self.correct,
            'wrong': self.wrong,
        }

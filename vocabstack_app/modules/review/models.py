from datetime import datetime, timezone

from vocabstack_app.core.extensions import db
from vocabstack_app.models.types import UTCDateTime


class ReviewState(db.Model):
    """
    Scheduling state of a card for its owner. Exactly one row per
    (user, card); created lazily on the first review.
    """
    __tablename__ = 'review_states'

    state_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    card_id = db.Column(db.Integer, db.ForeignKey('cards.card_id'), nullable=False, index=True)

    # Scheduling
    level = db.Column(db.Integer, nullable=False, default=0)
    due_at = db.Column(UTCDateTime, nullable=False, index=True)
    last_reviewed_at = db.Column(UTCDateTime)
    last_level_up_at = db.Column(UTCDateTime)
    introduced_at = db.Column(UTCDateTime)

    # Lifetime counters
    total_correct = db.Column(db.Integer, nullable=False, default=0)
    total_wrong = db.Column(db.Integer, nullable=False, default=0)

    # Reset at the user's local day boundary
    today_correct_count = db.Column(db.Integer, nullable=False, default=0)
    today_wrong_count = db.Column(db.Integer, nullable=False, default=0)

    version_id = db.Column(db.Integer, nullable=False)

    created_at = db.Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(UTCDateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    user = db.relationship('User', lazy='joined')
    card = db.relationship('Card', backref=db.backref('review_states', lazy='dynamic', cascade='all, delete-orphan'))

    __table_args__ = (
        db.UniqueConstraint('user_id', 'card_id', name='uq_review_state_owner_card'),
        db.Index('ix_review_states_owner_due', 'user_id', 'due_at'),
    )
    __mapper_args__ = {'version_id_col': version_id}

    def to_dict(self):
        return {
            'state_id': self.state_id,
            'user_id': self.user_id,
            'card_id': self.card_id,
            'level': self.level,
            'due_at': self.due_at.isoformat() if self.due_at else None,
            'last_reviewed_at': self.last_reviewed_at.isoformat() if self.last_reviewed_at else None,
            'total_correct': self.total_correct,
            'total_wrong': self.total_wrong,
            'today_correct_count': self.today_correct_count,
            'today_wrong_count': self.today_wrong_count,
        }

from datetime import datetime, timezone
from sqlalchemy.types import JSON

from vocabstack_app.core.extensions import db
from vocabstack_app.models.types import UTCDateTime


class StudySession(db.Model):
    """
    A study session. The ordered task list in ``settings['tasks']`` is fixed
    at start; ``ended_at`` is set exactly once and marks the session terminal.
    """
    __tablename__ = 'study_sessions'

    session_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    deck_id = db.Column(db.Integer, db.ForeignKey('decks.deck_id', ondelete='SET NULL'), nullable=True)

    mode = db.Column(db.String(20), nullable=False)  # translate, abcd, sentence, describe, mixed, test
    target_count = db.Column(db.Integer, nullable=False, default=0)
    completed_count = db.Column(db.Integer, nullable=False, default=0)
    accuracy = db.Column(db.Integer, nullable=False, default=0)

    # Scope, options and the task list
    settings = db.Column(JSON, nullable=False, default=dict)

    started_at = db.Column(UTCDateTime, nullable=False, index=True)
    ended_at = db.Column(UTCDateTime, index=True)

    version_id = db.Column(db.Integer, nullable=False)

    items = db.relationship(
        'SessionItem',
        backref='session',
        lazy='dynamic',
        cascade='all, delete-orphan',
        order_by='SessionItem.position',
    )
    test = db.relationship('StudyTest', backref='session', uselist=False)

    __mapper_args__ = {'version_id_col': version_id}

    @property
    def is_active(self):
        return self.ended_at is None

    @property
    def tasks(self):
        return list((self.settings or {}).get('tasks') or [])

    def to_dict(self):
        return {
            'session_id': self.session_id,
            'user_id': self.user_id,
            'deck_id': self.deck_id,
            'mode': self.mode,
            'target_count': self.target_count,
            'completed_count': self.completed_count,
            'accuracy': self.accuracy,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'ended_at': self.ended_at.isoformat() if self.ended_at else None,
            'is_active': self.is_active,
            'test_id': (self.settings or {}).get('test_id'),
            'tasks': self.tasks,
        }


class SessionItem(db.Model):
    """Per-task detail row, filled in when the task is answered."""
    __tablename__ = 'session_items'

    item_id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('study_sessions.session_id', ondelete='CASCADE'), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)
    card_id = db.Column(db.Integer, db.ForeignKey('cards.card_id', ondelete='SET NULL'), nullable=True)

    task_type = db.Column(db.String(20), nullable=False)
    prompt_shown = db.Column(db.Text)
    user_answer = db.Column(db.Text)
    outcome = db.Column(db.String(10))  # correct, typo, wrong
    is_correct = db.Column(db.Boolean)
    used_hint = db.Column(db.Boolean, default=False)
    time_ms = db.Column(db.Integer, default=0)
    answered_at = db.Column(UTCDateTime)

    __table_args__ = (
        db.UniqueConstraint('session_id', 'position', name='uq_session_item_position'),
    )

    def to_dict(self):
        return {
            'position': self.position,
            'card_id': self.card_id,
            'task_type': self.task_type,
            'prompt_shown': self.prompt_shown,
            'user_answer': self.user_answer,
            'outcome': self.outcome,
            'is_correct': self.is_correct,
            'used_hint': self.used_hint,
            'answered_at': self.answered_at.isoformat() if self.answered_at else None,
        }

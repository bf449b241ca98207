from datetime import datetime, timezone
from sqlalchemy.types import JSON

from vocabstack_app.core.extensions import db
from vocabstack_app.models.types import UTCDateTime


class StudyTest(db.Model):
    """
    A scored test run. Created together with its ``test``-mode session and
    finalized when that session stops.
    """
    __tablename__ = 'tests'

    test_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    session_id = db.Column(db.Integer, db.ForeignKey('study_sessions.session_id', ondelete='SET NULL'), nullable=True, index=True)

    # Source scope
    source_type = db.Column(db.String(20), nullable=False, default='all')  # set, folder, all
    source_deck_id = db.Column(db.Integer, db.ForeignKey('decks.deck_id', ondelete='SET NULL'), nullable=True)
    source_folder_id = db.Column(db.Integer, db.ForeignKey('folders.folder_id', ondelete='SET NULL'), nullable=True)

    # Options
    enabled_modes = db.Column(JSON, default=list)
    question_count = db.Column(db.Integer, nullable=False, default=0)
    random_question_order = db.Column(db.Boolean, default=True)
    random_answer_order = db.Column(db.Boolean, default=True)

    # Outcome
    status = db.Column(db.String(20), nullable=False, default='in_progress', index=True)
    started_at = db.Column(UTCDateTime, nullable=False)
    finished_at = db.Column(UTCDateTime)
    duration_ms = db.Column(db.Integer)
    score_correct = db.Column(db.Integer, default=0)
    score_total = db.Column(db.Integer, default=0)
    score_percent = db.Column(db.Integer, default=0)

    created_at = db.Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    answers = db.relationship(
        'StudyTestAnswer',
        backref='test',
        lazy='dynamic',
        cascade='all, delete-orphan',
        order_by='StudyTestAnswer.answer_id',
    )
    source_deck = db.relationship('Deck', lazy=True)

    def to_dict(self):
        return {
            'test_id': self.test_id,
            'session_id': self.session_id,
            'status': self.status,
            'source_type': self.source_type,
            'source_deck_id': self.source_deck_id,
            'source_folder_id': self.source_folder_id,
            'enabled_modes': list(self.enabled_modes or []),
            'question_count': self.question_count,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
            'duration_ms': self.duration_ms,
            'score_correct': self.score_correct,
            'score_total': self.score_total,
            'score_percent': self.score_percent,
        }


class StudyTestAnswer(db.Model):
    """One graded answer inside a test. Rows are never updated."""
    __tablename__ = 'test_answers'

    answer_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    test_id = db.Column(db.Integer, db.ForeignKey('tests.test_id', ondelete='CASCADE'), nullable=False, index=True)
    card_id = db.Column(db.Integer, db.ForeignKey('cards.card_id', ondelete='SET NULL'), nullable=True)

    mode_used = db.Column(db.String(20), nullable=False)
    prompt_shown = db.Column(db.Text)
    user_answer = db.Column(db.Text)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    time_ms = db.Column(db.Integer, default=0)
    answered_at = db.Column(UTCDateTime, nullable=False)

    card = db.relationship('Card', lazy='joined')

    def to_dict(self):
        return {
            'answer_id': self.answer_id,
            'card_id': self.card_id,
            'mode_used': self.mode_used,
            'prompt_shown': self.prompt_shown,
            'user_answer': self.user_answer,
            'is_correct': self.is_correct,
            'time_ms': self.time_ms,
            'answered_at': self.answered_at.isoformat() if self.answered_at else None,
            'card_front': self.card.front if self.card else None,
            'card_back': self.card.back if self.card else None,
        }

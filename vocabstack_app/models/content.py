"""Folder, deck and card records owned by a single user."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.types import JSON

from ..core.extensions import db
from .types import UTCDateTime


class Folder(db.Model):
    __tablename__ = 'folders'

    folder_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    created_at = db.Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    decks = db.relationship('Deck', backref='folder', lazy='dynamic')


class Deck(db.Model):
    __tablename__ = 'decks'

    DIRECTION_FRONT_TO_BACK = 'front-to-back'
    DIRECTION_BACK_TO_FRONT = 'back-to-front'
    DIRECTION_BOTH = 'both'

    deck_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    folder_id = db.Column(db.Integer, db.ForeignKey('folders.folder_id'), nullable=True, index=True)
    name = db.Column(db.String(200), nullable=False)
    direction = db.Column(db.String(20), default=DIRECTION_FRONT_TO_BACK)
    created_at = db.Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    cards = db.relationship('Card', backref='deck', lazy='dynamic', cascade='all, delete-orphan')


class Card(db.Model):
    """A flashcard. Identity is immutable; content is edited by its owner only."""

    __tablename__ = 'cards'

    card_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    deck_id = db.Column(db.Integer, db.ForeignKey('decks.deck_id'), nullable=False)

    front = db.Column(db.Text, nullable=False)
    back = db.Column(db.Text, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    examples = db.Column(JSON, nullable=True)
    card_type = db.Column(db.String(20), default='word')
    starred = db.Column(db.Boolean, default=False)

    created_at = db.Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.Index('ix_cards_owner_deck', 'user_id', 'deck_id'),
    )

    def to_dict(self):
        return {
            'card_id': self.card_id,
            'deck_id': self.deck_id,
            'front': self.front,
            'back': self.back,
            'notes': self.notes,
            'examples': self.examples or [],
            'card_type': self.card_type or 'word',
            'starred': bool(self.starred),
        }

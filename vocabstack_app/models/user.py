"""User model: owner of decks, cards, review states and sessions."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.types import JSON

from ..core.extensions import db
from .types import UTCDateTime


class User(db.Model):
    """Application user. Authentication lives outside the engine."""

    __tablename__ = 'users'

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    timezone = db.Column(db.String(50), default='UTC')

    # Partial StudySettings; missing keys fall back to DEFAULT_STUDY_SETTINGS
    study_settings = db.Column(JSON, nullable=True)

    created_at = db.Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<User {self.user_id} {self.username}>'

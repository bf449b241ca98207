"""Database models package for VocabStack.

Engine-specific tables (review states, sessions, tests, daily aggregates)
live in their modules; this package holds the record-store entities the
engine reads.
"""

from ..core.extensions import db

from .types import UTCDateTime
from .user import User
from .content import Folder, Deck, Card

__all__ = [
    'db',
    'UTCDateTime',
    'User',
    'Folder',
    'Deck',
    'Card',
]

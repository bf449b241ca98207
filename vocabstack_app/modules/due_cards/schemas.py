# File: vocabstack_app/modules/due_cards/schemas.py
import datetime
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class DueCardDTO:
    """Compact card projection returned by the due-set resolver."""
    id: int
    deck_id: int
    front: str
    back: str
    due: bool
    card_type: str = 'word'
    level: Optional[int] = None
    due_at: Optional[datetime.datetime] = None

    def to_dict(self):
        return {
            'id': self.id,
            'deck_id': self.deck_id,
            'front': self.front,
            'back': self.back,
            'due': self.due,
            'card_type': self.card_type,
            'level': self.level,
            'due_at': self.due_at.isoformat() if self.due_at else None,
        }


@dataclass
class DuePage:
    cards: List[DueCardDTO] = field(default_factory=list)
    next_cursor: Optional[int] = None
    total_due: int = 0
    total_count: int = 0

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None

    def to_dict(self):
        return {
            'cards': [card.to_dict() for card in self.cards],
            'next_cursor': self.next_cursor,
            'total_due': self.total_due,
            'total_count': self.total_count,
        }

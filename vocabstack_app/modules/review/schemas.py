# File: vocabstack_app/modules/review/schemas.py
import datetime
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class ReviewSnapshot:
    """Plain copy of a ReviewState's scheduling fields, used by the pure logic."""
    level: int = 0
    due_at: Optional[datetime.datetime] = None
    total_correct: int = 0
    total_wrong: int = 0
    today_correct_count: int = 0
    today_wrong_count: int = 0
    last_reviewed_at: Optional[datetime.datetime] = None
    last_level_up_at: Optional[datetime.datetime] = None

    def evolve(self, **changes) -> 'ReviewSnapshot':
        return replace(self, **changes)


@dataclass
class ReviewResultDTO:
    """Result of applying one graded answer to a card."""
    card_id: int
    outcome: str
    is_correct: bool
    previous_level: int
    level: int
    due_at: datetime.datetime
    total_correct: int
    total_wrong: int
    today_correct_count: int
    today_wrong_count: int
    created: bool = False

# File: vocabstack_app/modules/session/schemas.py
import datetime
from dataclasses import asdict, dataclass, field
from typing import List, Optional


@dataclass
class CandidateCard:
    """A card in scope plus its review state, if it has one."""
    card_id: int
    deck_id: int
    front: str
    back: str
    level: Optional[int] = None
    due_at: Optional[datetime.datetime] = None
    today_wrong_count: int = 0
    last_reviewed_at: Optional[datetime.datetime] = None

    @property
    def is_new(self) -> bool:
        return self.level is None


@dataclass
class SessionStartResult:
    session_id: int
    tasks: List[dict] = field(default_factory=list)
    test_id: Optional[int] = None
    deck_id: Optional[int] = None

    def to_dict(self):
        return asdict(self)


@dataclass
class AnswerResult:
    outcome: str
    is_correct: bool
    expected_answer: str
    hint: Optional[str]
    level: int
    due_at: datetime.datetime
    completed_count: int
    target_count: int
    accuracy: int
    session_done: bool = False

    def to_dict(self):
        data = asdict(self)
        data['due_at'] = self.due_at.isoformat() if self.due_at else None
        return data

"""
Pure card selection for a new session.

Order of preference:
1. Due cards: lowest level first, then most wrong answers today, then the
   least recently reviewed.
2. New cards, limited by what is left of the daily new-card allowance.
3. Scheduled cards that are not due yet, earliest due first.
"""
import datetime
from typing import Iterable, List, Optional, Sequence

from vocabstack_app.utils.time_utils import ensure_utc

from ..schemas import CandidateCard

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def _due_sort_key(card: CandidateCard):
    last = ensure_utc(card.last_reviewed_at) if card.last_reviewed_at else _EPOCH
    return (card.level or 0, -(card.today_wrong_count or 0), last, card.card_id)


def _upcoming_sort_key(card: CandidateCard):
    return (ensure_utc(card.due_at), card.card_id)


def filter_by_levels(candidates: Iterable[CandidateCard], levels: Optional[Sequence[int]]) -> List[CandidateCard]:
    """Keep cards whose level is selected; level 0 also admits new cards."""
    candidates = list(candidates)
    if not levels:
        return candidates
    wanted = set(levels)
    kept = []
    for card in candidates:
        if card.is_new:
            if 0 in wanted:
                kept.append(card)
        elif card.level in wanted:
            kept.append(card)
    return kept


def new_card_allowance(max_new_per_day: int, introduced_today: int) -> int:
    return max(0, int(max_new_per_day) - int(introduced_today))


def select_cards(
    candidates: Iterable[CandidateCard],
    target_count: int,
    now: datetime.datetime,
    max_new_per_day: int = 20,
    introduced_today: int = 0,
) -> List[CandidateCard]:
    """Pick up to ``target_count`` cards in session order."""
    now = ensure_utc(now)
    due, new, upcoming = [], [], []
    for card in candidates:
        if card.is_new:
            new.append(card)
        elif card.due_at is not None and ensure_utc(card.due_at) <= now:
            due.append(card)
        else:
            upcoming.append(card)

    due.sort(key=_due_sort_key)
    new.sort(key=lambda card: card.card_id)
    upcoming.sort(key=_upcoming_sort_key)

    selected = due[:target_count]
    allowance = new_card_allowance(max_new_per_day, introduced_today)
    if len(selected) < target_count and allowance:
        selected.extend(new[:min(allowance, target_count - len(selected))])
    if len(selected) < target_count:
        selected.extend(upcoming[:target_count - len(selected)])
    return selected

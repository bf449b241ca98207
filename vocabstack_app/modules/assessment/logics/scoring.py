"""
Pure scoring helpers for test records.
"""
import datetime
from typing import Iterable, Optional

from vocabstack_app.utils.numbers import percentage

from ..config import AssessmentDefaultConfig


def filter_enabled_modes(modes: Optional[Iterable[str]]) -> list:
    """Keep known test modes in order, dropping duplicates; empty falls back to the default."""
    kept = []
    for mode in modes or ():
        if mode in AssessmentDefaultConfig.TEST_MODES and mode not in kept:
            kept.append(mode)
    return kept or list(AssessmentDefaultConfig.DEFAULT_ENABLED_MODES)


def score_percent(correct: int, total: int) -> int:
    """Half-up rounded percentage; an empty test scores 0."""
    return percentage(correct, total)


def duration_ms(started_at: datetime.datetime, finished_at: datetime.datetime) -> int:
    """Elapsed milliseconds, never negative."""
    if started_at is None or finished_at is None:
        return 0
    elapsed = (finished_at - started_at).total_seconds() * 1000
    return max(0, int(elapsed))


def source_type_for(deck_id: Optional[int], folder_id: Optional[int]) -> str:
    if deck_id is not None:
        return 'set'
    if folder_id is not None:
        return 'folder'
    return 'all'

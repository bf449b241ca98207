# File: vocabstack_app/modules/review/interface.py
"""
Review Interface
================
Public API for reading and advancing per-card scheduling state.
"""

from typing import Optional

from .config import ReviewDefaultConfig
from .logics.scheduling import interval_for_level, reset_daily_counters
from .models import ReviewState
from .schemas import ReviewResultDTO
from .services.scheduler_service import SchedulerService


class ReviewInterface:
    """Public interface for review scheduling."""

    @staticmethod
    def get_state(user_id: int, card_id: int) -> Optional[ReviewState]:
        return SchedulerService.get_state(user_id, card_id)

    @staticmethod
    def stage_review(user_id, card_id, outcome, is_correct=None, used_hint=False, now=None) -> ReviewResultDTO:
        """Apply an outcome inside the caller's transaction."""
        return SchedulerService.stage_review(user_id, card_id, outcome, is_correct, used_hint, now)

    @staticmethod
    def process_review(user_id, card_id, outcome, is_correct=None, used_hint=False, now=None) -> ReviewResultDTO:
        """Apply an outcome and commit."""
        return SchedulerService.process_review(user_id, card_id, outcome, is_correct, used_hint, now)

    @staticmethod
    def max_level() -> int:
        return ReviewDefaultConfig.MAX_LEVEL

    interval_for_level = staticmethod(interval_for_level)
    reset_daily_counters = staticmethod(reset_daily_counters)

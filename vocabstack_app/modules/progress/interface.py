# File: vocabstack_app/modules/progress/interface.py
"""
Progress Interface
==================
Public API for daily progress, goals, the study calendar and settings.
"""

from .logics.goal_logic import is_daily_goal_met
from .logics.settings_logic import StudySettings, merge_settings
from .services.progress_service import ProgressService


class ProgressInterface:

    @staticmethod
    def daily_progress(user_id, reference_day=None, now=None) -> dict:
        return ProgressService.daily_progress(user_id, reference_day, now)

    @staticmethod
    def goal_status(user_id, reference_day=None, now=None) -> dict:
        return ProgressService.goal_status(user_id, reference_day, now)

    @staticmethod
    def monthly_calendar(user_id, year, month, now=None) -> dict:
        return ProgressService.monthly_calendar(user_id, year, month, now)

    @staticmethod
    def get_study_settings(user_id) -> StudySettings:
        return ProgressService.get_study_settings(user_id)

    @staticmethod
    def update_study_settings(user_id, changes) -> StudySettings:
        return ProgressService.update_study_settings(user_id, changes)

    @staticmethod
    def get_daily_aggregates(user_id, start_day, end_day):
        return ProgressService.get_daily_aggregates(user_id, start_day, end_day)

    @staticmethod
    def is_daily_goal_met(settings, sessions, minutes) -> bool:
        if isinstance(settings, dict):
            settings = merge_settings(settings)
        return is_daily_goal_met(settings, sessions, minutes)

# File: vocabstack_app/modules/assessment/interface.py
"""
Assessment Interface
====================
Public API for test records. Writing happens through the session module.
"""

from .logics.scoring import filter_enabled_modes, score_percent
from .models import StudyTest, StudyTestAnswer
from .services.test_service import AssessmentService


class AssessmentInterface:

    @staticmethod
    def get_test_result(test_id, user_id) -> dict:
        return AssessmentService.get_test_result(test_id, user_id)

    @staticmethod
    def list_tests(user_id, limit=None, status=None):
        return AssessmentService.list_tests(user_id, limit=limit, status=status)

    @staticmethod
    def deck_ranking(user_id):
        return AssessmentService.deck_ranking(user_id)

    @staticmethod
    def score_percent(correct, total) -> int:
        return score_percent(correct, total)

    @staticmethod
    def enabled_modes(modes):
        return filter_enabled_modes(modes)

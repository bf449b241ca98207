# File: vocabstack_app/modules/answer_check/interface.py
"""
Answer Check Interface
======================
Public API for other modules to grade answers and build hints.
"""

from typing import Iterable, Optional

from flask import current_app, has_app_context

from .logics.hints import build_hint
from .logics.sentence import SentenceCheck, check_sentence
from .logics.matcher import (
    AnswerOutcome,
    classify_answer,
    levenshtein_distance,
    matches,
    normalize_answer,
    split_alternatives,
)


class AnswerCheckInterface:
    """Public interface for answer grading."""

    @staticmethod
    def normalize(value: str) -> str:
        return normalize_answer(value)

    @staticmethod
    def matches(user_answer: str, expected: str, accepted: Iterable[str] = ()) -> bool:
        return matches(user_answer, expected, accepted)

    @staticmethod
    def classify(user_answer: str, expected: str, accepted: Iterable[str] = ()) -> AnswerOutcome:
        return classify_answer(user_answer, expected, accepted)

    @staticmethod
    def classify_expected(user_answer: str, expected: str, separator: Optional[str] = None) -> AnswerOutcome:
        """
        Grade against an expected answer that may embed alternatives
        (``"dom; mieszkanie"``). The separator defaults to the app's
        ANSWER_ALTERNATIVE_SEPARATOR.
        """
        if separator is None:
            separator = ';'
            if has_app_context():
                separator = current_app.config.get('ANSWER_ALTERNATIVE_SEPARATOR', ';')
        primary, alternatives = split_alternatives(expected, separator)
        return classify_answer(user_answer, primary, alternatives)

    @staticmethod
    def distance(a: str, b: str) -> int:
        return levenshtein_distance(a, b)

    @staticmethod
    def hint(answer: str) -> str:
        return build_hint(answer)

    @staticmethod
    def check_sentence(sentence: str, required_phrase: str) -> SentenceCheck:
        return check_sentence(sentence, required_phrase)

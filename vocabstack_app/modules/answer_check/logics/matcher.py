"""
Pure logic for answer evaluation - normalization, edit distance, grading.
No Database access, no Models, no Flask.
"""

import re
from enum import Enum
from typing import Iterable, List, Tuple

_WHITESPACE_RE = re.compile(r'\s+')
_TRAILING_PUNCTUATION_RE = re.compile(r'[.,!?]+$')


class AnswerOutcome(str, Enum):
    CORRECT = 'correct'
    TYPO = 'typo'
    WRONG = 'wrong'


def normalize_answer(value: str) -> str:
    """
    Normalize an answer string for comparison:
    trim, collapse whitespace runs, lowercase, strip trailing .,!? characters.
    """
    if value is None:
        return ''
    text = _WHITESPACE_RE.sub(' ', value.strip()).lower()
    return _TRAILING_PUNCTUATION_RE.sub('', text)


def matches(user_answer: str, expected: str, accepted: Iterable[str] = ()) -> bool:
    """True iff the normalized answer equals the expected answer or an accepted alternative."""
    normalized = normalize_answer(user_answer)
    if normalized == normalize_answer(expected):
        return True
    return any(normalize_answer(alt) == normalized for alt in accepted or ())


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings (per code point)."""
    rows = len(s1) + 1
    cols = len(s2) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        c1 = s1[i - 1]
        for j in range(1, cols):
            cost = 0 if c1 == s2[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,         # deletion
                table[i][j - 1] + 1,         # insertion
                table[i - 1][j - 1] + cost,  # substitution
            )
    return table[-1][-1]


def classify_answer(user_answer: str, expected: str, accepted: Iterable[str] = ()) -> AnswerOutcome:
    """Grade ``user_answer`` as correct, typo (edit distance 1) or wrong."""
    accepted = list(accepted or ())
    if matches(user_answer, expected, accepted):
        return AnswerOutcome.CORRECT

    normalized = normalize_answer(user_answer)
    if levenshtein_distance(normalized, normalize_answer(expected)) == 1:
        return AnswerOutcome.TYPO

    for alt in accepted:
        if levenshtein_distance(normalized, normalize_answer(alt)) == 1:
            return AnswerOutcome.TYPO

    return AnswerOutcome.WRONG


def split_alternatives(answer: str, separator: str = ';') -> Tuple[str, List[str]]:
    """Split ``"dom; mieszkanie"`` into the primary answer and its alternatives."""
    if not answer or not separator or separator not in answer:
        return answer or '', []
    parts = [part.strip() for part in answer.split(separator)]
    parts = [part for part in parts if part]
    if not parts:
        return '', []
    return parts[0], parts[1:]

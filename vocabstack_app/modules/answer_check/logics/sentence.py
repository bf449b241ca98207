"""
Deterministic checks for sentence tasks, where the learner writes a full
sentence that must use the card's phrase. No grammar checking here.
"""

from dataclasses import asdict, dataclass
from typing import Optional

ISSUE_EMPTY_SENTENCE = 'empty_sentence'
ISSUE_MISSING_PHRASE_CONFIG = 'missing_phrase_config'
ISSUE_MISSING_PHRASE = 'missing_phrase'


@dataclass(frozen=True)
class SentenceCheck:
    ok: bool
    issue_type: Optional[str] = None
    message: str = ''

    def to_dict(self):
        return asdict(self)


def check_sentence(sentence: str, required_phrase: str) -> SentenceCheck:
    """
    ``sentence`` must be non-blank and contain ``required_phrase``
    (case-insensitive substring match).
    """
    if not sentence or not sentence.strip():
        return SentenceCheck(False, ISSUE_EMPTY_SENTENCE, "The sentence cannot be empty.")
    if not required_phrase or not required_phrase.strip():
        return SentenceCheck(False, ISSUE_MISSING_PHRASE_CONFIG, "No required phrase to check against.")
    if required_phrase.lower() not in sentence.lower():
        return SentenceCheck(
            False, ISSUE_MISSING_PHRASE, f'The sentence must contain the phrase "{required_phrase}".'
        )
    return SentenceCheck(True, None, "The sentence contains the required phrase.")

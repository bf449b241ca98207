"""
Tests for answer evaluation: normalization, edit distance, grading and hints.
"""

import pytest

from vocabstack_app.modules.answer_check.interface import AnswerCheckInterface
from vocabstack_app.modules.answer_check.logics.hints import build_hint
from vocabstack_app.modules.answer_check.logics.sentence import check_sentence
from vocabstack_app.modules.answer_check.logics.matcher import (
    AnswerOutcome,
    classify_answer,
    levenshtein_distance,
    matches,
    normalize_answer,
    split_alternatives,
)


class TestNormalizeAnswer:

    def test_trims_collapses_and_lowercases(self):
        assert normalize_answer('  Hello   World  ') == 'hello world'

    def test_strips_trailing_punctuation_only(self):
        assert normalize_answer('Really?!') == 'really'
        assert normalize_answer('a.b.') == 'a.b'
        assert normalize_answer('wait, what') == 'wait, what'

    @pytest.mark.parametrize('value', ['Dom.', '  KOT  ', 'ok   go!!', '', 'e.g.,'])
    def test_idempotent(self, value):
        once = normalize_answer(value)
        assert normalize_answer(once) == once

    def test_none_is_empty(self):
        assert normalize_answer(None) == ''


class TestLevenshtein:

    @pytest.mark.parametrize('a,b', [('kitten', 'sitting'), ('', 'abc'), ('żółw', 'zolw'), ('flaw', 'lawn')])
    def test_symmetric(self, a, b):
        assert levenshtein_distance(a, b) == levenshtein_distance(b, a)

    def test_identity_and_known_values(self):
        assert levenshtein_distance('dom', 'dom') == 0
        assert levenshtein_distance('kitten', 'sitting') == 3
        assert levenshtein_distance('', 'abc') == 3

    def test_counts_code_points(self):
        assert levenshtein_distance('żółw', 'zółw') == 1


class TestClassifyAnswer:

    @pytest.mark.parametrize('answer', ['house', 'Dom!', '  big   cat '])
    def test_answer_is_correct_against_itself(self, answer):
        assert classify_answer(answer, answer) == AnswerOutcome.CORRECT

    def test_case_and_punctuation_do_not_matter(self):
        assert classify_answer('HOUSE.', 'house') == AnswerOutcome.CORRECT

    def test_single_edit_is_typo(self):
        assert classify_answer('hous', 'house') == AnswerOutcome.TYPO
        assert classify_answer('housr', 'house') == AnswerOutcome.TYPO

    def test_two_edits_are_wrong(self):
        assert classify_answer('hose!', 'horse') == AnswerOutcome.TYPO
        assert classify_answer('hosue', 'house') == AnswerOutcome.WRONG

    def test_accepted_alternatives(self):
        assert matches('flat', 'apartment', ['flat'])
        assert classify_answer('flat', 'apartment', ['flat']) == AnswerOutcome.CORRECT
        assert classify_answer('flar', 'apartment', ['flat']) == AnswerOutcome.TYPO
        assert classify_answer('flxx', 'apartment', ['flat']) == AnswerOutcome.WRONG

    def test_split_alternatives(self):
        assert split_alternatives('dom; mieszkanie') == ('dom', ['mieszkanie'])
        assert split_alternatives('dom') == ('dom', [])
        assert split_alternatives('') == ('', [])

    def test_interface_uses_configured_separator(self, app):
        assert AnswerCheckInterface.classify_expected('mieszkanie', 'dom; mieszkanie') == AnswerOutcome.CORRECT
        app.config['ANSWER_ALTERNATIVE_SEPARATOR'] = '|'
        assert AnswerCheckInterface.classify_expected('mieszkanie', 'dom | mieszkanie') == AnswerOutcome.CORRECT


class TestHints:

    def test_examples(self):
        assert build_hint('cat') == 'c _ _'
        assert build_hint('ok go') == 'o _  g _'

    def test_short_answers_unchanged(self):
        assert build_hint('a') == 'a'
        assert build_hint('  ') == ''
        assert build_hint('a cat') == 'a  c _ _'

    def test_reveals_only_first_letters(self):
        hint = build_hint('hello world')
        assert hint.replace(' ', '').replace('_', '') == 'hw'


class TestSentenceCheck:

    def test_accepts_sentence_containing_phrase_in_any_case(self):
        result = check_sentence('The Night was long.', 'night')
        assert result.ok is True
        assert result.issue_type is None

    @pytest.mark.parametrize('sentence,phrase,issue', [
        ('', 'night', 'empty_sentence'),
        ('   ', 'night', 'empty_sentence'),
        (None, 'night', 'empty_sentence'),
        ('It was dark.', '', 'missing_phrase_config'),
        ('It was dark.', None, 'missing_phrase_config'),
        ('It was dark.', 'night', 'missing_phrase'),
    ])
    def test_reports_issue_type(self, sentence, phrase, issue):
        result = check_sentence(sentence, phrase)
        assert result.ok is False
        assert result.issue_type == issue

    def test_interface_delegates(self):
        result = AnswerCheckInterface.check_sentence('good night', 'good night')
        assert result.to_dict() == {
            'ok': True,
            'issue_type': None,
            'message': 'The sentence contains the required phrase.',
        }
        assert 'night' in AnswerCheckInterface.check_sentence('a day', 'night').message

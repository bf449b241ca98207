"""
Tests for the review scheduler: level transitions, intervals, day-boundary
counter reset and the persisted ReviewState.
"""

import datetime

import pytest
import pytz

from vocabstack_app import db
from vocabstack_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from vocabstack_app.modules.review.config import ReviewDefaultConfig
from vocabstack_app.modules.review.interface import ReviewInterface
from vocabstack_app.modules.review.logics.scheduling import (
    compute_next_state,
    interval_for_level,
    next_level,
    reset_daily_counters,
)
from vocabstack_app.modules.review.models import ReviewState
from vocabstack_app.modules.review.schemas import ReviewSnapshot

UTC = pytz.UTC
WARSAW = pytz.timezone('Europe/Warsaw')


def at(*args):
    return datetime.datetime(*args, tzinfo=datetime.timezone.utc)


class TestLevels:

    def test_intervals_strictly_increase(self):
        intervals = [interval_for_level(level) for level in range(ReviewDefaultConfig.MAX_LEVEL + 1)]
        assert all(a < b for a, b in zip(intervals, intervals[1:]))

    def test_wrong_resets_to_zero(self):
        assert next_level(3, is_correct=False) == 0

    def test_correct_moves_up_and_caps(self):
        assert next_level(0, is_correct=True) == 1
        assert next_level(ReviewDefaultConfig.MAX_LEVEL, is_correct=True) == ReviewDefaultConfig.MAX_LEVEL

    def test_hint_keeps_level(self):
        assert next_level(2, is_correct=True, used_hint=True) == 2

    def test_miss_is_due_sooner_than_hit(self):
        now = at(2026, 3, 10, 12)
        snapshot = ReviewSnapshot(level=2, due_at=now, last_reviewed_at=now)
        hit = compute_next_state(snapshot, True, now, UTC)
        miss = compute_next_state(snapshot, False, now, UTC)
        assert miss.due_at < hit.due_at
        assert hit.due_at == now + interval_for_level(3)
        assert miss.level == 0

    def test_hinted_hit_at_level_zero_still_beats_a_miss(self):
        now = at(2026, 3, 10, 12)
        snapshot = ReviewSnapshot(level=0, due_at=now, last_reviewed_at=now)
        hinted = compute_next_state(snapshot, True, now, UTC, used_hint=True)
        miss = compute_next_state(snapshot, False, now, UTC)
        assert hinted.level == 0
        assert hinted.due_at == now + interval_for_level(0)
        assert miss.due_at == now + ReviewDefaultConfig.relearn_interval()
        assert miss.due_at < hinted.due_at

    def test_relearn_interval_is_shortest(self):
        assert ReviewDefaultConfig.relearn_interval() < interval_for_level(0)


class TestDayBoundary:

    def test_counters_reset_on_new_local_day(self):
        snapshot = ReviewSnapshot(
            level=1,
            today_correct_count=5,
            today_wrong_count=2,
            last_reviewed_at=at(2026, 3, 9, 23, 30),
        )
        result = compute_next_state(snapshot, True, at(2026, 3, 10, 0, 10), UTC)
        assert result.today_correct_count == 1
        assert result.today_wrong_count == 0
        assert result.total_correct == 1

    def test_same_local_day_keeps_counting(self):
        snapshot = ReviewSnapshot(today_correct_count=2, today_wrong_count=1, last_reviewed_at=at(2026, 3, 10, 8))
        result = compute_next_state(snapshot, False, at(2026, 3, 10, 9), UTC)
        assert (result.today_correct_count, result.today_wrong_count) == (2, 2)

    def test_boundary_follows_user_timezone(self):
        # 23:30 UTC on March 9th is already March 10th in Warsaw
        snapshot = ReviewSnapshot(today_correct_count=4, last_reviewed_at=at(2026, 3, 9, 23, 30))
        result = compute_next_state(snapshot, True, at(2026, 3, 10, 9), WARSAW)
        assert result.today_correct_count == 5

    def test_reset_is_idempotent(self):
        class State:
            last_reviewed_at = at(2026, 3, 9, 10)
            today_correct_count = 3
            today_wrong_count = 1

        state = State()
        now = at(2026, 3, 10, 10)
        assert reset_daily_counters(state, now, UTC) is True
        assert reset_daily_counters(state, now, UTC) is False
        assert (state.today_correct_count, state.today_wrong_count) == (0, 0)


class TestSchedulerService:

    def test_first_review_creates_state(self, factory, clock):
        user = factory.user()
        card = factory.card(factory.deck(user))

        result = ReviewInterface.process_review(user.user_id, card.card_id, 'correct')

        assert result.created is True
        assert result.level == 1
        state = ReviewInterface.get_state(user.user_id, card.card_id)
        assert state.introduced_at == clock.now
        assert state.due_at == clock.now + interval_for_level(1)
        assert state.total_correct == 1

    def test_typo_counts_as_correct_by_default(self, factory):
        user = factory.user()
        card = factory.card(factory.deck(user))
        result = ReviewInterface.process_review(user.user_id, card.card_id, 'typo')
        assert result.is_correct is True
        assert result.level == 1

    def test_wrong_answer_after_progress(self, factory, clock):
        user = factory.user()
        card = factory.card(factory.deck(user))
        ReviewInterface.process_review(user.user_id, card.card_id, 'correct')
        ReviewInterface.process_review(user.user_id, card.card_id, 'correct')
        result = ReviewInterface.process_review(user.user_id, card.card_id, 'wrong')

        assert result.previous_level == 2
        assert result.level == 0
        assert result.total_correct == 2
        assert result.total_wrong == 1
        assert result.today_wrong_count == 1
        assert result.due_at == clock.now + ReviewDefaultConfig.relearn_interval()

    def test_counters_reset_next_day(self, factory, clock):
        user = factory.user()
        card = factory.card(factory.deck(user))
        ReviewInterface.process_review(user.user_id, card.card_id, 'correct')
        ReviewInterface.process_review(user.user_id, card.card_id, 'wrong')
        clock.advance(days=1)
        result = ReviewInterface.process_review(user.user_id, card.card_id, 'correct')
        assert (result.today_correct_count, result.today_wrong_count) == (1, 0)
        assert (result.total_correct, result.total_wrong) == (2, 1)

    def test_unique_state_per_card(self, factory):
        user = factory.user()
        card = factory.card(factory.deck(user))
        for _ in range(3):
            ReviewInterface.process_review(user.user_id, card.card_id, 'correct')
        assert ReviewState.query.filter_by(user_id=user.user_id, card_id=card.card_id).count() == 1

    def test_rejects_foreign_card(self, factory):
        owner = factory.user()
        other = factory.user()
        card = factory.card(factory.deck(owner))
        with pytest.raises(AuthorizationError):
            ReviewInterface.process_review(other.user_id, card.card_id, 'correct')
        assert ReviewState.query.count() == 0

    def test_rejects_missing_card_and_bad_outcome(self, factory):
        user = factory.user()
        card = factory.card(factory.deck(user))
        with pytest.raises(NotFoundError):
            ReviewInterface.process_review(user.user_id, 9999, 'correct')
        with pytest.raises(ValidationError):
            ReviewInterface.process_review(user.user_id, card.card_id, 'maybe')

    def test_backstop_resets_counters_on_direct_edit(self, factory, clock):
        user = factory.user()
        card = factory.card(factory.deck(user))
        ReviewInterface.process_review(user.user_id, card.card_id, 'correct')
        clock.advance(days=2)

        state = ReviewInterface.get_state(user.user_id, card.card_id)
        state.level = 3
        db.session.commit()

        state = ReviewInterface.get_state(user.user_id, card.card_id)
        assert state.level == 3
        assert state.today_correct_count == 0
        assert state.total_correct == 1

"""
Tests for daily progress, goal evaluation, the calendar and study settings.
"""

import datetime

import pytest

from vocabstack_app import db
from vocabstack_app.core.error_handlers import ValidationError
from vocabstack_app.modules.progress.events import bump_daily_aggregate
from vocabstack_app.modules.progress.interface import ProgressInterface
from vocabstack_app.modules.progress.logics.goal_logic import calendar_status, session_minutes
from vocabstack_app.modules.progress.logics.settings_logic import StudySettings, merge_settings
from vocabstack_app.modules.progress.models import DailyAggregate
from vocabstack_app.modules.session.interface import SessionInterface


def run_session(user, deck, clock, minutes, count=2, answer=True):
    started = SessionInterface.start_session(user.user_id, 'translate', count, deck_id=deck.deck_id)
    clock.advance(minutes=minutes)
    if answer:
        for index, task in enumerate(started.tasks):
            SessionInterface.record_answer(started.session_id, user.user_id, index, task['answer'])
    else:
        SessionInterface.stop_session(started.session_id, user.user_id)
    return started


class TestGoalLogic:

    @pytest.mark.parametrize('mode,sessions,minutes,expected', [
        ('sessions', 1, 0, True),
        ('sessions', 0, 60, False),
        ('minutes', 5, 9, False),
        ('minutes', 0, 10, True),
        ('hybrid', 1, 0, True),
        ('hybrid', 0, 10, True),
        ('hybrid', 0, 9, False),
    ])
    def test_is_daily_goal_met(self, mode, sessions, minutes, expected):
        settings = StudySettings(daily_goal_mode=mode)
        assert ProgressInterface.is_daily_goal_met(settings, sessions, minutes) is expected

    def test_session_minutes_round_half_up(self):
        start = datetime.datetime(2026, 3, 10, 12, tzinfo=datetime.timezone.utc)
        assert session_minutes(start, start + datetime.timedelta(seconds=90)) == 2
        assert session_minutes(start, start + datetime.timedelta(seconds=89)) == 1

    def test_calendar_status(self):
        settings = StudySettings(min_sessions_per_day=2)
        assert calendar_status(settings, 0, 0) == 'none'
        assert calendar_status(settings, 1, 30) == 'partial'
        assert calendar_status(settings, 2, 3) == 'met'

    def test_merge_settings_falls_back_on_bad_values(self):
        settings = merge_settings({'daily_goal_mode': 'weekly', 'max_new_per_day': 'lots', 'mix_abcd': 60})
        assert settings.daily_goal_mode == 'sessions'
        assert settings.max_new_per_day == 20
        assert settings.mix_abcd == 60


class TestDailyProgress:

    def test_counts_sessions_ended_today(self, factory, clock):
        user = factory.user()
        deck = factory.deck(user)
        factory.cards(deck, 6)
        run_session(user, deck, clock, minutes=3, count=2)
        run_session(user, deck, clock, minutes=5, count=3, answer=False)
        SessionInterface.start_session(user.user_id, 'translate', 1, deck_id=deck.deck_id)

        progress = ProgressInterface.daily_progress(user.user_id)

        assert progress['sessions_completed'] == 2
        assert progress['cards_completed'] == 5
        assert progress['minutes_spent'] == 8

    def test_day_window_is_local_and_half_open(self, factory, clock):
        # Warsaw is UTC+1 in March: 22:58 UTC is 23:58 local
        clock.now = datetime.datetime(2026, 3, 10, 22, 58, tzinfo=datetime.timezone.utc)
        user = factory.user(timezone='Europe/Warsaw')
        deck = factory.deck(user)
        factory.cards(deck, 4)
        run_session(user, deck, clock, minutes=1)   # ends 23:59 local on the 10th
        run_session(user, deck, clock, minutes=1)   # ends 00:00 local on the 11th

        assert ProgressInterface.daily_progress(user.user_id, datetime.date(2026, 3, 10))['sessions_completed'] == 1
        assert ProgressInterface.daily_progress(user.user_id, datetime.date(2026, 3, 11))['sessions_completed'] == 1

    def test_goal_status(self, factory, clock):
        user = factory.user(study_settings={'daily_goal_mode': 'minutes', 'min_minutes_per_day': 10})
        deck = factory.deck(user)
        factory.cards(deck, 2)
        run_session(user, deck, clock, minutes=4)
        assert ProgressInterface.goal_status(user.user_id)['goal_met'] is False
        run_session(user, deck, clock, minutes=6)
        status = ProgressInterface.goal_status(user.user_id)
        assert status['goal_met'] is True
        assert status['settings']['daily_goal_mode'] == 'minutes'

    def test_aggregates_follow_reviews_and_sessions(self, factory, clock):
        user = factory.user()
        deck = factory.deck(user)
        factory.cards(deck, 2)
        started = SessionInterface.start_session(user.user_id, 'translate', 2, deck_id=deck.deck_id)
        clock.advance(minutes=2)
        SessionInterface.record_answer(started.session_id, user.user_id, 0, started.tasks[0]['answer'])
        SessionInterface.record_answer(started.session_id, user.user_id, 1, 'zzzzzz')

        today = clock.now.date()
        rows = ProgressInterface.get_daily_aggregates(user.user_id, today, today)
        assert rows == [{
            'day': today.isoformat(),
            'sessions': 1,
            'minutes': 2,
            'cards': 2,
            'questions': 2,
            'correct': 1,
            'wrong': 1,
        }]

    def test_aggregate_bumps_are_sql_increments(self, factory, clock):
        user = factory.user()
        bump_daily_aggregate(user.user_id, clock.now, questions=1, correct=1)
        bump_daily_aggregate(user.user_id, clock.now, questions=1, wrong=1)
        db.session.commit()

        rows = ProgressInterface.get_daily_aggregates(user.user_id, clock.now.date(), clock.now.date())
        assert [(row['questions'], row['correct'], row['wrong']) for row in rows] == [(2, 1, 1)]
        assert 'version_id' not in DailyAggregate.__table__.c


class TestCalendar:

    def test_month_layout_and_status(self, factory, clock):
        user = factory.user()
        deck = factory.deck(user)
        factory.cards(deck, 3)
        run_session(user, deck, clock, minutes=0, count=1)
        SessionInterface.start_session(user.user_id, 'translate', 1, deck_id=deck.deck_id)
        clock.advance(minutes=30)

        result = ProgressInterface.monthly_calendar(user.user_id, 2026, 3)

        assert len(result['days']) == 31
        day = result['days'][9]
        assert day['date'] == '2026-03-10'
        assert day['sessions'] == 2
        # A zero-length session still counts one minute; the open one runs until now
        assert day['minutes'] == 1 + 30
        assert day['status'] == 'met'
        assert result['days'][10]['status'] == 'none'

    def test_rejects_bad_month(self, factory):
        user = factory.user()
        with pytest.raises(ValidationError):
            ProgressInterface.monthly_calendar(user.user_id, 2026, 13)


class TestSettings:

    def test_update_merges_and_clamps(self, factory):
        user = factory.user(study_settings={'mix_abcd': 10})
        settings = ProgressInterface.update_study_settings(user.user_id, {'min_minutes_per_day': 1, 'shuffle': False, 'bogus': 1})
        assert settings.min_minutes_per_day == 5
        assert settings.shuffle is False
        assert settings.mix_abcd == 10
        assert ProgressInterface.get_study_settings(user.user_id) == settings

    def test_update_rejects_unknown_mode(self, factory):
        user = factory.user()
        with pytest.raises(ValidationError):
            ProgressInterface.update_study_settings(user.user_id, {'daily_goal_mode': 'weekly'})

"""
Stateless spaced-repetition logic.
Pure functions, no database dependencies.

Level policy: a wrong answer drops the card to level 0, a correct (or
accepted typo) answer moves it up one level, capped at MAX_LEVEL. A hit is
due again at ``now + interval(level)``; a miss waits only the relearn
interval, which is shorter than any level interval.
"""

from datetime import datetime, timedelta
from typing import Tuple

from vocabstack_app.utils.time_utils import is_same_local_day

from ..config import ReviewDefaultConfig
from ..schemas import ReviewSnapshot


def interval_for_level(level: int, config=ReviewDefaultConfig) -> timedelta:
    return config.interval(level)


def next_interval(level: int, is_correct: bool, config=ReviewDefaultConfig) -> timedelta:
    if not is_correct:
        return config.relearn_interval()
    return config.interval(level)


def next_level(level: int, is_correct: bool, used_hint: bool = False, config=ReviewDefaultConfig) -> int:
    if not is_correct:
        return 0
    if used_hint and config.HINT_BLOCKS_LEVEL_UP:
        return level
    return min(level + 1, config.MAX_LEVEL)


def lazy_reset_counters(
    last_reviewed_at: datetime,
    today_correct: int,
    today_wrong: int,
    now: datetime,
    tz,
) -> Tuple[int, int]:
    """Today's counters as they should read at ``now``: zero after a local-day change."""
    if last_reviewed_at is None or not is_same_local_day(last_reviewed_at, now, tz):
        return 0, 0
    return today_correct or 0, today_wrong or 0


def reset_daily_counters(state, now: datetime, tz) -> bool:
    """
    Zero ``today_*`` counters in place when ``last_reviewed_at`` is on an
    earlier local day. Returns True when something changed. Safe to call
    any number of times.
    """
    if state.last_reviewed_at is None:
        return False
    correct, wrong = lazy_reset_counters(
        state.last_reviewed_at, state.today_correct_count, state.today_wrong_count, now, tz
    )
    if (correct, wrong) == (state.today_correct_count or 0, state.today_wrong_count or 0):
        return False
    state.today_correct_count = correct
    state.today_wrong_count = wrong
    return True


def compute_next_state(
    snapshot: ReviewSnapshot,
    is_correct: bool,
    now: datetime,
    tz,
    used_hint: bool = False,
    config=ReviewDefaultConfig,
) -> ReviewSnapshot:
    """Apply one graded answer to ``snapshot`` and return the new snapshot."""
    today_correct, today_wrong = lazy_reset_counters(
        snapshot.last_reviewed_at, snapshot.today_correct_count, snapshot.today_wrong_count, now, tz
    )
    level = next_level(snapshot.level, is_correct, used_hint, config)
    last_level_up_at = now if level > snapshot.level else snapshot.last_level_up_at

    if is_correct:
        return snapshot.evolve(
            level=level,
            due_at=now + next_interval(level, True, config),
            total_correct=snapshot.total_correct + 1,
            today_correct_count=today_correct + 1,
            today_wrong_count=today_wrong,
            last_reviewed_at=now,
            last_level_up_at=last_level_up_at,
        )
    return snapshot.evolve(
        level=level,
        due_at=now + next_interval(level, False, config),
        total_wrong=snapshot.total_wrong + 1,
        today_correct_count=today_correct,
        today_wrong_count=today_wrong + 1,
        last_reviewed_at=now,
        last_level_up_at=last_level_up_at,
    )

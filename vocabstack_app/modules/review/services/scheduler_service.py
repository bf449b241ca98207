from typing import Optional, Tuple, Union
import datetime
import logging

from flask import current_app

from vocabstack_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from vocabstack_app.core.extensions import db
from vocabstack_app.core.signals import card_reviewed
from vocabstack_app.models import Card, User
from vocabstack_app.utils.db_session import run_in_transaction, run_read
from vocabstack_app.utils.time_utils import ensure_utc, get_user_timezone, utcnow
from vocabstack_app.modules.answer_check.logics.matcher import AnswerOutcome

from ..logics.scheduling import compute_next_state
from ..models import ReviewState
from ..schemas import ReviewResultDTO, ReviewSnapshot

logger = logging.getLogger(__name__)


def _coerce_outcome(outcome: Union[AnswerOutcome, str]) -> AnswerOutcome:
    try:
        return AnswerOutcome(outcome)
    except ValueError:
        raise ValidationError(f"Unknown review outcome: {outcome!r}")


class SchedulerService:
    """
    Orchestrator for review scheduling.
    Handles DB interactions, calls the pure scheduling logic and emits
    the ``card_reviewed`` signal.
    """

    @staticmethod
    def get_state(user_id: int, card_id: int) -> Optional[ReviewState]:
        return run_read(
            lambda: ReviewState.query.filter_by(user_id=user_id, card_id=card_id).first(),
            label="review state lookup",
        )

    @staticmethod
    def _get_or_create_state(user_id: int, card_id: int, now: datetime.datetime) -> Tuple[ReviewState, bool]:
        state = ReviewState.query.filter_by(user_id=user_id, card_id=card_id).first()
        if state:
            return state, False
        state = ReviewState(
            user_id=user_id,
            card_id=card_id,
            level=0,
            due_at=now,
            introduced_at=now,
            total_correct=0,
            total_wrong=0,
            today_correct_count=0,
            today_wrong_count=0,
        )
        db.session.add(state)
        # Surfaces a concurrent first review as IntegrityError, which the
        # surrounding transaction replays against the winner's row.
        db.session.flush()
        return state, True

    @staticmethod
    def _model_to_snapshot(state: ReviewState) -> ReviewSnapshot:
        return ReviewSnapshot(
            level=state.level or 0,
            due_at=state.due_at,
            total_correct=state.total_correct or 0,
            total_wrong=state.total_wrong or 0,
            today_correct_count=state.today_correct_count or 0,
            today_wrong_count=state.today_wrong_count or 0,
            last_reviewed_at=state.last_reviewed_at,
            last_level_up_at=state.last_level_up_at,
        )

    @staticmethod
    def stage_review(
        user_id: int,
        card_id: int,
        outcome: Union[AnswerOutcome, str],
        is_correct: Optional[bool] = None,
        used_hint: bool = False,
        now: Optional[datetime.datetime] = None,
    ) -> ReviewResultDTO:
        """
        Apply a graded answer to the (user, card) ReviewState without
        committing. Callers own the transaction.
        """
        outcome = _coerce_outcome(outcome)
        if is_correct is None:
            is_correct = outcome != AnswerOutcome.WRONG
        now = ensure_utc(now) if now else utcnow()

        card = db.session.get(Card, card_id)
        if card is None:
            raise NotFoundError(f"Card {card_id} not found", resource='card')
        if card.user_id != user_id:
            raise AuthorizationError(f"Card {card_id} does not belong to user {user_id}")
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", resource='user')

        state, created = SchedulerService._get_or_create_state(user_id, card_id, now)
        previous_level = state.level or 0
        new_snapshot = compute_next_state(
            SchedulerService._model_to_snapshot(state),
            is_correct=is_correct,
            now=now,
            tz=get_user_timezone(user),
            used_hint=used_hint,
        )

        state.level = new_snapshot.level
        state.due_at = new_snapshot.due_at
        state.total_correct = new_snapshot.total_correct
        state.total_wrong = new_snapshot.total_wrong
        state.today_correct_count = new_snapshot.today_correct_count
        state.today_wrong_count = new_snapshot.today_wrong_count
        state.last_reviewed_at = new_snapshot.last_reviewed_at
        state.last_level_up_at = new_snapshot.last_level_up_at
        db.session.add(state)

        card_reviewed.send(
            SchedulerService,
            user_id=user_id,
            card_id=card_id,
            outcome=outcome.value,
            is_correct=is_correct,
            reviewed_at=now,
            new_state=state.to_dict(),
        )

        return ReviewResultDTO(
            card_id=card_id,
            outcome=outcome.value,
            is_correct=is_correct,
            previous_level=previous_level,
            level=state.level,
            due_at=state.due_at,
            total_correct=state.total_correct,
            total_wrong=state.total_wrong,
            today_correct_count=state.today_correct_count,
            today_wrong_count=state.today_wrong_count,
            created=created,
        )

    @staticmethod
    def process_review(
        user_id: int,
        card_id: int,
        outcome: Union[AnswerOutcome, str],
        is_correct: Optional[bool] = None,
        used_hint: bool = False,
        now: Optional[datetime.datetime] = None,
    ) -> ReviewResultDTO:
        """Grade one card outside a session; commits atomically per (user, card)."""
        now = ensure_utc(now) if now else utcnow()
        result = run_in_transaction(
            db.session,
            lambda: SchedulerService.stage_review(user_id, card_id, outcome, is_correct, used_hint, now),
            retries=current_app.config.get('MAX_WRITE_RETRIES', 3),
            label=f"review user={user_id} card={card_id}",
        )
        logger.debug("Card %s for user %s -> level %s due %s", card_id, user_id, result.level, result.due_at)
        return result

import datetime
import logging
from typing import Iterable, Optional

from flask import current_app
from sqlalchemy import and_, func

from vocabstack_app.core.error_handlers import ValidationError
from vocabstack_app.core.extensions import db
from vocabstack_app.models import Card
from vocabstack_app.modules.review.models import ReviewState
from vocabstack_app.utils.db_session import run_read
from vocabstack_app.utils.time_utils import ensure_utc, utcnow

from ..schemas import DueCardDTO, DuePage
from .scope_service import ScopeService

logger = logging.getLogger(__name__)


class DueCardsService:
    """Read-only resolution of the cards a user should review."""

    @staticmethod
    def clamp_page_size(page_size: Optional[int]) -> int:
        config = current_app.config
        default = config.get('DUE_PAGE_SIZE_DEFAULT', 50)
        lower = config.get('DUE_PAGE_SIZE_MIN', 10)
        upper = config.get('DUE_PAGE_SIZE_MAX', 100)
        if page_size is None:
            return default
        return max(lower, min(int(page_size), upper))

    @staticmethod
    def get_due_cards(
        user_id: int,
        deck_ids: Optional[Iterable[int]] = None,
        folder_id: Optional[int] = None,
        page_size: Optional[int] = None,
        cursor: Optional[int] = 0,
        include_due_only: bool = False,
        now: Optional[datetime.datetime] = None,
    ) -> DuePage:
        """
        One page of the user's cards in scope, each flagged ``due`` when its
        ReviewState has ``due_at <= now``. Ordered by card id so consecutive
        cursors never skip or repeat cards.
        """
        deck_ids = ScopeService.validate_scope(deck_ids, folder_id)
        offset = int(cursor or 0)
        if offset < 0:
            raise ValidationError("cursor must be a non-negative offset")
        limit = DueCardsService.clamp_page_size(page_size)
        now = ensure_utc(now) if now else utcnow()

        target_deck_ids = ScopeService.resolve_deck_ids(user_id, deck_ids, folder_id)
        if not target_deck_ids:
            return DuePage()

        def _query():
            due_join = and_(
                ReviewState.card_id == Card.card_id,
                ReviewState.user_id == user_id,
            )
            query = (
                db.session.query(Card, ReviewState)
                .outerjoin(ReviewState, due_join)
                .filter(Card.user_id == user_id, Card.deck_id.in_(target_deck_ids))
            )
            if include_due_only:
                query = query.filter(ReviewState.due_at <= now)

            total_count = query.with_entities(func.count(Card.card_id)).scalar() or 0
            # One extra row tells whether another page exists.
            rows = query.order_by(Card.card_id).offset(offset).limit(limit + 1).all()

            total_due = (
                db.session.query(func.count(func.distinct(ReviewState.state_id)))
                .join(Card, Card.card_id == ReviewState.card_id)
                .filter(
                    ReviewState.user_id == user_id,
                    ReviewState.due_at <= now,
                    Card.user_id == user_id,
                    Card.deck_id.in_(target_deck_ids),
                )
                .scalar()
            ) or 0
            return rows, total_count, total_due

        rows, total_count, total_due = run_read(_query, label="due cards")

        has_more = len(rows) > limit
        cards = []
        for card, state in rows[:limit]:
            is_due = state is not None and state.due_at is not None and state.due_at <= now
            cards.append(DueCardDTO(
                id=card.card_id,
                deck_id=card.deck_id,
                front=card.front,
                back=card.back,
                due=is_due,
                card_type=card.card_type or 'word',
                level=state.level if state is not None else None,
                due_at=state.due_at if state is not None else None,
            ))

        logger.debug("Due page for user %s: %d cards, %d due in scope", user_id, len(cards), total_due)
        return DuePage(
            cards=cards,
            next_cursor=offset + limit if has_more else None,
            total_due=total_due,
            total_count=total_count,
        )

    @staticmethod
    def count_due(
        user_id: int,
        deck_ids: Optional[Iterable[int]] = None,
        folder_id: Optional[int] = None,
        now: Optional[datetime.datetime] = None,
    ) -> int:
        """Number of due ReviewStates in scope, for dashboard counters."""
        now = ensure_utc(now) if now else utcnow()
        target_deck_ids = ScopeService.resolve_deck_ids(user_id, deck_ids, folder_id)
        if not target_deck_ids:
            return 0
        return run_read(
            lambda: (
                db.session.query(func.count(ReviewState.state_id))
                .join(Card, Card.card_id == ReviewState.card_id)
                .filter(
                    ReviewState.user_id == user_id,
                    ReviewState.due_at <= now,
                    Card.deck_id.in_(target_deck_ids),
                )
                .scalar()
            ) or 0,
            label="due count",
        )

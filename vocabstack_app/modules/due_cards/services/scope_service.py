"""Resolve a deck/folder scope to the set of deck ids a user owns."""

from typing import Iterable, List, Optional

from vocabstack_app.core.error_handlers import ValidationError
from vocabstack_app.models import Deck
from vocabstack_app.utils.db_session import run_read


class ScopeService:

    @staticmethod
    def validate_scope(deck_ids: Optional[Iterable[int]], folder_id: Optional[int]) -> List[int]:
        """Normalize ``deck_ids`` and reject a deck+folder combination."""
        if isinstance(deck_ids, (str, int)):
            deck_ids = [deck_ids]
        try:
            deck_ids = [int(d) for d in (deck_ids or [])]
            if folder_id is not None:
                int(folder_id)
        except (TypeError, ValueError):
            raise ValidationError("deck_ids and folder_id must be integers")
        if deck_ids and folder_id is not None:
            raise ValidationError("deck_ids and folder_id are mutually exclusive")
        return deck_ids

    @staticmethod
    def resolve_deck_ids(user_id: int, deck_ids: Optional[Iterable[int]] = None, folder_id: Optional[int] = None) -> List[int]:
        """
        Explicit decks (kept only if owned), all decks in the folder, or all
        of the user's decks when neither is given. Sorted ascending.
        """
        deck_ids = ScopeService.validate_scope(deck_ids, folder_id)

        def _query():
            query = Deck.query.with_entities(Deck.deck_id).filter(Deck.user_id == user_id)
            if deck_ids:
                query = query.filter(Deck.deck_id.in_(deck_ids))
            elif folder_id is not None:
                query = query.filter(Deck.folder_id == folder_id)
            return [row.deck_id for row in query.order_by(Deck.deck_id).all()]

        return run_read(_query, label="deck scope")

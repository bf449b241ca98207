# File: vocabstack_app/modules/due_cards/interface.py
"""
Due Cards Interface
===================
Public API for resolving due cards and deck scopes.
"""

from .schemas import DueCardDTO, DuePage
from .services.due_service import DueCardsService
from .services.scope_service import ScopeService


class DueCardsInterface:

    @staticmethod
    def get_due_cards(user_id, deck_ids=None, folder_id=None, page_size=None, cursor=0,
                      include_due_only=False, now=None) -> DuePage:
        return DueCardsService.get_due_cards(
            user_id=user_id,
            deck_ids=deck_ids,
            folder_id=folder_id,
            page_size=page_size,
            cursor=cursor,
            include_due_only=include_due_only,
            now=now,
        )

    @staticmethod
    def count_due(user_id, deck_ids=None, folder_id=None, now=None) -> int:
        return DueCardsService.count_due(user_id, deck_ids=deck_ids, folder_id=folder_id, now=now)

    @staticmethod
    def resolve_deck_ids(user_id, deck_ids=None, folder_id=None):
        return ScopeService.resolve_deck_ids(user_id, deck_ids, folder_id)

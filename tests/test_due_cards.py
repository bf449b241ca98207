"""
Tests for due-card resolution: scope, inclusive due boundary, pagination.
"""

import datetime

import pytest

from vocabstack_app.core.error_handlers import ValidationError
from vocabstack_app.modules.due_cards.interface import DueCardsInterface
from vocabstack_app.modules.review.config import ReviewDefaultConfig
from vocabstack_app.modules.review.interface import ReviewInterface


def test_new_cards_are_listed_but_not_due(factory):
    user = factory.user()
    deck = factory.deck(user)
    factory.cards(deck, 3)

    page = DueCardsInterface.get_due_cards(user.user_id)

    assert page.total_count == 3
    assert page.total_due == 0
    assert [card.due for card in page.cards] == [False, False, False]
    assert page.next_cursor is None


def test_due_boundary_is_inclusive(factory, clock):
    user = factory.user()
    card = factory.card(factory.deck(user))
    ReviewInterface.process_review(user.user_id, card.card_id, 'wrong')
    due_at = clock.now + ReviewDefaultConfig.relearn_interval()

    just_before = DueCardsInterface.get_due_cards(user.user_id, now=due_at - datetime.timedelta(seconds=1))
    exactly = DueCardsInterface.get_due_cards(user.user_id, now=due_at)

    assert just_before.cards[0].due is False
    assert exactly.cards[0].due is True
    assert exactly.total_due == 1
    assert exactly.cards[0].due_at == due_at


def test_include_due_only_filters_in_query(factory, clock):
    user = factory.user()
    deck = factory.deck(user)
    due_card, later_card, _new_card = factory.cards(deck, 3)
    ReviewInterface.process_review(user.user_id, due_card.card_id, 'wrong')
    ReviewInterface.process_review(user.user_id, later_card.card_id, 'correct')
    now = clock.advance(hours=1)

    page = DueCardsInterface.get_due_cards(user.user_id, include_due_only=True, now=now)

    assert [card.id for card in page.cards] == [due_card.card_id]
    assert page.total_count == 1
    assert DueCardsInterface.count_due(user.user_id, now=now) == 1


def test_pagination_walks_all_cards_in_id_order(factory):
    user = factory.user()
    deck = factory.deck(user)
    cards = factory.cards(deck, 25)

    seen = []
    cursor = 0
    while cursor is not None:
        page = DueCardsInterface.get_due_cards(user.user_id, page_size=10, cursor=cursor)
        seen.extend(card.id for card in page.cards)
        cursor = page.next_cursor

    assert seen == sorted(card.card_id for card in cards)


def test_page_size_is_clamped(factory):
    user = factory.user()
    factory.cards(factory.deck(user), 15)

    page = DueCardsInterface.get_due_cards(user.user_id, page_size=1)
    assert len(page.cards) == 10
    assert page.next_cursor == 10


def test_scope_by_folder_and_ownership(factory):
    user = factory.user()
    other = factory.user()
    folder = factory.folder(user)
    in_folder = factory.deck(user, folder=folder)
    loose = factory.deck(user)
    foreign = factory.deck(other)
    factory.cards(in_folder, 2)
    factory.cards(loose, 1)
    factory.cards(foreign, 4)

    assert DueCardsInterface.get_due_cards(user.user_id, folder_id=folder.folder_id).total_count == 2
    assert DueCardsInterface.get_due_cards(user.user_id).total_count == 3
    # Decks of another user are silently dropped from an explicit scope
    assert DueCardsInterface.get_due_cards(user.user_id, deck_ids=[foreign.deck_id]).cards == []
    assert DueCardsInterface.resolve_deck_ids(user.user_id, deck_ids=[loose.deck_id, foreign.deck_id]) == [loose.deck_id]


def test_invalid_arguments(factory):
    user = factory.user()
    folder = factory.folder(user)
    deck = factory.deck(user, folder=folder)

    with pytest.raises(ValidationError):
        DueCardsInterface.get_due_cards(user.user_id, deck_ids=[deck.deck_id], folder_id=folder.folder_id)
    with pytest.raises(ValidationError):
        DueCardsInterface.get_due_cards(user.user_id, cursor=-1)


@pytest.mark.parametrize('kwargs', [
    {'deck_ids': ['abc']},
    {'deck_ids': [None]},
    {'folder_id': 'x1'},
])
def test_malformed_scope_ids_are_validation_errors(factory, kwargs):
    user = factory.user()
    factory.deck(user)

    with pytest.raises(ValidationError):
        DueCardsInterface.get_due_cards(user.user_id, **kwargs)
    with pytest.raises(ValidationError):
        DueCardsInterface.resolve_deck_ids(user.user_id, **kwargs)


def test_numeric_string_deck_ids_are_accepted(factory):
    user = factory.user()
    deck = factory.deck(user)
    assert DueCardsInterface.resolve_deck_ids(user.user_id, deck_ids=[str(deck.deck_id)]) == [deck.deck_id]

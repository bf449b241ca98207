import datetime
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vocabstack_app import create_app, db
from vocabstack_app.core.config import Config
from vocabstack_app.models import Card, Deck, Folder, User

FIXED_NOW = datetime.datetime(2026, 3, 10, 12, 0, tzinfo=datetime.timezone.utc)


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    LOG_LEVEL = 'WARNING'
    LOG_TO_FILE = False


class FakeClock:
    """Mutable clock plugged into NOW_PROVIDER."""

    def __init__(self, now=FIXED_NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **delta):
        self.now = self.now + datetime.timedelta(**delta)
        return self.now


class Factory:
    """Creates and commits owned content rows."""

    def __init__(self):
        self._counter = 0

    def _next(self):
        self._counter += 1
        return self._counter

    def user(self, timezone='UTC', study_settings=None):
        n = self._next()
        user = User(username=f'user{n}', email=f'user{n}@example.com', timezone=timezone, study_settings=study_settings)
        db.session.add(user)
        db.session.commit()
        return user

    def folder(self, user, name='Folder'):
        folder = Folder(user_id=user.user_id, name=name)
        db.session.add(folder)
        db.session.commit()
        return folder

    def deck(self, user, folder=None, name='Deck', direction=Deck.DIRECTION_FRONT_TO_BACK):
        deck = Deck(
            user_id=user.user_id,
            folder_id=folder.folder_id if folder else None,
            name=name,
            direction=direction,
        )
        db.session.add(deck)
        db.session.commit()
        return deck

    def card(self, deck, front=None, back=None):
        n = self._next()
        card = Card(user_id=deck.user_id, deck_id=deck.deck_id, front=front or f'word{n}', back=back or f'slowo{n}')
        db.session.add(card)
        db.session.commit()
        return card

    def cards(self, deck, count):
        return [self.card(deck) for _ in range(count)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(clock):
    app = create_app(TestConfig)
    app.config['NOW_PROVIDER'] = clock
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def factory(app):
    return Factory()


@pytest.fixture
def file_app(tmp_path, clock):
    """App on a file-backed SQLite database, for tests that use several threads."""

    class FileBackedConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'vocabstack.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {
            'connect_args': {'check_same_thread': False, 'timeout': 30}
        }
        MAX_WRITE_RETRIES = 10

    app = create_app(FileBackedConfig)
    app.config['NOW_PROVIDER'] = clock
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()

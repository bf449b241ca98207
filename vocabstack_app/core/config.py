# File: vocabstack_app/core/config.py

import os
from dotenv import load_dotenv

load_dotenv()

# vocabstack_app/core/ -> project root is two levels up
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "vocabstack.db")


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """VocabStack application configuration."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'connect_args': {'timeout': 30},
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Time
    SYSTEM_TIMEZONE = os.environ.get('SYSTEM_TIMEZONE', 'UTC')
    # Callable returning the current instant; None means wall clock.
    NOW_PROVIDER = None

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR')
    LOG_JSON = _env_bool('LOG_JSON')
    LOG_TO_FILE = _env_bool('LOG_TO_FILE')
    LOG_MAX_BYTES = int(os.environ.get('LOG_MAX_BYTES', 10 * 1024 * 1024))
    LOG_BACKUP_COUNT = int(os.environ.get('LOG_BACKUP_COUNT', 5))

    # Fail fast when an existing database is missing columns the models need
    SCHEMA_CHECK_ON_STARTUP = _env_bool('SCHEMA_CHECK_ON_STARTUP', True)

    # Engine knobs
    SESSION_MAX_TASKS = int(os.environ.get('SESSION_MAX_TASKS', 35))
    DUE_PAGE_SIZE_DEFAULT = 50
    DUE_PAGE_SIZE_MIN = 10
    DUE_PAGE_SIZE_MAX = 100
    MAX_WRITE_RETRIES = int(os.environ.get('MAX_WRITE_RETRIES', 3))
    ANSWER_ALTERNATIVE_SEPARATOR = ';'

    @classmethod
    def init_app(cls, app):
        """Create the directories the configured database needs."""
        if app.config['SQLALCHEMY_DATABASE_URI'] == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)

"""
Logging for the VocabStack engine.

Everything logs through module loggers under the ``vocabstack_app`` package
logger, which ``setup_logging`` equips with a console handler and a rotating
file. Records may carry engine identifiers through ``extra``::

    logger.info("Graded answer", extra={'user_id': 3, 'session_id': 41})

Both formats render those identifiers: the text format as ``key=value``
pairs, the JSON format as top-level keys (one JSON object per line).
"""

import json
import logging
import logging.handlers
import os
from typing import Optional

PACKAGE_LOGGER = 'vocabstack_app'
LOG_FILE_NAME = 'vocabstack.log'
CONTEXT_FIELDS = ('user_id', 'session_id', 'card_id', 'test_id')

TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Marks handlers owned by setup_logging so a reconfigure leaves others alone
_OWNED_MARKER = '_vocabstack_owned'


def _record_context(record: logging.LogRecord) -> dict:
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class ContextTextFormatter(logging.Formatter):
    """Text lines with engine identifiers appended as ``key=value``."""

    def __init__(self):
        super().__init__(TEXT_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record):
        line = super().format(record)
        context = _record_context(record)
        if context:
            line += ' ' + ' '.join(f'{key}={value}' for key, value in context.items())
        return line


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, safe for messages containing quotes."""

    def __init__(self):
        super().__init__(datefmt=DATE_FORMAT)

    def format(self, record):
        payload = {
            'time': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        payload.update(_record_context(record))
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _default_log_dir() -> str:
    base_dir = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    return os.path.join(base_dir, 'logs')


def _own(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _OWNED_MARKER, True)
    return handler


def setup_logging(
    app=None,
    log_level: str = 'INFO',
    log_dir: Optional[str] = None,
    json_format: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    console: bool = True,
) -> logging.Logger:
    """
    Configure the package logger. Calling it again replaces the handlers it
    installed before; handlers added by anyone else are kept.

    Args:
        app: Flask application; when given, werkzeug and SQLAlchemy engine
            loggers are held at WARNING
        log_level: DEBUG, INFO, WARNING or ERROR
        log_dir: directory for ``vocabstack.log`` (default: ``logs/`` at the repo root)
        json_format: JSON lines instead of text
        max_bytes: rotation size of the log file
        backup_count: rotated files kept
        console: also log to stderr

    Returns:
        The ``vocabstack_app`` logger
    """
    log_dir = log_dir or _default_log_dir()
    os.makedirs(log_dir, exist_ok=True)
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    formatter = JsonLineFormatter() if json_format else ContextTextFormatter()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, _OWNED_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    if console:
        logger.addHandler(_own(logging.StreamHandler(), level, formatter))
    logger.addHandler(_own(
        logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8',
        ),
        level,
        formatter,
    ))

    if app is not None:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)
        logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    logger.info("Logging initialized: level=%s dir=%s json=%s", logging.getLevelName(level), log_dir, json_format)
    return logger

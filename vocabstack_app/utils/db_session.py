"""Utility helpers for working with the SQLAlchemy session.

These helpers focus on improving the resilience of writes when the
application is backed by SQLite. SQLite places a write lock on the database
for the duration of a transaction which can occasionally surface as a
``database is locked`` error when two requests try to touch the database at
roughly the same time.

:func:`run_in_transaction` wraps a whole read-modify-write unit of work and
replays it with exponential backoff when the commit hits such a lock, or when
a row carrying a ``version_id`` column raises ``StaleDataError`` because
another writer got there first.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.orm.session import Session

from ..core.error_handlers import ConcurrencyConflictError, StoreUnavailableError, VocabStackError

logger = logging.getLogger(__name__)

LOCKED_MESSAGES = {"database is locked", "database is busy"}

T = TypeVar("T")


def _is_lock_error(error: OperationalError) -> bool:
    """Return ``True`` if the OperationalError was caused by a lock."""

    message = str(error).lower()
    return any(token in message for token in LOCKED_MESSAGES)


def run_in_transaction(
    session: Session,
    work: Callable[[], T],
    retries: int = 3,
    label: str = "transaction",
) -> T:
    """Run ``work`` and commit, replaying it on optimistic-lock conflicts.

    ``work`` must re-read everything it modifies, since a retry starts from a
    rolled back session. Engine errors raised by ``work`` roll back and
    propagate unchanged.

    Raises:
        ConcurrencyConflictError: still conflicting after ``retries`` attempts.
        StoreUnavailableError: the database failed for a non-conflict reason.
    """

    delay = 0.05
    for attempt in range(1, retries + 1):
        try:
            result = work()
            session.commit()
            return result
        except (StaleDataError, IntegrityError) as exc:
            session.rollback()
            logger.warning("%s conflict on attempt %d/%d: %s", label, attempt, retries, exc)
        except OperationalError as exc:
            session.rollback()
            if not _is_lock_error(exc):
                logger.error("%s failed: store unavailable", label, exc_info=True)
                raise StoreUnavailableError(f"{label} failed: {exc.__class__.__name__}") from exc
            logger.warning("%s hit a database lock on attempt %d/%d", label, attempt, retries)
        except VocabStackError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("%s failed: store error", label, exc_info=True)
            raise StoreUnavailableError(f"{label} failed: {exc.__class__.__name__}") from exc
        except Exception:
            session.rollback()
            raise

        if attempt < retries:
            time.sleep(delay)
            delay *= 2

    raise ConcurrencyConflictError(f"{label} kept conflicting with concurrent writers", attempts=retries)


def run_read(work: Callable[[], T], label: str = "query") -> T:
    """Run a read-only unit, surfacing database failures as StoreUnavailableError."""

    try:
        return work()
    except SQLAlchemyError as exc:
        logger.error("%s failed: store unavailable", label, exc_info=True)
        raise StoreUnavailableError(f"{label} failed: {exc.__class__.__name__}") from exc

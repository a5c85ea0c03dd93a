# Overview: Service-layer operations for concurrency; encapsulates business logic and database work.

from __future__ import annotations

import time

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for read-modify-write saves.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (deadlocks, locks) and StaleDataError.
    The callable must be safe to re-run from scratch after a rollback.
    """
    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError):
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))


def run_upsert(func, *, attempts: int = 3):
    """
    Execute an insert-or-update keyed on a unique constraint.

    Two writers can both miss the row and both INSERT; the loser's unique
    violation rolls back and the write runs once more, which now finds the
    committed row and updates it (last write wins). A second IntegrityError
    is a real constraint failure and propagates.
    """
    try:
        return run_with_retry(func, attempts=attempts)
    except IntegrityError:
        db.session.rollback()
    return run_with_retry(func, attempts=attempts)

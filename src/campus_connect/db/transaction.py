"""Bounded-retry wrapper for read-modify-write transactions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import ConflictError
from campus_connect.core.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raised when a concurrent writer won a unique key (two first votes by the same
# student) or the database refused a lock (SQLite busy, Postgres serialization).
RETRYABLE_ERRORS: tuple[type[Exception], ...] = (IntegrityError, OperationalError)


def run_in_transaction(
    db: Session,
    work: Callable[[Session], T],
    *,
    label: str,
    max_attempts: int | None = None,
) -> T:
    """Run ``work`` and commit, retrying the whole unit on write conflicts.

    ``work`` must re-read everything it depends on, since a retry starts from
    a rolled-back session. Any other exception rolls back and propagates.

    Args:
        db: Session owning the transaction.
        work: Callable performing the reads and writes.
        label: Short name used in log messages.
        max_attempts: Overrides ``settings.transaction_max_retries``.

    Returns:
        Whatever ``work`` returned on the committed attempt.

    Raises:
        ConflictError: If every attempt hit a retryable error.
    """
    attempts = max_attempts or settings.transaction_max_retries
    for attempt in range(1, attempts + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except RETRYABLE_ERRORS as exc:
            db.rollback()
            if attempt >= attempts:
                logger.error(
                    "Transaction %s failed after %d attempts: %s", label, attempt, exc
                )
                raise ConflictError(
                    f"Could not complete {label}, please retry"
                ) from exc
            logger.warning(
                "Transaction %s conflicted (attempt %d/%d), retrying", label, attempt, attempts
            )
        except Exception:
            db.rollback()
            raise
    raise AssertionError("unreachable")  # pragma: no cover

"""
Lock-timeout and error-translation helpers for the atomic
repository operations.

On PostgreSQL the caller's deadline is pushed into the database as
``SET LOCAL lock_timeout`` so a blocked row lock cannot outlive the
request.
"""

import time

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from bank_api.deadline import check_deadline
from bank_api.errors import (
    BankingError,
    StorageConflict,
    StorageUnavailable,
    TransferTimeout,
)

# Driver messages that mean "lost a race, safe to retry"
CONFLICT_MARKERS = (
    "deadlock",
    "could not serialize",
    "could not obtain lock",
    "database is locked",
)
TIMEOUT_MARKERS = (
    "lock timeout",
    "statement timeout",
)


def apply_lock_timeout(db: Session, deadline: float | None) -> None:
    """Bound row-lock waits by the remaining time (PostgreSQL only)."""
    if deadline is None:
        return
    if db.get_bind().dialect.name != "postgresql":
        return
    remaining_ms = max(1, int((deadline - time.monotonic()) * 1000))
    # SET does not accept bind parameters; remaining_ms is an int.
    db.execute(text(f"SET LOCAL lock_timeout = {remaining_ms}"))


def translate_store_error(exc: SQLAlchemyError) -> BankingError:
    """Map a SQLAlchemy failure onto the storage error taxonomy."""
    if isinstance(exc, StaleDataError):
        return StorageConflict(
            "account was modified concurrently; retry the operation"
        )
    if isinstance(exc, DBAPIError):
        detail = str(exc.orig).lower()
        if any(marker in detail for marker in TIMEOUT_MARKERS):
            return TransferTimeout("timed out waiting for an account lock")
        if any(marker in detail for marker in CONFLICT_MARKERS):
            return StorageConflict(
                "concurrent update detected; retry the operation"
            )
    return StorageUnavailable(
        f"storage error: {exc.__class__.__name__}"
    )


__all__ = [
    "apply_lock_timeout",
    "check_deadline",
    "translate_store_error",
]

"""
Request deadlines.

A deadline is an absolute ``time.monotonic()`` value derived from
the caller's timeout. It travels from the service into the atomic
repository operations.
"""

import time

from bank_api.errors import TransferTimeout


def deadline_from_timeout(timeout: float | None) -> float | None:
    if timeout is None:
        return None
    return time.monotonic() + timeout


def check_deadline(deadline: float | None) -> None:
    if deadline is not None and time.monotonic() >= deadline:
        raise TransferTimeout("operation deadline exceeded")

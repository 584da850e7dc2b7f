"""
Typed errors raised by repositories and services.

Every error carries a machine-readable ``code`` and a human-readable
message. They subclass ValueError so callers that only care about
"the request was rejected" can keep catching ValueError.
"""


class BankingError(ValueError):
    """Base class for all locally recoverable banking errors."""

    code = "BANKING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAmount(BankingError):
    code = "INVALID_AMOUNT"


class InvalidTarget(BankingError):
    code = "INVALID_TARGET"


class NotFound(BankingError):
    code = "NOT_FOUND"


class InsufficientFunds(BankingError):
    code = "INSUFFICIENT_FUNDS"


class DuplicateKey(BankingError):
    code = "DUPLICATE_KEY"


class StorageConflict(BankingError):
    """The atomic unit lost a race (lock, serialization or stale version).

    Nothing was written. The caller may retry the whole operation.
    """

    code = "STORAGE_CONFLICT"


class StorageUnavailable(BankingError):
    """The store could not complete the atomic unit. Nothing was written."""

    code = "STORAGE_UNAVAILABLE"


class TransferTimeout(StorageUnavailable):
    code = "TIMEOUT"


class AuthenticationFailed(BankingError):
    code = "AUTHENTICATION_FAILED"


class Forbidden(BankingError):
    code = "FORBIDDEN"

"""
Shared enumerations for database models.

Python enums mapped to database enums ensure that only valid
values can be stored.
"""

import enum


class AccountType(str, enum.Enum):
    """Kinds of customer account."""
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"


class TransactionType(str, enum.Enum):
    """What produced a ledger entry."""
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    TRANSFER = "TRANSFER"

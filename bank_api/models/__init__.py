"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from bank_api.models.base import Base
from bank_api.models.enums import AccountType, TransactionType
from bank_api.models.user import User
from bank_api.models.account import Account
from bank_api.models.transaction import Transaction

__all__ = [
    "Base",
    "AccountType",
    "TransactionType",
    "User",
    "Account",
    "Transaction",
]

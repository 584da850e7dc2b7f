"""Repository protocol definitions (interfaces)."""

from bank_api.repositories.protocols.account_repo import AccountRepository
from bank_api.repositories.protocols.transaction_repo import TransactionRepository
from bank_api.repositories.protocols.user_repo import UserRepository

__all__ = [
    "AccountRepository",
    "TransactionRepository",
    "UserRepository",
]

"""Business logic services."""

from bank_api.services.user_service import UserService
from bank_api.services.account_service import AccountService
from bank_api.services.transaction_service import TransactionService

__all__ = ["UserService", "AccountService", "TransactionService"]

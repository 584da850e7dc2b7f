"""SQLAlchemy repository implementations."""

from bank_api.repositories.sqlalchemy.account_repo import SqlAlchemyAccountRepository
from bank_api.repositories.sqlalchemy.transaction_repo import SqlAlchemyTransactionRepository
from bank_api.repositories.sqlalchemy.user_repo import SqlAlchemyUserRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyUserRepository",
]

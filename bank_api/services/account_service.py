"""
Account service — opens and closes customer accounts.

Balances are never written here. An opening balance is posted
through the transaction repository as a DEPOSIT entry, so every
balance is explained by the ledger.
"""

import logging
import secrets
import uuid
from decimal import Decimal

from sqlalchemy.orm import Session

from bank_api.errors import DuplicateKey
from bank_api.models import Account, TransactionType
from bank_api.repositories.protocols import (
    AccountRepository,
    TransactionRepository,
    UserRepository,
)
from bank_api.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyUserRepository,
)
from bank_api.schemas.account import AccountCreate
from bank_api.services.transaction_service import round_cents

logger = logging.getLogger(__name__)

# Attempts at drawing an unused generated account number
MAX_ACCOUNT_NUMBER_ATTEMPTS = 5


def generate_account_number() -> str:
    """Random 10-digit, zero-padded account number."""
    return f"{secrets.randbelow(10**10):010d}"


class AccountService:

    def __init__(
        self,
        accounts: AccountRepository,
        transactions: TransactionRepository,
        users: UserRepository,
    ):
        self.accounts = accounts
        self.transactions = transactions
        self.users = users

    @classmethod
    def with_session(cls, db: Session) -> "AccountService":
        return cls(
            SqlAlchemyAccountRepository(db),
            SqlAlchemyTransactionRepository(db),
            SqlAlchemyUserRepository(db),
        )

    def create_account(self, user_id: uuid.UUID, request: AccountCreate) -> Account:
        """
        Open an account for a user.

        A caller-supplied account number that collides is an error.
        A generated one is redrawn a few times before giving up.
        """
        opening_balance = round_cents(request.initial_balance, "opening")
        self.users.find_by_id(user_id)

        for attempt in range(1, MAX_ACCOUNT_NUMBER_ATTEMPTS + 1):
            account = Account(
                user_id=user_id,
                account_number=request.account_number or generate_account_number(),
                account_type=request.account_type,
                balance=Decimal("0.00"),
            )
            try:
                account = self.accounts.create(account)
                break
            except DuplicateKey:
                if request.account_number:
                    raise
                logger.warning(
                    "Generated account number collided (attempt %d)", attempt
                )
        else:
            raise DuplicateKey("could not allocate a unique account number")

        # Below one cent rounds to zero and opens an empty account.
        if opening_balance > 0:
            # Commits the new account together with its opening entry.
            self.transactions.post_single_leg(
                account.id,
                opening_balance,
                TransactionType.DEPOSIT,
                "Opening deposit",
            )

        logger.info(
            "Opened %s account %s for user %s",
            account.account_type.value, account.account_number, user_id,
        )
        return account

    def get_account(self, account_id: uuid.UUID) -> Account:
        return self.accounts.find_by_id(account_id)

    def get_account_by_number(self, account_number: str) -> Account:
        return self.accounts.find_by_account_number(account_number)

    def get_user_accounts(self, user_id: uuid.UUID) -> list[Account]:
        """Get all accounts for a user, newest first."""
        return self.accounts.find_by_user_id(user_id)

    def get_all_accounts(self) -> list[Account]:
        return self.accounts.find_all()

    def delete_account(self, account_id: uuid.UUID) -> None:
        """Close an account. Its ledger entries are kept."""
        self.accounts.delete(account_id)
        logger.info("Deleted account %s", account_id)

"""
Seed the database with demo data.

Usage: python -m bank_api.seed

Clears existing rows, then creates two users with a checking
and a savings account each, a handful of deposits and
withdrawals, and one transfer per user. All money movement goes
through TransactionService so every balance is backed by
ledger entries.
"""

import logging
import random
from decimal import Decimal

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bank_api.logging_config import setup_logging
from bank_api.models import Account, AccountType, Transaction, User
from bank_api.models.base import Base, SessionLocal, engine
from bank_api.schemas.account import AccountCreate
from bank_api.schemas.user import UserCreate
from bank_api.services import AccountService, TransactionService, UserService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"
OPENING_BALANCE = Decimal("5000.00")
TRANSFER_AMOUNT = Decimal("500.00")

DEMO_USERS = [
    ("john.doe@example.com", "John", "Doe"),
    ("jane.smith@example.com", "Jane", "Smith"),
]

DEPOSIT_DESCRIPTIONS = [
    "Salary deposit",
    "Refund",
    "Interest earned",
    "Client payment",
    "Tax return",
]

WITHDRAWAL_DESCRIPTIONS = [
    "ATM withdrawal",
    "Online purchase",
    "Bill payment",
    "Subscription payment",
    "Rent payment",
]


def clear_data(db: Session) -> None:
    # Children first, for the foreign keys
    db.execute(delete(Transaction))
    db.execute(delete(Account))
    db.execute(delete(User))
    db.commit()


def random_amount(rng: random.Random) -> Decimal:
    cents = rng.randint(10_00, 1000_00)
    return Decimal(cents) / 100


def seed_database(db: Session, rng: random.Random | None = None) -> list[Account]:
    """Populate an empty database; returns the accounts created."""
    rng = rng or random.Random()
    users = UserService.with_session(db)
    accounts = AccountService.with_session(db)
    transactions = TransactionService.with_session(db)

    clear_data(db)

    created: list[Account] = []
    for email, first_name, last_name in DEMO_USERS:
        user = users.create_user(
            UserCreate(
                email=email,
                password=DEMO_PASSWORD,
                first_name=first_name,
                last_name=last_name,
            )
        )
        db.commit()

        owned = [
            accounts.create_account(
                user.id,
                AccountCreate(account_type=account_type, initial_balance=OPENING_BALANCE),
            )
            for account_type in (AccountType.CHECKING, AccountType.SAVINGS)
        ]
        db.commit()

        for account in owned:
            for _ in range(rng.randint(3, 6)):
                amount = random_amount(rng)
                if rng.random() < 0.5:
                    transactions.deposit(
                        account.id, amount, rng.choice(DEPOSIT_DESCRIPTIONS)
                    )
                else:
                    # Keep enough behind for the transfer below
                    amount = min(amount, account.balance / 4).quantize(Decimal("0.01"))
                    transactions.withdraw(
                        account.id, amount, rng.choice(WITHDRAWAL_DESCRIPTIONS)
                    )

        checking, savings = owned
        transactions.transfer(
            checking.id, savings.id, TRANSFER_AMOUNT, "Monthly savings"
        )
        created.extend(owned)
        logger.info("Seeded user %s with %d accounts", email, len(owned))

    return created


def main() -> None:
    setup_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_database(db)
        total = len(AccountService.with_session(db).get_all_accounts())
        logger.info("Seeding complete: %d accounts", total)
    finally:
        db.close()


if __name__ == "__main__":
    main()

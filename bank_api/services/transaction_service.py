"""
Transaction service — moves money into, out of and between accounts.

Each money-moving operation:
1. Validates the request shape (positive amount, distinct accounts)
   before touching storage
2. Reads the affected accounts under row locks
3. Validates business rules (sufficient balance)
4. Hands the mutation to one atomic repository operation, which
   re-checks the balance against the locked rows and commits

Nothing is retried here. Storage failures reach the caller
unchanged; retrying means calling the operation again from step 1.
"""

import logging
import uuid
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from sqlalchemy.orm import Session

from bank_api.deadline import deadline_from_timeout
from bank_api.errors import (
    BankingError,
    InsufficientFunds,
    InvalidAmount,
    InvalidTarget,
    NotFound,
)
from bank_api.models import Account, Transaction, TransactionType
from bank_api.repositories.protocols import AccountRepository, TransactionRepository
from bank_api.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyTransactionRepository,
)
from bank_api.schemas.transaction import TransactionCreate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Largest value a Numeric(19, 2) column holds
MAX_AMOUNT = Decimal("99999999999999999.99")


def round_cents(amount, label: str) -> Decimal:
    """Quantize an amount to cents; reject values the ledger cannot hold."""
    try:
        value = Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmount(f"{label} amount is out of range") from None
    if not value.is_finite():
        raise InvalidAmount(f"{label} amount must be a finite number")
    if abs(value) > MAX_AMOUNT:
        raise InvalidAmount(f"{label} amount is out of range")
    return value


def to_cents(amount, label: str) -> Decimal:
    """Quantize an amount to cents and require it to be positive."""
    value = round_cents(amount, label)
    if value <= 0:
        raise InvalidAmount(f"{label} amount must be positive")
    return value


def check_balance_limit(account: Account, amount: Decimal) -> None:
    if account.balance + amount > MAX_AMOUNT:
        raise InvalidAmount("resulting balance is out of range")


class TransactionService:

    def __init__(
        self,
        accounts: AccountRepository,
        transactions: TransactionRepository,
    ):
        self.accounts = accounts
        self.transactions = transactions

    @classmethod
    def with_session(cls, db: Session) -> "TransactionService":
        return cls(
            SqlAlchemyAccountRepository(db),
            SqlAlchemyTransactionRepository(db),
        )

    # --- Transfers ---

    def transfer(
        self,
        from_account_id: uuid.UUID,
        to_account_id: uuid.UUID,
        amount: Decimal,
        description: str = "",
        timeout: float | None = None,
    ) -> tuple[Transaction, Transaction]:
        """
        Move money between two accounts.

        Returns the (withdrawal, deposit) ledger legs. Raises
        InvalidAmount, InvalidTarget, NotFound, InsufficientFunds,
        or a storage error from the atomic commit.
        """
        try:
            amount = to_cents(amount, "transfer")
            if from_account_id == to_account_id:
                raise InvalidTarget("cannot transfer to the same account")

            deadline = deadline_from_timeout(timeout)
            source, target = self._lock_pair(
                from_account_id, to_account_id, deadline
            )

            if source.balance < amount:
                raise InsufficientFunds(
                    f"insufficient funds: available={source.balance}, "
                    f"requested={amount}"
                )
            check_balance_limit(target, amount)

            withdrawal, deposit = self.transactions.create_transfer_atomic(
                source.id,
                target.id,
                amount,
                description,
                debit_description=(
                    f"Transfer to account {target.account_number}: {description}"
                ),
                credit_description=(
                    f"Transfer from account {source.account_number}: {description}"
                ),
                deadline=deadline,
            )
        except BankingError as exc:
            logger.warning(
                "Transfer %s -> %s rejected (%s): %s",
                from_account_id, to_account_id, exc.code, exc.message,
            )
            raise

        logger.info(
            "Transfer %s -> %s committed: amount=%s",
            from_account_id, to_account_id, amount,
        )
        return withdrawal, deposit

    def _lock_pair(
        self,
        from_account_id: uuid.UUID,
        to_account_id: uuid.UUID,
        deadline: float | None,
    ) -> tuple[Account, Account]:
        """
        Lock both accounts in ascending id order.

        Missing accounts are reported source first, regardless of
        the order in which the locks were taken.
        """
        found: dict[uuid.UUID, Account | None] = {}
        for account_id in sorted((from_account_id, to_account_id)):
            try:
                found[account_id] = self.accounts.find_by_id_for_update(
                    account_id, deadline=deadline
                )
            except NotFound:
                found[account_id] = None

        if found[from_account_id] is None:
            raise NotFound("source account not found")
        if found[to_account_id] is None:
            raise NotFound("target account not found")
        return found[from_account_id], found[to_account_id]

    # --- Single-leg operations ---

    def deposit(
        self,
        account_id: uuid.UUID,
        amount: Decimal,
        description: str = "Deposit",
        timeout: float | None = None,
    ) -> Transaction:
        """Credit one account and append a DEPOSIT entry."""
        amount = to_cents(amount, "deposit")
        deadline = deadline_from_timeout(timeout)
        account = self.accounts.find_by_id_for_update(account_id, deadline=deadline)
        check_balance_limit(account, amount)

        entry = self.transactions.post_single_leg(
            account.id,
            amount,
            TransactionType.DEPOSIT,
            description,
            deadline=deadline,
        )
        logger.info("Deposit to %s committed: amount=%s", account_id, amount)
        return entry

    def withdraw(
        self,
        account_id: uuid.UUID,
        amount: Decimal,
        description: str = "Withdrawal",
        timeout: float | None = None,
    ) -> Transaction:
        """Debit one account and append a WITHDRAWAL entry (negative amount)."""
        amount = to_cents(amount, "withdrawal")
        deadline = deadline_from_timeout(timeout)
        account = self.accounts.find_by_id_for_update(account_id, deadline=deadline)

        if account.balance < amount:
            logger.warning(
                "Withdrawal from %s rejected: available=%s, requested=%s",
                account_id, account.balance, amount,
            )
            raise InsufficientFunds(
                f"insufficient funds: available={account.balance}, "
                f"requested={amount}"
            )

        entry = self.transactions.post_single_leg(
            account.id,
            -amount,
            TransactionType.WITHDRAWAL,
            description,
            deadline=deadline,
        )
        logger.info("Withdrawal from %s committed: amount=%s", account_id, amount)
        return entry

    def create_transaction(
        self, request: TransactionCreate, timeout: float | None = None
    ) -> Transaction:
        """Dispatch a generic single-leg request by its type."""
        if request.transaction_type == TransactionType.DEPOSIT:
            return self.deposit(
                request.account_id, request.amount, request.description, timeout
            )
        if request.transaction_type == TransactionType.WITHDRAWAL:
            return self.withdraw(
                request.account_id, request.amount, request.description, timeout
            )
        raise BankingError("use transfer for transfer transactions")

    # --- Reads ---

    def get_transaction(self, transaction_id: uuid.UUID) -> Transaction:
        return self.transactions.find_by_id(transaction_id)

    def get_account_transactions(
        self, account_id: uuid.UUID, limit: int = 20, offset: int = 0
    ) -> tuple[list[Transaction], int]:
        """One page of an account's entries plus the account's total count."""
        self.accounts.find_by_id(account_id)
        return (
            self.transactions.find_by_account_id(account_id, limit, offset),
            self.transactions.count_by_account_id(account_id),
        )

    def get_all_transactions(
        self, limit: int = 20, offset: int = 0
    ) -> tuple[list[Transaction], int]:
        return (
            self.transactions.find_all(limit, offset),
            self.transactions.count_all(),
        )

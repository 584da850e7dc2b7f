"""SQLAlchemy implementation of TransactionRepository."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bank_api.errors import (
    BankingError,
    InsufficientFunds,
    InvalidTarget,
    NotFound,
)
from bank_api.models import Account, Transaction, TransactionType
from bank_api.models.base import utcnow
from bank_api.repositories.sqlalchemy.locking import (
    apply_lock_timeout,
    check_deadline,
    translate_store_error,
)


class SqlAlchemyTransactionRepository:
    """
    SQLAlchemy-backed ledger entry repository.

    ``create`` only flushes. The two atomic operations own their
    database transaction: they commit on success and roll back
    everything on any failure.
    """

    def __init__(self, db: Session):
        self._db = db

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new entry."""
        now = utcnow()
        if transaction.transaction_date is None:
            transaction.transaction_date = now
        transaction.created_at = now
        transaction.updated_at = now
        self._db.add(transaction)
        self._db.flush()
        return transaction

    def find_by_id(self, transaction_id: uuid.UUID) -> Transaction:
        transaction = self._db.get(Transaction, transaction_id)
        if transaction is None:
            raise NotFound(f"transaction {transaction_id} not found")
        return transaction

    def find_by_account_id(
        self, account_id: uuid.UUID, limit: int = 20, offset: int = 0
    ) -> list[Transaction]:
        query = (
            select(Transaction)
            .where(Transaction.account_id == account_id)
            .order_by(
                Transaction.transaction_date.desc(),
                Transaction.created_at.desc(),
            )
        )
        return self._paginate(query, limit, offset)

    def find_all(self, limit: int = 20, offset: int = 0) -> list[Transaction]:
        query = select(Transaction).order_by(
            Transaction.transaction_date.desc(),
            Transaction.created_at.desc(),
        )
        return self._paginate(query, limit, offset)

    def count_by_account_id(self, account_id: uuid.UUID) -> int:
        return self._db.execute(
            select(func.count(Transaction.id)).where(
                Transaction.account_id == account_id
            )
        ).scalar_one()

    def count_all(self) -> int:
        return self._db.execute(
            select(func.count(Transaction.id))
        ).scalar_one()

    # --- Atomic operations ---

    def create_transfer_atomic(
        self,
        source_account_id: uuid.UUID,
        target_account_id: uuid.UUID,
        amount: Decimal,
        description: str = "",
        *,
        debit_description: str | None = None,
        credit_description: str | None = None,
        deadline: float | None = None,
    ) -> tuple[Transaction, Transaction]:
        """
        Debit source, credit target and append both legs in one commit.

        The balance precondition is re-checked here against freshly
        locked rows, whatever the caller observed before.
        """
        if source_account_id == target_account_id:
            raise InvalidTarget("cannot transfer to the same account")

        try:
            locked = self._lock_accounts(
                {"source": source_account_id, "target": target_account_id},
                deadline,
            )
            source, target = locked["source"], locked["target"]

            if source.balance < amount:
                raise InsufficientFunds(
                    f"insufficient balance in source account: "
                    f"available={source.balance}, requested={amount}"
                )

            now = utcnow()
            withdrawal = self._post_leg(
                source,
                -amount,
                TransactionType.TRANSFER,
                description if debit_description is None else debit_description,
                now,
                source_account_id=source.id,
                target_account_id=target.id,
            )
            self._db.flush()

            deposit = self._post_leg(
                target,
                amount,
                TransactionType.TRANSFER,
                description if credit_description is None else credit_description,
                now,
                source_account_id=source.id,
                target_account_id=target.id,
            )
            self._db.flush()

            check_deadline(deadline)
            self._db.commit()
        except BankingError:
            self._db.rollback()
            raise
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise translate_store_error(exc) from exc
        except Exception:
            self._db.rollback()
            raise

        return withdrawal, deposit

    def post_single_leg(
        self,
        account_id: uuid.UUID,
        amount: Decimal,
        transaction_type: TransactionType,
        description: str = "",
        *,
        deadline: float | None = None,
    ) -> Transaction:
        """
        Apply a signed amount to one account and append one entry.

        Rejects any amount that would leave the balance negative.
        """
        try:
            account = self._lock_accounts({"": account_id}, deadline)[""]

            if account.balance + amount < 0:
                raise InsufficientFunds(
                    f"insufficient funds: available={account.balance}, "
                    f"requested={-amount}"
                )

            entry = self._post_leg(
                account, amount, transaction_type, description, utcnow()
            )
            self._db.flush()

            check_deadline(deadline)
            self._db.commit()
        except BankingError:
            self._db.rollback()
            raise
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise translate_store_error(exc) from exc
        except Exception:
            self._db.rollback()
            raise

        return entry

    # --- Helpers ---

    def _paginate(self, query, limit: int, offset: int) -> list[Transaction]:
        if limit > 0:
            query = query.limit(limit)
        if offset > 0:
            query = query.offset(offset)
        return list(self._db.execute(query).scalars().all())

    def _lock_accounts(
        self, accounts: dict[str, uuid.UUID], deadline: float | None
    ) -> dict[str, Account]:
        """
        Lock accounts in ascending id order and return them by label.

        Two transfers over the same pair of accounts always lock in
        the same order, whichever direction they move money.
        """
        apply_lock_timeout(self._db, deadline)
        locked = {}
        for label, account_id in sorted(accounts.items(), key=lambda item: item[1]):
            check_deadline(deadline)
            account = self._db.execute(
                select(Account)
                .where(Account.id == account_id, Account.deleted_at.is_(None))
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
            if account is None:
                prefix = f"{label} account" if label else "account"
                raise NotFound(f"{prefix} not found")
            locked[label] = account
        return locked

    def _post_leg(
        self,
        account: Account,
        amount: Decimal,
        transaction_type: TransactionType,
        description: str,
        now: datetime,
        source_account_id: uuid.UUID | None = None,
        target_account_id: uuid.UUID | None = None,
    ) -> Transaction:
        account.balance = account.balance + amount
        account.updated_at = now
        entry = Transaction(
            account_id=account.id,
            source_account_id=source_account_id,
            target_account_id=target_account_id,
            amount=amount,
            balance=account.balance,
            transaction_type=transaction_type,
            description=description,
            transaction_date=now,
            created_at=now,
            updated_at=now,
        )
        self._db.add(entry)
        return entry

"""SQLAlchemy implementation of AccountRepository."""

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bank_api.errors import DuplicateKey, NotFound
from bank_api.models import Account
from bank_api.models.base import utcnow
from bank_api.repositories.sqlalchemy.locking import (
    apply_lock_timeout,
    check_deadline,
    translate_store_error,
)


class SqlAlchemyAccountRepository:
    """
    SQLAlchemy-backed account repository.

    Writes are flushed, not committed: the caller owns the
    transaction boundary.
    """

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        # Deleted accounts keep their number reserved.
        existing = self._db.execute(
            select(Account.id).where(
                Account.account_number == account.account_number
            )
        ).scalar_one_or_none()
        if existing is not None:
            raise DuplicateKey(
                f"account number '{account.account_number}' already exists"
            )

        self._db.add(account)
        try:
            self._db.flush()
        except IntegrityError as exc:
            self._db.rollback()
            raise DuplicateKey(
                f"account number '{account.account_number}' already exists"
            ) from exc
        return account

    def find_by_id(self, account_id: uuid.UUID) -> Account:
        account = self._db.execute(
            select(Account).where(
                Account.id == account_id,
                Account.deleted_at.is_(None),
            )
        ).scalar_one_or_none()
        if account is None:
            raise NotFound(f"account {account_id} not found")
        return account

    def find_by_account_number(self, account_number: str) -> Account:
        account = self._db.execute(
            select(Account).where(
                Account.account_number == account_number,
                Account.deleted_at.is_(None),
            )
        ).scalar_one_or_none()
        if account is None:
            raise NotFound(f"account {account_number} not found")
        return account

    def find_by_user_id(self, user_id: uuid.UUID) -> list[Account]:
        accounts = self._db.execute(
            select(Account)
            .where(Account.user_id == user_id, Account.deleted_at.is_(None))
            .order_by(Account.created_at.desc())
        ).scalars().all()
        return list(accounts)

    def find_all(self) -> list[Account]:
        accounts = self._db.execute(
            select(Account)
            .where(Account.deleted_at.is_(None))
            .order_by(Account.created_at.desc())
        ).scalars().all()
        return list(accounts)

    def find_by_id_for_update(
        self, account_id: uuid.UUID, deadline: float | None = None
    ) -> Account:
        """
        Read an account under SELECT ... FOR UPDATE.

        populate_existing forces the row to be re-read even if this
        session already holds the account, so a balance cached from
        an earlier read is never returned.
        """
        check_deadline(deadline)
        try:
            apply_lock_timeout(self._db, deadline)
            account = self._db.execute(
                select(Account)
                .where(Account.id == account_id, Account.deleted_at.is_(None))
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise translate_store_error(exc) from exc
        if account is None:
            raise NotFound(f"account {account_id} not found")
        return account

    def update(self, account: Account) -> Account:
        current = self._db.get(Account, account.id)
        if current is None or current.deleted_at is not None:
            raise NotFound(f"account {account.id} not found")
        account = self._db.merge(account)
        account.updated_at = utcnow()
        self._db.flush()
        return account

    def delete(self, account_id: uuid.UUID) -> None:
        account = self.find_by_id(account_id)
        account.deleted_at = utcnow()
        self._db.flush()

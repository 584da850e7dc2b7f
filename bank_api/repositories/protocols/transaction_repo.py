"""Transaction repository protocol."""

import uuid
from decimal import Decimal
from typing import Protocol

from bank_api.models import Transaction, TransactionType


class TransactionRepository(Protocol):
    """Interface for ledger entry data access.

    Entries are append-only; there is no update or delete.
    """

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new entry."""
        ...

    def find_by_id(self, transaction_id: uuid.UUID) -> Transaction:
        """Retrieve entry by ID."""
        ...

    def find_by_account_id(
        self, account_id: uuid.UUID, limit: int = 20, offset: int = 0
    ) -> list[Transaction]:
        """Page through an account's entries, newest transaction_date first."""
        ...

    def find_all(self, limit: int = 20, offset: int = 0) -> list[Transaction]:
        """Page through all entries, newest transaction_date first."""
        ...

    def count_by_account_id(self, account_id: uuid.UUID) -> int:
        ...

    def count_all(self) -> int:
        ...

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
        Move ``amount`` from source to target as one atomic unit.

        Both account updates and both ledger entries commit
        together or not at all. Returns (withdrawal leg, deposit leg).
        """
        ...

    def post_single_leg(
        self,
        account_id: uuid.UUID,
        amount: Decimal,
        transaction_type: TransactionType,
        description: str = "",
        *,
        deadline: float | None = None,
    ) -> Transaction:
        """Apply a signed amount to one account and append one entry, atomically."""
        ...

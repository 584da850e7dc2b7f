"""Account repository protocol."""

import uuid
from typing import Protocol

from bank_api.models import Account


class AccountRepository(Protocol):
    """Interface for account data access.

    Finders raise NotFound instead of returning None. Soft-deleted
    accounts are invisible to every finder.
    """

    def create(self, account: Account) -> Account:
        """Persist a new account. Raises DuplicateKey on account_number."""
        ...

    def find_by_id(self, account_id: uuid.UUID) -> Account:
        """Retrieve account by ID."""
        ...

    def find_by_account_number(self, account_number: str) -> Account:
        """Retrieve account by its external account number."""
        ...

    def find_by_user_id(self, user_id: uuid.UUID) -> list[Account]:
        """List a user's accounts, newest first."""
        ...

    def find_all(self) -> list[Account]:
        """List all accounts, newest first."""
        ...

    def find_by_id_for_update(
        self, account_id: uuid.UUID, deadline: float | None = None
    ) -> Account:
        """Retrieve fresh account state under a row lock."""
        ...

    def update(self, account: Account) -> Account:
        """Persist an existing account."""
        ...

    def delete(self, account_id: uuid.UUID) -> None:
        """Soft-delete an account."""
        ...

"""User repository protocol."""

import uuid
from typing import Protocol

from bank_api.models import User


class UserRepository(Protocol):
    """Interface for user data access."""

    def create(self, user: User) -> User:
        """Persist a new user. Raises DuplicateKey on email."""
        ...

    def find_by_id(self, user_id: uuid.UUID) -> User:
        ...

    def find_by_email(self, email: str) -> User:
        ...

    def find_all(self) -> list[User]:
        ...

    def update(self, user: User) -> User:
        ...

    def delete(self, user_id: uuid.UUID) -> None:
        """Soft-delete a user."""
        ...

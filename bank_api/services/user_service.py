"""
User service — registration, profile updates and login.
"""

import logging
import uuid

from sqlalchemy.orm import Session

from bank_api.errors import AuthenticationFailed, DuplicateKey, NotFound
from bank_api.models import User
from bank_api.repositories.protocols import UserRepository
from bank_api.repositories.sqlalchemy import SqlAlchemyUserRepository
from bank_api.schemas.user import UserCreate, UserUpdate
from bank_api.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, users: UserRepository):
        self.users = users

    @classmethod
    def with_session(cls, db: Session) -> "UserService":
        return cls(SqlAlchemyUserRepository(db))

    def create_user(self, request: UserCreate) -> User:
        """Create a user; the password is stored as a bcrypt hash."""
        user = User(
            email=request.email.lower(),
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
        )
        user = self.users.create(user)
        logger.info("Created user %s", user.id)
        return user

    def get_user(self, user_id: uuid.UUID) -> User:
        return self.users.find_by_id(user_id)

    def get_user_by_email(self, email: str) -> User:
        return self.users.find_by_email(email.lower())

    def get_all_users(self) -> list[User]:
        return self.users.find_all()

    def update_user(self, user_id: uuid.UUID, request: UserUpdate) -> User:
        """
        Apply a partial update.

        A new email must not belong to another user.
        """
        user = self.users.find_by_id(user_id)

        if request.email is not None:
            email = request.email.lower()
            try:
                other = self.users.find_by_email(email)
            except NotFound:
                other = None
            if other is not None and other.id != user.id:
                raise DuplicateKey("email is already taken by another user")
            user.email = email

        if request.first_name is not None:
            user.first_name = request.first_name
        if request.last_name is not None:
            user.last_name = request.last_name
        if request.password is not None:
            user.password_hash = hash_password(request.password)

        return self.users.update(user)

    def delete_user(self, user_id: uuid.UUID) -> None:
        self.users.delete(user_id)
        logger.info("Deleted user %s", user_id)

    def authenticate(self, email: str, password: str) -> User:
        """Return the user for valid credentials."""
        try:
            user = self.users.find_by_email(email.lower())
        except NotFound:
            raise AuthenticationFailed("invalid email or password") from None

        if not verify_password(password, user.password_hash):
            raise AuthenticationFailed("invalid email or password")
        return user

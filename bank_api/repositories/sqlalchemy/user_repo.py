"""SQLAlchemy implementation of UserRepository."""

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bank_api.errors import DuplicateKey, NotFound
from bank_api.models import User
from bank_api.models.base import utcnow


class SqlAlchemyUserRepository:
    """SQLAlchemy-backed user repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, user: User) -> User:
        if self._email_taken(user.email):
            raise DuplicateKey("user with this email already exists")
        self._db.add(user)
        try:
            self._db.flush()
        except IntegrityError as exc:
            self._db.rollback()
            raise DuplicateKey("user with this email already exists") from exc
        return user

    def find_by_id(self, user_id: uuid.UUID) -> User:
        user = self._db.execute(
            select(User).where(User.id == user_id, User.deleted_at.is_(None))
        ).scalar_one_or_none()
        if user is None:
            raise NotFound(f"user {user_id} not found")
        return user

    def find_by_email(self, email: str) -> User:
        user = self._db.execute(
            select(User).where(User.email == email, User.deleted_at.is_(None))
        ).scalar_one_or_none()
        if user is None:
            raise NotFound(f"user with email '{email}' not found")
        return user

    def find_all(self) -> list[User]:
        users = self._db.execute(
            select(User)
            .where(User.deleted_at.is_(None))
            .order_by(User.created_at)
        ).scalars().all()
        return list(users)

    def update(self, user: User) -> User:
        current = self._db.get(User, user.id)
        if current is None or current.deleted_at is not None:
            raise NotFound(f"user {user.id} not found")
        user = self._db.merge(user)
        user.updated_at = utcnow()
        try:
            self._db.flush()
        except IntegrityError as exc:
            self._db.rollback()
            raise DuplicateKey("email is already taken by another user") from exc
        return user

    def delete(self, user_id: uuid.UUID) -> None:
        user = self.find_by_id(user_id)
        user.deleted_at = utcnow()
        self._db.flush()

    def _email_taken(self, email: str) -> bool:
        return self._db.execute(
            select(User.id).where(User.email == email)
        ).scalar_one_or_none() is not None

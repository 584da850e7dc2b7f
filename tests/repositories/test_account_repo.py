"""
Tests for the SQLAlchemy account and user repositories.
"""

import uuid
from decimal import Decimal

import pytest

from conftest import create_user
from bank_api.errors import DuplicateKey, NotFound
from bank_api.models import Account, AccountType, User
from bank_api.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyUserRepository,
)


def make_account(user, number="1000000001", account_type=AccountType.CHECKING):
    return Account(
        user_id=user.id,
        account_number=number,
        account_type=account_type,
        balance=Decimal("0.00"),
    )


class TestAccountRepository:

    def test_create_and_find(self, db_session):
        user = create_user(db_session)
        repo = SqlAlchemyAccountRepository(db_session)

        account = repo.create(make_account(user))
        db_session.commit()

        assert account.id is not None
        assert account.version == 1
        assert repo.find_by_id(account.id).account_number == "1000000001"
        assert repo.find_by_account_number("1000000001").id == account.id

    def test_duplicate_number(self, db_session):
        user = create_user(db_session)
        repo = SqlAlchemyAccountRepository(db_session)
        repo.create(make_account(user))
        db_session.commit()

        with pytest.raises(DuplicateKey):
            repo.create(make_account(user))

    def test_find_missing(self, db_session):
        repo = SqlAlchemyAccountRepository(db_session)

        with pytest.raises(NotFound):
            repo.find_by_id(uuid.uuid4())
        with pytest.raises(NotFound):
            repo.find_by_id_for_update(uuid.uuid4())

    def test_locked_read_refreshes_cached_row(self, db_session, session_factory):
        user = create_user(db_session)
        repo = SqlAlchemyAccountRepository(db_session)
        account = repo.create(make_account(user))
        db_session.commit()
        assert account.balance == Decimal("0.00")

        other = session_factory()
        try:
            row = other.get(Account, account.id)
            row.balance = Decimal("99.00")
            other.commit()
        finally:
            other.close()

        locked = repo.find_by_id_for_update(account.id)

        assert locked is account
        assert locked.balance == Decimal("99.00")
        assert locked.version == 2

    def test_update_bumps_version(self, db_session):
        user = create_user(db_session)
        repo = SqlAlchemyAccountRepository(db_session)
        account = repo.create(make_account(user))
        db_session.commit()

        account.account_type = AccountType.SAVINGS
        repo.update(account)
        db_session.commit()

        assert repo.find_by_id(account.id).account_type == AccountType.SAVINGS
        assert account.version == 2

    def test_soft_delete(self, db_session):
        user = create_user(db_session)
        repo = SqlAlchemyAccountRepository(db_session)
        account = repo.create(make_account(user))
        db_session.commit()

        repo.delete(account.id)
        db_session.commit()

        with pytest.raises(NotFound):
            repo.find_by_id(account.id)
        with pytest.raises(NotFound):
            repo.update(account)
        assert repo.find_all() == []
        assert db_session.get(Account, account.id).deleted_at is not None

    def test_find_by_user(self, db_session):
        user = create_user(db_session)
        other = create_user(db_session, email="other@test.com")
        repo = SqlAlchemyAccountRepository(db_session)
        repo.create(make_account(user, "1000000001"))
        repo.create(make_account(user, "1000000002", AccountType.SAVINGS))
        repo.create(make_account(other, "1000000003"))
        db_session.commit()

        numbers = {a.account_number for a in repo.find_by_user_id(user.id)}

        assert numbers == {"1000000001", "1000000002"}
        assert len(repo.find_all()) == 3


class TestUserRepository:

    def make_user(self, email="repo@test.com"):
        return User(
            email=email,
            password_hash="hash",
            first_name="Repo",
            last_name="User",
        )

    def test_create_and_find(self, db_session):
        repo = SqlAlchemyUserRepository(db_session)
        user = repo.create(self.make_user())
        db_session.commit()

        assert repo.find_by_id(user.id).email == "repo@test.com"
        assert repo.find_by_email("repo@test.com").id == user.id

    def test_duplicate_email(self, db_session):
        repo = SqlAlchemyUserRepository(db_session)
        repo.create(self.make_user())
        db_session.commit()

        with pytest.raises(DuplicateKey):
            repo.create(self.make_user())

    def test_missing_user(self, db_session):
        repo = SqlAlchemyUserRepository(db_session)

        with pytest.raises(NotFound):
            repo.find_by_id(uuid.uuid4())
        with pytest.raises(NotFound):
            repo.find_by_email("nobody@test.com")

    def test_soft_delete_keeps_row(self, db_session):
        repo = SqlAlchemyUserRepository(db_session)
        user = repo.create(self.make_user())
        db_session.commit()

        repo.delete(user.id)
        db_session.commit()

        with pytest.raises(NotFound):
            repo.find_by_id(user.id)
        assert repo.find_all() == []
        assert db_session.get(User, user.id) is not None

"""Dependency injection for FastAPI."""

import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bank_api.errors import AuthenticationFailed, Forbidden, NotFound
from bank_api.models import User
from bank_api.models.base import get_db
from bank_api.security import decode_access_token
from bank_api.services import AccountService, UserService

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a live user."""
    user_id = decode_access_token(credentials.credentials)
    try:
        return UserService.with_session(db).get_user(user_id)
    except NotFound:
        raise AuthenticationFailed("user no longer exists") from None


def ensure_owner(accounts: AccountService, account_id: uuid.UUID, user: User) -> None:
    """
    Reject acting on an account the user does not own.

    A missing account is left for the service to report as NotFound.
    """
    try:
        account = accounts.get_account(account_id)
    except NotFound:
        return
    if account.user_id != user.id:
        raise Forbidden("account does not belong to the current user")

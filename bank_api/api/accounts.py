"""
Account endpoints.

Every route acts on behalf of the authenticated user: accounts
are opened for them, and reading or closing someone else's
account is rejected with 403.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank_api.api.deps import get_current_user
from bank_api.errors import BankingError, Forbidden
from bank_api.models import Account, User
from bank_api.models.base import get_db
from bank_api.schemas.account import AccountCreate, AccountResponse
from bank_api.services import AccountService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


def _owned(account: Account, current_user: User) -> Account:
    if account.user_id != current_user.id:
        raise Forbidden("account does not belong to the current user")
    return account


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Open a new account for the authenticated user.

    A positive initial balance is recorded as an opening
    DEPOSIT entry.
    """
    service = AccountService.with_session(db)
    try:
        account = service.create_account(current_user.id, request)
        db.commit()
        return account
    except BankingError:
        db.rollback()
        raise


@router.get("", response_model=list[AccountResponse])
def list_my_accounts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the authenticated user's accounts, newest first."""
    return AccountService.with_session(db).get_user_accounts(current_user.id)


@router.get("/number/{account_number}", response_model=AccountResponse)
def get_account_by_number(
    account_number: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = AccountService.with_session(db)
    return _owned(service.get_account_by_number(account_number), current_user)


@router.get("/user/{user_id}", response_model=list[AccountResponse])
def get_user_accounts(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if user_id != current_user.id:
        raise Forbidden("users may only list their own accounts")
    return AccountService.with_session(db).get_user_accounts(user_id)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get account details, including the current balance."""
    service = AccountService.with_session(db)
    return _owned(service.get_account(account_id), current_user)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Close an account. Its transaction history is kept."""
    service = AccountService.with_session(db)
    try:
        _owned(service.get_account(account_id), current_user)
        service.delete_account(account_id)
        db.commit()
    except BankingError:
        db.rollback()
        raise

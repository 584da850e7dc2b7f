"""
Transaction endpoints.

Deposits, withdrawals and transfers are committed by the
atomic repository operations behind TransactionService; the
router only checks ownership and rolls back on rejection so
that no row lock outlives the request.
"""

import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from bank_api.api.deps import ensure_owner, get_current_user
from bank_api.config import get_settings
from bank_api.errors import BankingError, Forbidden, NotFound
from bank_api.models import User
from bank_api.models.base import get_db
from bank_api.schemas.transaction import (
    DepositRequest,
    TransactionResponse,
    TransferRequest,
    TransferResponse,
    WithdrawalRequest,
)
from bank_api.services import AccountService, TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    response: Response,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List all transactions, newest first.

    This is a global listing across every account; per-account
    history lives under /transactions/account/{account_id}.
    """
    service = TransactionService.with_session(db)
    items, total = service.get_all_transactions(limit, offset)
    response.headers["X-Total-Count"] = str(total)
    return items


@router.get("/account/{account_id}", response_model=list[TransactionResponse])
def get_account_transactions(
    account_id: uuid.UUID,
    response: Response,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """One page of an account's history, newest first."""
    ensure_owner(AccountService.with_session(db), account_id, current_user)
    service = TransactionService.with_session(db)
    items, total = service.get_account_transactions(account_id, limit, offset)
    response.headers["X-Total-Count"] = str(total)
    return items


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get one entry; entries of closed accounts are not found."""
    service = TransactionService.with_session(db)
    entry = service.get_transaction(transaction_id)
    try:
        account = AccountService.with_session(db).get_account(entry.account_id)
    except NotFound:
        raise NotFound(f"transaction {transaction_id} not found") from None
    if account.user_id != current_user.id:
        raise Forbidden("account does not belong to the current user")
    return entry


@router.post("/deposit", response_model=TransactionResponse, status_code=201)
def deposit(
    request: DepositRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Credit one of the authenticated user's accounts."""
    service = TransactionService.with_session(db)
    try:
        ensure_owner(AccountService.with_session(db), request.account_id, current_user)
        entry = service.deposit(
            request.account_id,
            request.amount,
            request.description,
            timeout=get_settings().TRANSFER_TIMEOUT_SECONDS,
        )
        db.commit()
        return entry
    except BankingError:
        db.rollback()
        raise


@router.post("/withdraw", response_model=TransactionResponse, status_code=201)
def withdraw(
    request: WithdrawalRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Debit one of the authenticated user's accounts."""
    service = TransactionService.with_session(db)
    try:
        ensure_owner(AccountService.with_session(db), request.account_id, current_user)
        entry = service.withdraw(
            request.account_id,
            request.amount,
            request.description,
            timeout=get_settings().TRANSFER_TIMEOUT_SECONDS,
        )
        db.commit()
        return entry
    except BankingError:
        db.rollback()
        raise


@router.post("/transfer", response_model=TransferResponse, status_code=201)
def transfer(
    request: TransferRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Move money from one of the authenticated user's accounts
    to any other account.

    Both ledger legs are returned. The balances and both entries
    are written in one database transaction.
    """
    service = TransactionService.with_session(db)
    try:
        ensure_owner(
            AccountService.with_session(db), request.from_account_id, current_user
        )
        withdrawal, deposit = service.transfer(
            request.from_account_id,
            request.to_account_id,
            request.amount,
            request.description,
            timeout=get_settings().TRANSFER_TIMEOUT_SECONDS,
        )
        db.commit()
    except BankingError:
        db.rollback()
        raise

    return TransferResponse(
        withdrawal=TransactionResponse.model_validate(withdrawal),
        deposit=TransactionResponse.model_validate(deposit),
    )

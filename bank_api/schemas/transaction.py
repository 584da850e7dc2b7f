"""
Pydantic schemas for transaction operations.

Amounts are not range-checked here. The service reports a
non-positive amount as INVALID_AMOUNT.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from bank_api.models.enums import TransactionType


class DepositRequest(BaseModel):
    account_id: uuid.UUID
    amount: Decimal
    description: str = Field(default="Deposit", max_length=255)


class WithdrawalRequest(BaseModel):
    account_id: uuid.UUID
    amount: Decimal
    description: str = Field(default="Withdrawal", max_length=255)


class TransactionCreate(BaseModel):
    """Generic single-leg request, dispatched on ``transaction_type``."""
    account_id: uuid.UUID
    transaction_type: TransactionType
    amount: Decimal
    description: str = Field(default="", max_length=255)


class TransferRequest(BaseModel):
    from_account_id: uuid.UUID
    to_account_id: uuid.UUID
    amount: Decimal
    description: str = Field(default="", max_length=255)


class TransactionResponse(BaseModel):
    id: uuid.UUID
    account_id: uuid.UUID
    source_account_id: uuid.UUID | None
    target_account_id: uuid.UUID | None
    amount: Decimal
    balance: Decimal
    transaction_type: TransactionType
    description: str
    transaction_date: datetime
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TransferResponse(BaseModel):
    """Both legs of a committed transfer."""
    message: str = "Transfer successful"
    withdrawal: TransactionResponse
    deposit: TransactionResponse

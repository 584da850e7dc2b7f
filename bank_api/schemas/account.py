"""
Pydantic schemas for account operations.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from bank_api.models.enums import AccountType


class AccountCreate(BaseModel):
    """
    Request to open a new account.

    The account number is generated when omitted. A positive
    opening balance is posted as a DEPOSIT entry so the ledger
    always explains the balance.
    """
    account_type: AccountType
    account_number: str | None = Field(
        default=None, min_length=10, max_length=10, pattern=r"^\d{10}$"
    )
    initial_balance: Decimal = Field(default=Decimal("0.00"), ge=0)


class AccountResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    account_number: str
    account_type: AccountType
    balance: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

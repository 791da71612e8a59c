"""
Pydantic schemas for the chart of accounts.
"""

import uuid
from datetime import datetime

from pydantic import Field

from tenant_ledger.models.enums import AccountType
from tenant_ledger.schemas.base import CamelModel


class AccountCreate(CamelModel):
    """Request to create a new ledger account."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    account_type: AccountType = Field(alias="type")
    parent_id: uuid.UUID | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class AccountResponse(CamelModel):
    """Ledger account in API responses."""
    id: uuid.UUID
    code: str
    name: str
    account_type: AccountType = Field(alias="type")
    parent_id: uuid.UUID | None
    currency: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

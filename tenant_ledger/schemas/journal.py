"""
Pydantic schemas for journal entries and ledger reports.

These define the API contract: what data comes in, what data
goes out. They are separate from the database models because
the API shape and the storage shape differ (lines arrive
with account codes, are stored with account ids).
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import Field, model_validator

from tenant_ledger.schemas.base import CamelModel
from tenant_ledger.schemas.account import AccountResponse


PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


# --- Request Schemas ---

class JournalLineCreate(CamelModel):
    """
    One line of a journal entry.

    The account is named either by id or by code. Debit and
    credit default to zero; a line may carry both.
    """
    account_id: uuid.UUID | None = None
    account_code: str | None = Field(default=None, min_length=1)
    debit: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)
    credit: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)
    memo: str | None = Field(default=None, max_length=255)
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @model_validator(mode="after")
    def must_name_an_account(self):
        if self.account_id is None and self.account_code is None:
            raise ValueError("line must have accountId or accountCode")
        return self


class JournalEntryCreate(CamelModel):
    """A complete transaction: two or more lines that must balance."""
    date: date
    ref: str | None = Field(default=None, min_length=1, max_length=100)
    memo: str | None = Field(default=None, max_length=255)
    created_by: str | None = Field(default=None, max_length=100)
    lines: list[JournalLineCreate] = Field(min_length=2)


class JournalPostRequest(JournalEntryCreate):
    """HTTP body for posting an entry; the reference is mandatory here."""
    ref: str = Field(min_length=1, max_length=100)


# --- Response Schemas ---

class JournalLineResponse(CamelModel):
    id: uuid.UUID
    account_id: uuid.UUID
    account_code: str
    debit: Decimal
    credit: Decimal
    memo: str | None
    currency: str | None


class JournalEntryResponse(CamelModel):
    id: uuid.UUID
    number: int
    date: date
    reference: str | None
    memo: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime
    lines: list[JournalLineResponse]


class JournalPostResponse(CamelModel):
    journal: JournalEntryResponse


class TrialBalanceRow(CamelModel):
    account: AccountResponse
    debit: Decimal
    credit: Decimal
    balance: Decimal


class PeriodBalanceResponse(CamelModel):
    """Balance rollup for one account over one YYYY-MM period."""
    account_id: uuid.UUID
    period: str
    opening: Decimal
    debit: Decimal
    credit: Decimal
    closing: Decimal
    currency: str | None
    computed_at: datetime

"""
Pydantic schemas for bank statement import and matching.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from tenant_ledger.schemas.base import CamelModel


class StatementImportRequest(CamelModel):
    """
    CSV text with a header row, then
    date,description,amount,externalRef
    """
    csv: str = Field(min_length=1)
    currency: str = Field(min_length=3, max_length=3)


class StatementLineResponse(CamelModel):
    id: uuid.UUID
    sequence: int
    date: date
    description: str
    amount: Decimal
    currency: str
    external_ref: str | None
    matched_journal_entry_id: uuid.UUID | None
    confidence: float | None
    imported_at: datetime


class AutoMatchResponse(CamelModel):
    matched: int
    lines: list[StatementLineResponse]

"""
Pydantic schemas for tax rules and budgets.
"""

import uuid
from datetime import date
from decimal import Decimal

from pydantic import Field, model_validator

from tenant_ledger.models.enums import TaxType
from tenant_ledger.schemas.base import CamelModel
from tenant_ledger.schemas.journal import PERIOD_PATTERN


class TaxRuleCreate(CamelModel):
    country: str = Field(min_length=2, max_length=2)
    jurisdiction: str | None = Field(default=None, max_length=100)
    name: str = Field(min_length=1, max_length=100)
    rate: Decimal = Field(ge=0, le=1)
    tax_type: TaxType = Field(alias="type")
    effective_from: date
    effective_to: date | None = None

    @model_validator(mode="after")
    def range_must_be_ordered(self):
        if self.effective_to is not None and self.effective_to < self.effective_from:
            raise ValueError("effectiveTo must not be before effectiveFrom")
        return self


class TaxRuleResponse(CamelModel):
    id: uuid.UUID
    country: str
    jurisdiction: str | None
    name: str
    rate: Decimal
    tax_type: TaxType = Field(alias="type")
    effective_from: date
    effective_to: date | None


class BudgetLineCreate(CamelModel):
    period: str = Field(pattern=PERIOD_PATTERN)
    account_id: uuid.UUID
    amount: Decimal = Field(decimal_places=4)
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class BudgetLineResponse(CamelModel):
    id: uuid.UUID
    period: str
    account_id: uuid.UUID
    amount: Decimal
    currency: str | None


class BudgetVarianceRow(CamelModel):
    """Budget vs. actual for one budget line; actual is period debit - credit."""
    budget_line_id: uuid.UUID
    account_id: uuid.UUID
    period: str
    budget: Decimal
    actual: Decimal
    variance: Decimal

"""
Pydantic schemas for invoices.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import Field, model_validator

from tenant_ledger.models.enums import InvoiceStatus
from tenant_ledger.schemas.base import CamelModel


class InvoiceItem(CamelModel):
    description: str = Field(min_length=1, max_length=255)
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)


class InvoiceCreate(CamelModel):
    number: str = Field(min_length=1, max_length=50)
    client_name: str = Field(min_length=1, max_length=200)
    issue_date: date
    due_date: date
    items: list[InvoiceItem] = Field(min_length=1)
    tax: Decimal = Field(default=Decimal("0"), ge=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    notes: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def due_after_issue(self):
        if self.due_date < self.issue_date:
            raise ValueError("dueDate must not be before issueDate")
        return self


class InvoiceStatusUpdate(CamelModel):
    status: InvoiceStatus


class InvoiceResponse(CamelModel):
    id: uuid.UUID
    number: str
    client_name: str
    issue_date: date
    due_date: date
    items: list[InvoiceItem]
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    currency: str
    status: InvoiceStatus
    notes: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime


class InvoiceEnvelope(CamelModel):
    invoice: InvoiceResponse

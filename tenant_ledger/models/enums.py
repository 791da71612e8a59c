"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TaxType(str, enum.Enum):
    VAT = "VAT"
    GST = "GST"
    CORPORATE = "CORPORATE"
    WITHHOLDING = "WITHHOLDING"


class InvoiceStatus(str, enum.Enum):
    """Lifecycle of an invoice."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from tenant_ledger.models.base import Base
from tenant_ledger.models.enums import AccountType, TaxType, InvoiceStatus
from tenant_ledger.models.organization import Organization
from tenant_ledger.models.audit_log import AuditLog
from tenant_ledger.models.ledger_account import LedgerAccount
from tenant_ledger.models.journal_entry import JournalEntry, JournalLine
from tenant_ledger.models.balance_snapshot import LedgerBalanceSnapshot
from tenant_ledger.models.tax_rule import TaxRule
from tenant_ledger.models.budget_line import BudgetLine
from tenant_ledger.models.bank_statement_line import BankStatementLine
from tenant_ledger.models.invoice import Invoice

__all__ = [
    "Base",
    "AccountType",
    "TaxType",
    "InvoiceStatus",
    "Organization",
    "AuditLog",
    "LedgerAccount",
    "JournalEntry",
    "JournalLine",
    "LedgerBalanceSnapshot",
    "TaxRule",
    "BudgetLine",
    "BankStatementLine",
    "Invoice",
]

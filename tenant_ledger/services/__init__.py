"""Business logic services."""

from tenant_ledger.services.accounting_service import AccountingService
from tenant_ledger.services.reconciliation_service import ReconciliationService
from tenant_ledger.services.invoice_service import InvoiceService
from tenant_ledger.services.audit_service import AuditRecorder

__all__ = [
    "AccountingService",
    "ReconciliationService",
    "InvoiceService",
    "AuditRecorder",
]

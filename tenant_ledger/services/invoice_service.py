"""
Invoice service: invoice creation and status lifecycle.

Uses the same tenant scoping as the ledger: every lookup goes
through LedgerStore with the caller's org_id.
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy.orm import Session

from tenant_ledger.errors import DuplicateKey, InvalidTransition, NotFound
from tenant_ledger.models.enums import InvoiceStatus
from tenant_ledger.models.invoice import Invoice
from tenant_ledger.schemas.invoice import InvoiceCreate
from tenant_ledger.store import LedgerStore

logger = logging.getLogger(__name__)


class InvoiceService:

    def __init__(self, db: Session, store: LedgerStore | None = None):
        self.db = db
        self.store = store or LedgerStore(db)

    def list_invoices(self, org_id: str) -> list[Invoice]:
        """Newest first."""
        return self.store.invoices(org_id)

    def get_invoice(self, org_id: str, invoice_id: uuid.UUID) -> Invoice:
        invoice = self.store.get_invoice(org_id, invoice_id)
        if not invoice:
            raise NotFound(f"Invoice {invoice_id} not found")
        return invoice

    def create_invoice(
        self, org_id: str, request: InvoiceCreate, created_by: str | None = None
    ) -> Invoice:
        """
        Create a draft invoice.

        subtotal is the sum of quantity * unit price over the
        items; total = subtotal + tax - discount.
        """
        self.store.lock_tenant(org_id)
        if self.store.find_invoice_by_number(org_id, request.number):
            raise DuplicateKey(
                f"Invoice number '{request.number}' already exists"
            )

        subtotal = sum(
            (item.quantity * item.unit_price for item in request.items),
            Decimal("0"),
        )
        invoice = Invoice(
            org_id=org_id,
            number=request.number,
            client_name=request.client_name,
            issue_date=request.issue_date,
            due_date=request.due_date,
            items=[
                item.model_dump(mode="json", by_alias=True)
                for item in request.items
            ],
            subtotal=subtotal,
            tax=request.tax,
            discount=request.discount,
            total=subtotal + request.tax - request.discount,
            currency=request.currency.upper(),
            status=InvoiceStatus.DRAFT,
            notes=request.notes,
            created_by=created_by,
        )
        self.store.add(invoice)
        self.db.flush()
        logger.info("Invoice %s created for org %s", invoice.number, org_id)
        return invoice

    def change_status(
        self, org_id: str, invoice_id: uuid.UUID, new_status: InvoiceStatus
    ) -> Invoice:
        """
        Move an invoice through its lifecycle.

        Enforces the state machine: only valid transitions
        are allowed.
        """
        self.store.lock_tenant(org_id)
        invoice = self.get_invoice(org_id, invoice_id)
        if not invoice.can_transition_to(new_status):
            raise InvalidTransition(
                f"Cannot transition from {invoice.status.value} "
                f"to {new_status.value}"
            )
        invoice.status = new_status
        self.db.flush()
        return invoice

"""
Invoice API endpoints.

Same tenant scoping and validation pattern as the ledger
routes.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenant_ledger.api.deps import get_current_user, get_org_id, to_http_error
from tenant_ledger.auth import AuthPayload
from tenant_ledger.errors import LedgerError
from tenant_ledger.models.base import get_db
from tenant_ledger.schemas.invoice import (
    InvoiceCreate,
    InvoiceEnvelope,
    InvoiceResponse,
    InvoiceStatusUpdate,
)
from tenant_ledger.services.invoice_service import InvoiceService
from tenant_ledger.store import tenant_lock

router = APIRouter(prefix="/api/invoices", tags=["Invoices"])


@router.get("", response_model=list[InvoiceResponse])
def list_invoices(
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    service = InvoiceService(db)
    return service.list_invoices(org_id)


@router.post("", response_model=InvoiceEnvelope, status_code=201)
def create_invoice(
    request: InvoiceCreate,
    org_id: str = Depends(get_org_id),
    user: AuthPayload | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = InvoiceService(db)
    try:
        with tenant_lock(org_id):
            invoice = service.create_invoice(
                org_id, request, created_by=user.sub if user else None
            )
            db.commit()
        return {"invoice": invoice}
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.post("/{invoice_id}/status", response_model=InvoiceEnvelope)
def change_invoice_status(
    invoice_id: uuid.UUID,
    request: InvoiceStatusUpdate,
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    """
    Change invoice status.

    Enforces the state machine: only valid transitions
    are allowed.
    """
    service = InvoiceService(db)
    try:
        with tenant_lock(org_id):
            invoice = service.change_status(org_id, invoice_id, request.status)
            db.commit()
        return {"invoice": invoice}
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)

"""
Bank reconciliation API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenant_ledger.api.deps import get_org_id, to_http_error
from tenant_ledger.errors import LedgerError
from tenant_ledger.models.base import get_db
from tenant_ledger.schemas.reconciliation import (
    AutoMatchResponse,
    StatementImportRequest,
    StatementLineResponse,
)
from tenant_ledger.services.accounting_service import AccountingService
from tenant_ledger.services.reconciliation_service import ReconciliationService
from tenant_ledger.store import tenant_lock

router = APIRouter(prefix="/api/reconciliation", tags=["Reconciliation"])


@router.post(
    "/import",
    response_model=list[StatementLineResponse],
    status_code=201,
)
def import_statement(
    request: StatementImportRequest,
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    """
    Import bank statement lines from CSV.

    The first row is a header; columns are
    date,description,amount,externalRef in that order.
    """
    service = ReconciliationService(db)
    try:
        with tenant_lock(org_id):
            lines = service.import_lines(org_id, request.csv, request.currency)
            db.commit()
        return lines
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.post("/auto-match", response_model=AutoMatchResponse)
def auto_match(
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    """Match unmatched statement lines against posted journal entries."""
    service = ReconciliationService(db)
    journal = AccountingService(db).list_journal(org_id)
    with tenant_lock(org_id):
        matched = service.auto_match(org_id, journal)
        db.commit()
    return AutoMatchResponse(matched=matched, lines=service.list_lines(org_id))


@router.get("/lines", response_model=list[StatementLineResponse])
def list_lines(
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    service = ReconciliationService(db)
    return service.list_lines(org_id)

"""
Chart of accounts API endpoints.

The API layer is thin: it resolves the tenant, holds the
tenant lock around writes, commits, and maps domain errors to
status codes. All rules live in AccountingService.
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tenant_ledger.api.deps import get_org_id, require_user, to_http_error
from tenant_ledger.auth import AuthPayload
from tenant_ledger.errors import LedgerError
from tenant_ledger.models.base import get_db
from tenant_ledger.schemas.account import AccountCreate, AccountResponse
from tenant_ledger.services.accounting_service import AccountingService
from tenant_ledger.store import tenant_lock

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    """Active accounts ordered by code (all accounts with includeInactive)."""
    service = AccountingService(db)
    return service.list_accounts(org_id, active_only=not include_inactive)


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    service = AccountingService(db)
    try:
        with tenant_lock(org_id):
            account = service.add_account(org_id, request)
            db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.post("/{account_id}/deactivate", response_model=AccountResponse)
def deactivate_account(
    account_id: uuid.UUID,
    org_id: str = Depends(get_org_id),
    user: AuthPayload = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    Deactivate an account.

    The account stays in historical entries and reports but
    can no longer receive postings.
    """
    service = AccountingService(db)
    try:
        with tenant_lock(org_id):
            account = service.deactivate_account(org_id, account_id)
            db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)

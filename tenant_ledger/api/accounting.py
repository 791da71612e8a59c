"""
Journal, report and planning API endpoints.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from tenant_ledger.api.deps import get_current_user, get_org_id, to_http_error
from tenant_ledger.auth import AuthPayload
from tenant_ledger.errors import LedgerError
from tenant_ledger.models.base import get_db
from tenant_ledger.schemas.journal import (
    PERIOD_PATTERN,
    JournalEntryResponse,
    JournalPostRequest,
    JournalPostResponse,
    PeriodBalanceResponse,
    TrialBalanceRow,
)
from tenant_ledger.schemas.planning import (
    BudgetLineCreate,
    BudgetLineResponse,
    BudgetVarianceRow,
    TaxRuleCreate,
    TaxRuleResponse,
)
from tenant_ledger.services.accounting_service import AccountingService
from tenant_ledger.store import tenant_lock

router = APIRouter(prefix="/api/accounting", tags=["Accounting"])


# --- Journal ---

@router.post("/journal", response_model=JournalPostResponse, status_code=201)
def post_journal_entry(
    request: JournalPostRequest,
    org_id: str = Depends(get_org_id),
    user: AuthPayload | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Post a balanced journal entry.

    Total debits must equal total credits to the cent. The
    entry and all of its lines are stored together or not at
    all.
    """
    if request.created_by is None and user is not None:
        request = request.model_copy(update={"created_by": user.sub})

    service = AccountingService(db)
    try:
        with tenant_lock(org_id):
            entry = service.post_journal_entry(org_id, request)
            db.commit()
        return {"journal": entry}
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.get("/journal", response_model=list[JournalEntryResponse])
def list_journal(
    up_to: date | None = Query(default=None, alias="upTo"),
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    service = AccountingService(db)
    return service.list_journal(org_id, up_to=up_to)


@router.get("/journal/{entry_id}", response_model=JournalEntryResponse)
def get_journal_entry(
    entry_id: uuid.UUID,
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    service = AccountingService(db)
    try:
        return service.get_journal_entry(org_id, entry_id)
    except LedgerError as e:
        raise to_http_error(e)


# --- Reports ---

@router.get("/trial-balance", response_model=list[TrialBalanceRow])
def trial_balance(
    up_to: date | None = Query(default=None, alias="upTo"),
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    """Debit, credit and balance for every account, zero rows included."""
    service = AccountingService(db)
    return service.trial_balance(org_id, up_to=up_to)


@router.get(
    "/accounts/{account_id}/balances/{period}",
    response_model=PeriodBalanceResponse,
)
def period_balance(
    account_id: uuid.UUID,
    period: str = Path(pattern=PERIOD_PATTERN),
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    """
    Opening, movements and closing balance for one YYYY-MM period.

    Computed snapshots are cached until a posting touches the
    account in that period or an earlier one.
    """
    service = AccountingService(db)
    try:
        with tenant_lock(org_id):
            snapshot = service.period_balance(org_id, account_id, period)
            db.commit()
        return snapshot
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


# --- Tax rules ---

@router.get("/tax-rules", response_model=list[TaxRuleResponse])
def list_tax_rules(
    on: date | None = Query(default=None),
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    """All tax rules, or only those in effect on the given day."""
    service = AccountingService(db)
    if on is not None:
        return service.tax_rules_in_effect(org_id, on)
    return service.list_tax_rules(org_id)


@router.post("/tax-rules", response_model=TaxRuleResponse, status_code=201)
def add_tax_rule(
    request: TaxRuleCreate,
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    service = AccountingService(db)
    with tenant_lock(org_id):
        rule = service.add_tax_rule(org_id, request)
        db.commit()
    return rule


# --- Budgets ---

@router.get("/budgets", response_model=list[BudgetLineResponse])
def list_budget(
    period: str | None = Query(default=None, pattern=PERIOD_PATTERN),
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    service = AccountingService(db)
    return service.list_budget(org_id, period=period)


@router.post("/budgets", response_model=BudgetLineResponse, status_code=201)
def add_budget_line(
    request: BudgetLineCreate,
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    service = AccountingService(db)
    try:
        with tenant_lock(org_id):
            line = service.add_budget_line(org_id, request)
            db.commit()
        return line
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.get(
    "/budgets/{period}/variance",
    response_model=list[BudgetVarianceRow],
)
def budget_variance(
    period: str = Path(pattern=PERIOD_PATTERN),
    org_id: str = Depends(get_org_id),
    db: Session = Depends(get_db),
):
    """Budget vs. actual (period debit - credit) per budget line."""
    service = AccountingService(db)
    with tenant_lock(org_id):
        report = service.budget_variance(org_id, period)
        db.commit()
    return report

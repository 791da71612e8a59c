"""
Shared route dependencies and error translation.

Every ledger route depends on get_org_id, so a request without
a resolvable tenant is rejected before any service runs.
"""

from decimal import Decimal

from fastapi import Depends, HTTPException, Request

from tenant_ledger.auth import AuthPayload
from tenant_ledger.errors import (
    DuplicateKey,
    LedgerError,
    NotFound,
    UnbalancedJournal,
    ValidationError,
)

MONEY_PLACES = Decimal("0.0001")


def get_org_id(request: Request) -> str:
    org_id = getattr(request.state, "org_id", None)
    if not org_id:
        raise HTTPException(status_code=400, detail="Missing org header")
    return org_id


def get_current_user(request: Request) -> AuthPayload | None:
    return getattr(request.state, "user", None)


def require_user(
    user: AuthPayload | None = Depends(get_current_user),
) -> AuthPayload:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def money(amount: Decimal) -> str:
    """Money on the wire: a decimal string with the stored 4 places."""
    return str(amount.quantize(MONEY_PLACES))


def to_http_error(e: LedgerError) -> HTTPException:
    """Map a domain exception to the HTTP error the API returns for it."""
    if isinstance(e, UnbalancedJournal):
        return HTTPException(status_code=400, detail={
            "error": "Unbalanced journal",
            "totalDebit": money(e.total_debit),
            "totalCredit": money(e.total_credit),
        })
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail={
            "error": str(e),
            "errors": e.errors,
        })
    if isinstance(e, DuplicateKey):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))

"""
Tenant Ledger: FastAPI Application.

This is the entry point for the application.
All routers and middleware are registered here.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tenant_ledger.config import get_settings
from tenant_ledger.logging_config import setup_logging
from tenant_ledger.api.health import router as health_router
from tenant_ledger.api.accounts import router as accounts_router
from tenant_ledger.api.accounting import router as accounting_router
from tenant_ledger.api.reconciliation import router as reconciliation_router
from tenant_ledger.api.invoices import router as invoices_router
from tenant_ledger.middleware import AuditMiddleware, RequestContextMiddleware
from tenant_ledger.models.base import SessionLocal
from tenant_ledger.services.audit_service import AuditRecorder

settings = get_settings()
setup_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Multi-tenant double-entry ledger with audit trail",
)

# Audit writes use their own sessions, never the request's
audit_recorder = AuditRecorder(
    SessionLocal, dead_letter_size=settings.AUDIT_DEAD_LETTER_SIZE
)

# Middleware added last runs first: the request context is
# resolved before the audit middleware sees the request.
app.add_middleware(AuditMiddleware, recorder=audit_recorder)
app.add_middleware(RequestContextMiddleware)


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    """Log unexpected failures; never leak their details to the caller."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal error"})


# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(accounting_router)
app.include_router(reconciliation_router)
app.include_router(invoices_router)

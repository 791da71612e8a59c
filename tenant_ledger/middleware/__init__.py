"""HTTP middleware: request context and audit interception."""

from tenant_ledger.middleware.context import RequestContextMiddleware
from tenant_ledger.middleware.audit import AuditMiddleware

__all__ = ["RequestContextMiddleware", "AuditMiddleware"]

"""
Request context middleware.

Resolves who is calling and for which organization before any
route runs, and stores both on request.state:

- request.state.user: AuthPayload from the bearer token, or None
- request.state.org_id: the org header, falling back to the
  token's orgId claim, or None

Rejecting requests without a tenant is left to the
get_org_id dependency so /health stays reachable.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from tenant_ledger.auth import bearer_token, decode_token
from tenant_ledger.config import get_settings


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        settings = get_settings()

        user = None
        token = bearer_token(request.headers.get("authorization"))
        if token:
            user = decode_token(token)

        org_id = request.headers.get(settings.ORG_HEADER)
        if not org_id and user is not None:
            org_id = user.org_id

        request.state.user = user
        request.state.org_id = org_id or None
        return await call_next(request)

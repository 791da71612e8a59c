"""
Audit interception middleware.

Wraps every POST/PUT/PATCH/DELETE. Once the route has produced
its response, the body is buffered, an AuditRecord is built
from it, and the write is attached to the outgoing response as
a background task. The client gets the response first; the
audit write can neither delay nor fail it.

A route that raises never produces a response here: the 500
is rendered further out. Those requests are recorded with
status 500 and no body before the exception continues.
"""

from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from tenant_ledger.services.audit_service import (
    AuditRecord,
    AuditRecorder,
    MUTATING_METHODS,
)


class AuditMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, recorder: AuditRecorder):
        super().__init__(app)
        self.recorder = recorder

    def _record_for(self, request: Request, status_code: int, body: bytes) -> AuditRecord:
        user = getattr(request.state, "user", None)
        return AuditRecord.from_exchange(
            method=request.method,
            path=request.url.path,
            org_id=getattr(request.state, "org_id", None),
            actor_id=user.sub if user else None,
            status_code=status_code,
            body=body,
        )

    async def dispatch(self, request: Request, call_next):
        if request.method not in MUTATING_METHODS:
            return await call_next(request)

        try:
            response = await call_next(request)
        except Exception:
            # record() never raises, so the original error is what propagates
            await run_in_threadpool(
                self.recorder.record, self._record_for(request, 500, b"")
            )
            raise

        body = b"".join([chunk async for chunk in response.body_iterator])
        record = self._record_for(request, response.status_code, body)
        return Response(
            content=body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
            background=BackgroundTask(self.recorder.record, record),
        )

"""
Audit trail for mutating API calls.

The middleware builds an AuditRecord from the request and the
finished response, then hands it to AuditRecorder.record as a
background task. Recording is best effort: it runs after the
response has been sent, in its own session, and a failure is
logged to the dead-letter logger and kept in memory instead
of reaching the caller.
"""

import json
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker

from tenant_ledger.models.audit_log import AuditLog

logger = logging.getLogger(__name__)
dead_letter_logger = logging.getLogger("tenant_ledger.audit.dead_letter")

UNKNOWN_TENANT = "unknown"
MUTATING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

# Checked in order; the first substring found in the path wins
ENTITY_PATH_MARKERS = (
    ("journal", "journal"),
    ("accounts", "account"),
    ("invoices", "invoice"),
    ("expenses", "expense"),
)


def infer_entity(path: str) -> str | None:
    for marker, entity in ENTITY_PATH_MARKERS:
        if marker in path:
            return entity
    return None


def infer_entity_id(body) -> str | None:
    """First of body.id, body.journal.id, body.invoice.id."""
    if not isinstance(body, dict):
        return None
    candidates = [body.get("id")]
    for key in ("journal", "invoice"):
        nested = body.get(key)
        if isinstance(nested, dict):
            candidates.append(nested.get("id"))
    for candidate in candidates:
        if candidate:
            return str(candidate)
    return None


def snapshot(raw: bytes):
    """Deep copy of a JSON response body, or None if it is not JSON."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


@dataclass
class AuditRecord:
    org_id: str
    actor_id: str | None
    action: str
    entity_type: str | None
    entity_id: str | None
    status_code: int
    new_data: dict | list | None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def from_exchange(
        cls,
        method: str,
        path: str,
        org_id: str | None,
        actor_id: str | None,
        status_code: int,
        body: bytes,
    ) -> "AuditRecord":
        data = snapshot(body)
        return cls(
            org_id=org_id or UNKNOWN_TENANT,
            actor_id=actor_id,
            action=f"{method} {path}",
            entity_type=infer_entity(path),
            entity_id=infer_entity_id(data),
            status_code=status_code,
            new_data=data,
        )


class AuditRecorder:
    """
    Writes audit records through its own session factory.

    Records that fail to persist are appended to dead_letters
    (bounded) and logged with their traceback.
    """

    def __init__(self, session_factory: sessionmaker, dead_letter_size: int = 1000):
        self.session_factory = session_factory
        self.dead_letters: deque[AuditRecord] = deque(maxlen=dead_letter_size)

    def record(self, entry: AuditRecord) -> None:
        try:
            self._write(entry)
        except Exception:
            self.dead_letters.append(entry)
            dead_letter_logger.exception(
                "Audit write failed for %s (org %s)", entry.action, entry.org_id
            )

    def _write(self, entry: AuditRecord) -> None:
        db: Session = self.session_factory()
        try:
            db.add(AuditLog(
                org_id=entry.org_id,
                actor_id=entry.actor_id,
                action=entry.action,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                status_code=entry.status_code,
                new_data=entry.new_data,
                old_data=None,
                created_at=entry.created_at,
            ))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.debug("Audited %s for org %s", entry.action, entry.org_id)

"""
Audit log model.

Records every mutating API call for compliance and debugging.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from tenant_ledger.models.base import Base


class AuditLog(Base):
    """
    Immutable record of a mutating request.

    Audit logs are append-only. You never update or delete an
    audit record. org_id is a plain string rather than a
    foreign key: requests without a tenant are logged under
    "unknown".
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    org_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    actor_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    entity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status_code: Mapped[int] = mapped_column(Integer, nullable=False)
    new_data: Mapped[dict | list | None] = mapped_column(JSON, nullable=True)
    # Pre-write state is not captured
    old_data: Mapped[dict | list | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.org_id} {self.action}>"

"""
Cached per-account, per-period balance rollup.

Snapshots are derived data: they can always be recomputed
from journal lines, and are deleted whenever a posting could
have changed them.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, ForeignKey,
    Uuid, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from tenant_ledger.models.base import Base


class LedgerBalanceSnapshot(Base):
    __tablename__ = "balance_snapshots"
    __table_args__ = (
        UniqueConstraint(
            "org_id", "account_id", "period",
            name="uq_snapshot_org_account_period",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    org_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id"), nullable=False, index=True
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=False, index=True
    )
    # YYYY-MM
    period: Mapped[str] = mapped_column(String(7), nullable=False)
    opening: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    debit: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    credit: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    closing: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    computed_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<LedgerBalanceSnapshot {self.account_id} {self.period} {self.closing}>"

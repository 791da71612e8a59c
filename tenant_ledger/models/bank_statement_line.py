"""
Bank statement line model.

Lines come from an imported bank statement. They are never
deleted; the only mutation is the reconciliation matcher
setting matched_journal_entry_id and confidence, once.
"""

import datetime
import uuid
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey,
    Uuid, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from tenant_ledger.models.base import Base


class BankStatementLine(Base):
    __tablename__ = "bank_statement_lines"
    __table_args__ = (
        UniqueConstraint("org_id", "sequence", name="uq_statement_org_sequence"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    org_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id"), nullable=False, index=True
    )
    # Import order within the tenant
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    # Positive: money into the bank account. Negative: money out.
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    external_ref: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    matched_journal_entry_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=True
    )
    confidence: Mapped[float | None] = mapped_column(nullable=True)
    imported_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.utcnow
    )

    @property
    def is_matched(self) -> bool:
        return self.matched_journal_entry_id is not None

    def __repr__(self) -> str:
        state = "matched" if self.is_matched else "unmatched"
        return f"<BankStatementLine {self.date} {self.amount} ({state})>"

"""
Journal entry and journal line models.

A journal entry is one atomic accounting transaction made of
two or more lines. Entries are immutable: once posted, they
are never modified or deleted.
"""

import datetime
import uuid
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey,
    Uuid, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_ledger.models.base import Base


class JournalEntry(Base):
    """
    Header of a posted transaction.

    Within an entry the sum of debits must equal the sum of
    credits. This invariant is enforced by the
    AccountingService, not by the model.

    `number` is a per-tenant sequence assigned at posting time
    and is what "posting order" means everywhere else.
    """

    __tablename__ = "journal_entries"
    __table_args__ = (
        UniqueConstraint("org_id", "reference", name="uq_journal_org_reference"),
        UniqueConstraint("org_id", "number", name="uq_journal_org_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    org_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id"), nullable=False, index=True
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    reference: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    memo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_by: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.utcnow
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.utcnow
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        order_by="JournalLine.position",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry #{self.number} {self.date} ({len(self.lines)} lines)>"


class JournalLine(Base):
    """
    One debit and/or credit row of a journal entry.

    Both sides may be nonzero on the same line; only the
    entry totals have to balance.
    """

    __tablename__ = "journal_lines"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    entry_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=False, index=True
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    debit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    credit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    memo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    currency: Mapped[str | None] = mapped_column(String(3), nullable=True)

    entry: Mapped["JournalEntry"] = relationship(back_populates="lines")
    account: Mapped["LedgerAccount"] = relationship()

    @property
    def account_code(self) -> str:
        return self.account.code

    def __repr__(self) -> str:
        return f"<JournalLine {self.account_id} D={self.debit} C={self.credit}>"

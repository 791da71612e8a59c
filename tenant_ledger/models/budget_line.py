"""
Budget line: planned amount for one account in one period.
"""

import uuid
from decimal import Decimal

from sqlalchemy import String, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tenant_ledger.models.base import Base


class BudgetLine(Base):
    __tablename__ = "budget_lines"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    org_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id"), nullable=False, index=True
    )
    # YYYY-MM
    period: Mapped[str] = mapped_column(String(7), nullable=False, index=True)
    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    currency: Mapped[str | None] = mapped_column(String(3), nullable=True)

    def __repr__(self) -> str:
        return f"<BudgetLine {self.period} {self.account_id} {self.amount}>"

"""
Tax rule configuration, scoped to a tenant.
"""

import datetime
import uuid
from decimal import Decimal

from sqlalchemy import (
    String, Date, Numeric, ForeignKey,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from tenant_ledger.models.base import Base
from tenant_ledger.models.enums import TaxType


class TaxRule(Base):
    __tablename__ = "tax_rules"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    org_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id"), nullable=False, index=True
    )
    country: Mapped[str] = mapped_column(String(2), nullable=False)
    jurisdiction: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Fraction, 0.15 means 15%
    rate: Mapped[Decimal] = mapped_column(Numeric(7, 6), nullable=False)
    tax_type: Mapped[TaxType] = mapped_column(
        SAEnum(TaxType, name="tax_type_enum"),
        nullable=False,
    )
    effective_from: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[datetime.date | None] = mapped_column(
        Date, nullable=True
    )

    def __repr__(self) -> str:
        return f"<TaxRule {self.name} {self.rate}>"

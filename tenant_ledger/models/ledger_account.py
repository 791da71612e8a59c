"""
Ledger account model (chart of accounts).

Every account a tenant posts to is a ledger account.
Accounts form a tree through parent_id.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Boolean, DateTime, ForeignKey,
    Enum as SAEnum, Uuid, Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_ledger.models.base import Base
from tenant_ledger.models.enums import AccountType


class LedgerAccount(Base):
    """
    A single account in a tenant's chart of accounts.

    Once created, an account is never deleted, only
    deactivated via is_active=False. Deactivated accounts
    still appear in historical entries and reports but
    cannot receive new postings.

    Codes are unique among a tenant's *active* accounts, so
    there is no database constraint on (org_id, code); the
    AccountingService checks it under the tenant lock.
    """

    __tablename__ = "ledger_accounts"
    __table_args__ = (
        Index("ix_ledger_accounts_org_code", "org_id", "code"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    org_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id"), nullable=False, index=True
    )
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=True
    )
    currency: Mapped[str | None] = mapped_column(
        String(3), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    parent: Mapped["LedgerAccount | None"] = relationship(
        remote_side=[id]
    )

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.code} ({self.account_type.value})>"

"""
Tenant-scoped data access.

LedgerStore is the only place that builds queries against the
ledger tables. Every method takes an org_id and applies it as
a predicate, so one tenant can never read another tenant's
rows. It holds no business rules: validation lives in the
services.

tenant_lock() serializes writers of the same tenant inside
this process; LedgerStore.lock_tenant() additionally takes a
row lock on the organization so separate processes sharing a
PostgreSQL database are serialized too.
"""

import threading
import uuid
from contextlib import contextmanager
from datetime import date

from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session, selectinload

from tenant_ledger.models.organization import Organization
from tenant_ledger.models.ledger_account import LedgerAccount
from tenant_ledger.models.journal_entry import JournalEntry, JournalLine
from tenant_ledger.models.balance_snapshot import LedgerBalanceSnapshot
from tenant_ledger.models.tax_rule import TaxRule
from tenant_ledger.models.budget_line import BudgetLine
from tenant_ledger.models.bank_statement_line import BankStatementLine
from tenant_ledger.models.invoice import Invoice


_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


@contextmanager
def tenant_lock(org_id: str):
    """
    Hold the writer lock for one tenant.

    Wrap the whole check-then-write-then-commit sequence of a
    mutating operation in this, so two postings for the same
    tenant cannot interleave.
    """
    with _locks_guard:
        lock = _locks.setdefault(org_id, threading.Lock())
    with lock:
        yield


class LedgerStore:

    def __init__(self, db: Session):
        self.db = db

    # --- Tenants ---

    def ensure_tenant(self, org_id: str) -> Organization:
        """Return the tenant's organization row, creating it on first use."""
        org = self.db.get(Organization, org_id)
        if org is None:
            org = Organization(id=org_id)
            self.db.add(org)
            self.db.flush()
        return org

    def lock_tenant(self, org_id: str) -> Organization:
        """
        Ensure the tenant exists and row-lock it until commit.

        SQLite ignores FOR UPDATE; there the in-process
        tenant_lock() is what serializes writers.
        """
        self.ensure_tenant(org_id)
        return self.db.execute(
            select(Organization)
            .where(Organization.id == org_id)
            .with_for_update()
        ).scalar_one()

    def add(self, instance) -> None:
        self.db.add(instance)

    # --- Accounts ---

    def accounts(
        self, org_id: str, active_only: bool = False
    ) -> list[LedgerAccount]:
        query = select(LedgerAccount).where(LedgerAccount.org_id == org_id)
        if active_only:
            query = query.where(LedgerAccount.is_active.is_(True))
        query = query.order_by(LedgerAccount.code, LedgerAccount.created_at)
        return list(self.db.execute(query).scalars().all())

    def get_account(
        self, org_id: str, account_id: uuid.UUID
    ) -> LedgerAccount | None:
        return self.db.execute(
            select(LedgerAccount).where(
                LedgerAccount.org_id == org_id,
                LedgerAccount.id == account_id,
            )
        ).scalar_one_or_none()

    def find_active_account(
        self, org_id: str, code: str
    ) -> LedgerAccount | None:
        return self.db.execute(
            select(LedgerAccount).where(
                LedgerAccount.org_id == org_id,
                LedgerAccount.code == code,
                LedgerAccount.is_active.is_(True),
            )
        ).scalar_one_or_none()

    def accounts_by_code(
        self, org_id: str, codes: set[str]
    ) -> dict[str, LedgerAccount]:
        """Active accounts with the given codes, keyed by code."""
        if not codes:
            return {}
        accounts = self.db.execute(
            select(LedgerAccount).where(
                LedgerAccount.org_id == org_id,
                LedgerAccount.code.in_(codes),
                LedgerAccount.is_active.is_(True),
            )
        ).scalars().all()
        return {a.code: a for a in accounts}

    def accounts_by_id(
        self, org_id: str, account_ids: set[uuid.UUID]
    ) -> dict[uuid.UUID, LedgerAccount]:
        if not account_ids:
            return {}
        accounts = self.db.execute(
            select(LedgerAccount).where(
                LedgerAccount.org_id == org_id,
                LedgerAccount.id.in_(account_ids),
            )
        ).scalars().all()
        return {a.id: a for a in accounts}

    # --- Journal ---

    def journal_entries(
        self, org_id: str, up_to: date | None = None
    ) -> list[JournalEntry]:
        """Entries in posting order, lines eagerly loaded."""
        query = (
            select(JournalEntry)
            .where(JournalEntry.org_id == org_id)
            .options(selectinload(JournalEntry.lines))
            .order_by(JournalEntry.number)
        )
        if up_to is not None:
            query = query.where(JournalEntry.date <= up_to)
        return list(self.db.execute(query).scalars().all())

    def get_journal_entry(
        self, org_id: str, entry_id: uuid.UUID
    ) -> JournalEntry | None:
        return self.db.execute(
            select(JournalEntry)
            .where(
                JournalEntry.org_id == org_id,
                JournalEntry.id == entry_id,
            )
            .options(selectinload(JournalEntry.lines))
        ).scalar_one_or_none()

    def find_entry_by_reference(
        self, org_id: str, reference: str
    ) -> JournalEntry | None:
        return self.db.execute(
            select(JournalEntry).where(
                JournalEntry.org_id == org_id,
                JournalEntry.reference == reference,
            )
        ).scalar_one_or_none()

    def next_journal_number(self, org_id: str) -> int:
        current = self.db.execute(
            select(func.max(JournalEntry.number)).where(
                JournalEntry.org_id == org_id
            )
        ).scalar()
        return (current or 0) + 1

    def line_amounts(
        self,
        org_id: str,
        up_to: date | None = None,
        since: date | None = None,
        before: date | None = None,
        account_id: uuid.UUID | None = None,
    ):
        """
        (account_id, debit, credit) for every line of the tenant's
        entries, optionally limited by entry date and account.

        `up_to` and `since` are inclusive, `before` is exclusive.
        """
        query = (
            select(JournalLine.account_id, JournalLine.debit, JournalLine.credit)
            .join(JournalEntry, JournalLine.entry_id == JournalEntry.id)
            .where(JournalEntry.org_id == org_id)
        )
        if up_to is not None:
            query = query.where(JournalEntry.date <= up_to)
        if since is not None:
            query = query.where(JournalEntry.date >= since)
        if before is not None:
            query = query.where(JournalEntry.date < before)
        if account_id is not None:
            query = query.where(JournalLine.account_id == account_id)
        return self.db.execute(query).all()

    # --- Balance snapshots ---

    def get_snapshot(
        self, org_id: str, account_id: uuid.UUID, period: str
    ) -> LedgerBalanceSnapshot | None:
        return self.db.execute(
            select(LedgerBalanceSnapshot).where(
                LedgerBalanceSnapshot.org_id == org_id,
                LedgerBalanceSnapshot.account_id == account_id,
                LedgerBalanceSnapshot.period == period,
            )
        ).scalar_one_or_none()

    def invalidate_snapshots(
        self, org_id: str, account_ids: set[uuid.UUID], from_period: str
    ) -> int:
        """Drop cached snapshots of these accounts for from_period and later."""
        if not account_ids:
            return 0
        result = self.db.execute(
            delete(LedgerBalanceSnapshot).where(
                LedgerBalanceSnapshot.org_id == org_id,
                LedgerBalanceSnapshot.account_id.in_(account_ids),
                LedgerBalanceSnapshot.period >= from_period,
            )
        )
        return result.rowcount

    # --- Tax rules and budgets ---

    def tax_rules(self, org_id: str) -> list[TaxRule]:
        return list(self.db.execute(
            select(TaxRule)
            .where(TaxRule.org_id == org_id)
            .order_by(TaxRule.effective_from, TaxRule.name)
        ).scalars().all())

    def budget_lines(
        self, org_id: str, period: str | None = None
    ) -> list[BudgetLine]:
        query = select(BudgetLine).where(BudgetLine.org_id == org_id)
        if period is not None:
            query = query.where(BudgetLine.period == period)
        return list(self.db.execute(
            query.order_by(BudgetLine.period)
        ).scalars().all())

    # --- Bank statements ---

    def statement_lines(
        self, org_id: str, unmatched_only: bool = False
    ) -> list[BankStatementLine]:
        query = select(BankStatementLine).where(
            BankStatementLine.org_id == org_id
        )
        if unmatched_only:
            query = query.where(
                BankStatementLine.matched_journal_entry_id.is_(None)
            )
        return list(self.db.execute(
            query.order_by(BankStatementLine.sequence)
        ).scalars().all())

    def next_statement_sequence(self, org_id: str) -> int:
        current = self.db.execute(
            select(func.max(BankStatementLine.sequence)).where(
                BankStatementLine.org_id == org_id
            )
        ).scalar()
        return (current or 0) + 1

    # --- Invoices ---

    def invoices(self, org_id: str) -> list[Invoice]:
        return list(self.db.execute(
            select(Invoice)
            .where(Invoice.org_id == org_id)
            .order_by(Invoice.created_at.desc())
        ).scalars().all())

    def get_invoice(
        self, org_id: str, invoice_id: uuid.UUID
    ) -> Invoice | None:
        return self.db.execute(
            select(Invoice).where(
                Invoice.org_id == org_id,
                Invoice.id == invoice_id,
            )
        ).scalar_one_or_none()

    def find_invoice_by_number(
        self, org_id: str, number: str
    ) -> Invoice | None:
        return self.db.execute(
            select(Invoice).where(
                Invoice.org_id == org_id,
                Invoice.number == number,
            )
        ).scalar_one_or_none()

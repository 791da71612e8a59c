"""
Accounting service: the core of the ledger.

This service enforces the fundamental rules:
1. Every journal entry must balance (debits = credits at 2 decimals)
2. Entries are immutable and written all-or-nothing
3. Posted lines reference active accounts of the same tenant
4. Account codes are unique among a tenant's active accounts

No other service writes to the journal directly.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_EVEN

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tenant_ledger.errors import (
    DuplicateKey,
    NotFound,
    UnbalancedJournal,
    ValidationError,
)
from tenant_ledger.models.ledger_account import LedgerAccount
from tenant_ledger.models.journal_entry import JournalEntry, JournalLine
from tenant_ledger.models.balance_snapshot import LedgerBalanceSnapshot
from tenant_ledger.models.tax_rule import TaxRule
from tenant_ledger.models.budget_line import BudgetLine
from tenant_ledger.schemas.account import AccountCreate
from tenant_ledger.schemas.journal import JournalEntryCreate
from tenant_ledger.schemas.planning import TaxRuleCreate, BudgetLineCreate
from tenant_ledger.store import LedgerStore

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_cents(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half to even."""
    return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)


def period_of(day: date) -> str:
    return day.strftime("%Y-%m")


def period_bounds(period: str) -> tuple[date, date]:
    """First day of the period and first day of the next one."""
    year, month = (int(part) for part in period.split("-"))
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


@dataclass
class TrialBalanceLine:
    account: LedgerAccount
    debit: Decimal
    credit: Decimal

    @property
    def balance(self) -> Decimal:
        return self.debit - self.credit


@dataclass
class BudgetVariance:
    budget_line_id: uuid.UUID
    account_id: uuid.UUID
    period: str
    budget: Decimal
    actual: Decimal

    @property
    def variance(self) -> Decimal:
        return self.budget - self.actual


class AccountingService:
    """
    All chart-of-accounts and journal operations pass through
    this service.

    The service takes a database session as a constructor
    argument and never commits. The caller controls the
    transaction boundary and should hold tenant_lock() across
    a mutating call and its commit.
    """

    def __init__(self, db: Session, store: LedgerStore | None = None):
        self.db = db
        self.store = store or LedgerStore(db)

    # --- Chart of accounts ---

    def add_account(self, org_id: str, request: AccountCreate) -> LedgerAccount:
        """
        Create a new ledger account for the tenant.

        Raises DuplicateKey if an active account already uses the
        code, NotFound if the parent is not one of the tenant's
        accounts. A new account has no children, so attaching it
        to an existing parent cannot create a cycle.
        """
        self.store.lock_tenant(org_id)

        if self.store.find_active_account(org_id, request.code):
            raise DuplicateKey(
                f"Account with code '{request.code}' already exists"
            )

        if request.parent_id is not None:
            if not self.store.get_account(org_id, request.parent_id):
                raise NotFound(f"Parent account {request.parent_id} not found")

        account = LedgerAccount(
            org_id=org_id,
            code=request.code,
            name=request.name,
            account_type=request.account_type,
            parent_id=request.parent_id,
            currency=request.currency,
        )
        self.store.add(account)
        self.db.flush()
        logger.info("Account %s created for org %s", account.code, org_id)
        return account

    def list_accounts(
        self, org_id: str, active_only: bool = False
    ) -> list[LedgerAccount]:
        """Return the tenant's accounts ordered by code."""
        return self.store.accounts(org_id, active_only=active_only)

    def get_account(self, org_id: str, account_id: uuid.UUID) -> LedgerAccount:
        account = self.store.get_account(org_id, account_id)
        if not account:
            raise NotFound(f"Account {account_id} not found")
        return account

    def deactivate_account(
        self, org_id: str, account_id: uuid.UUID
    ) -> LedgerAccount:
        """
        Exclude an account from new postings.

        Existing entries keep referencing it and it still shows
        up in the trial balance.
        """
        self.store.lock_tenant(org_id)
        account = self.get_account(org_id, account_id)
        account.is_active = False
        account.updated_at = datetime.utcnow()
        self.db.flush()
        logger.info("Account %s deactivated for org %s", account.code, org_id)
        return account

    # --- Journal ---

    def post_journal_entry(
        self, org_id: str, request: JournalEntryCreate
    ) -> JournalEntry:
        """
        Post a balanced journal entry.

        This is the most critical method in the service. Every
        check runs before anything is written:
        - each line names an active account of the tenant
        - total debits minus total credits rounds to zero at 2
          decimals
        - the reference has not been used by the tenant

        The entry and its lines are flushed together in one unit
        of work; the caller commits them together or rolls all
        of them back.
        """
        self.store.lock_tenant(org_id)

        resolved = self._resolve_line_accounts(org_id, request)

        total_debit = sum((line.debit for line in request.lines), ZERO)
        total_credit = sum((line.credit for line in request.lines), ZERO)
        if to_cents(total_debit - total_credit) != ZERO:
            logger.warning(
                "Rejected unbalanced entry for org %s: debits=%s credits=%s",
                org_id, total_debit, total_credit,
            )
            raise UnbalancedJournal(total_debit, total_credit)

        if request.ref is not None:
            if self.store.find_entry_by_reference(org_id, request.ref):
                raise DuplicateKey(
                    f"Journal reference '{request.ref}' already exists"
                )

        now = datetime.utcnow()
        entry = JournalEntry(
            org_id=org_id,
            number=self.store.next_journal_number(org_id),
            date=request.date,
            reference=request.ref,
            memo=request.memo,
            created_by=request.created_by,
            created_at=now,
            updated_at=now,
        )
        for position, (line_data, account) in enumerate(
            zip(request.lines, resolved)
        ):
            entry.lines.append(JournalLine(
                account=account,
                position=position,
                debit=line_data.debit,
                credit=line_data.credit,
                memo=line_data.memo,
                currency=line_data.currency or account.currency,
            ))

        self.store.add(entry)
        try:
            self.db.flush()
        except IntegrityError:
            if request.ref is None:
                raise
            # Another process won the race for this reference
            raise DuplicateKey(
                f"Journal reference '{request.ref}' already exists"
            )

        self.store.invalidate_snapshots(
            org_id, {a.id for a in resolved}, period_of(request.date)
        )
        logger.info(
            "Posted journal entry #%s (%s lines) for org %s",
            entry.number, len(entry.lines), org_id,
        )
        return entry

    def _resolve_line_accounts(
        self, org_id: str, request: JournalEntryCreate
    ) -> list[LedgerAccount]:
        """Map every line to an active tenant account, in line order."""
        codes = {l.account_code for l in request.lines if l.account_id is None}
        ids = {l.account_id for l in request.lines if l.account_id is not None}
        by_code = self.store.accounts_by_code(org_id, codes)
        by_id = self.store.accounts_by_id(org_id, ids)

        resolved = []
        errors = []
        for index, line in enumerate(request.lines):
            if line.account_id is not None:
                account = by_id.get(line.account_id)
                field, label = "accountId", line.account_id
            else:
                account = by_code.get(line.account_code)
                field, label = "accountCode", line.account_code

            if account is None:
                errors.append({
                    "field": f"lines[{index}].{field}",
                    "message": f"Account {label} not found",
                })
            elif not account.is_active:
                errors.append({
                    "field": f"lines[{index}].{field}",
                    "message": f"Account {account.code} is not active",
                })
            resolved.append(account)

        if errors:
            raise ValidationError("Invalid journal lines", errors)
        return resolved

    def list_journal(
        self, org_id: str, up_to: date | None = None
    ) -> list[JournalEntry]:
        """Return the tenant's journal entries in posting order."""
        return self.store.journal_entries(org_id, up_to=up_to)

    def get_journal_entry(
        self, org_id: str, entry_id: uuid.UUID
    ) -> JournalEntry:
        entry = self.store.get_journal_entry(org_id, entry_id)
        if not entry:
            raise NotFound(f"Journal entry {entry_id} not found")
        return entry

    # --- Reports ---

    def trial_balance(
        self, org_id: str, up_to: date | None = None
    ) -> list[TrialBalanceLine]:
        """
        Total debits and credits per account.

        Every account of the chart appears, in code order, even
        without postings. Lines are accumulated in a single pass
        into a dict keyed by account id.
        """
        rows = {
            account.id: TrialBalanceLine(account, ZERO, ZERO)
            for account in self.store.accounts(org_id)
        }
        for account_id, debit, credit in self.store.line_amounts(
            org_id, up_to=up_to
        ):
            row = rows.get(account_id)
            if row is None:
                continue
            row.debit += debit
            row.credit += credit
        return list(rows.values())

    def period_balance(
        self, org_id: str, account_id: uuid.UUID, period: str
    ) -> LedgerBalanceSnapshot:
        """
        Opening, movements and closing balance of an account for a
        YYYY-MM period.

        Served from the snapshot cache when present; otherwise
        computed from journal lines and cached. Balances are
        debit - credit.
        """
        account = self.get_account(org_id, account_id)
        cached = self.store.get_snapshot(org_id, account.id, period)
        if cached:
            return cached

        start, end = period_bounds(period)
        opening = ZERO
        for _, debit, credit in self.store.line_amounts(
            org_id, before=start, account_id=account.id
        ):
            opening += debit - credit

        period_debit = ZERO
        period_credit = ZERO
        for _, debit, credit in self.store.line_amounts(
            org_id, since=start, before=end, account_id=account.id
        ):
            period_debit += debit
            period_credit += credit

        snapshot = LedgerBalanceSnapshot(
            org_id=org_id,
            account_id=account.id,
            period=period,
            opening=opening,
            debit=period_debit,
            credit=period_credit,
            closing=opening + period_debit - period_credit,
            currency=account.currency,
        )
        self.store.add(snapshot)
        self.db.flush()
        return snapshot

    # --- Tax rules ---

    def add_tax_rule(self, org_id: str, request: TaxRuleCreate) -> TaxRule:
        self.store.ensure_tenant(org_id)
        rule = TaxRule(
            org_id=org_id,
            country=request.country.upper(),
            jurisdiction=request.jurisdiction,
            name=request.name,
            rate=request.rate,
            tax_type=request.tax_type,
            effective_from=request.effective_from,
            effective_to=request.effective_to,
        )
        self.store.add(rule)
        self.db.flush()
        return rule

    def list_tax_rules(self, org_id: str) -> list[TaxRule]:
        return self.store.tax_rules(org_id)

    def tax_rules_in_effect(self, org_id: str, on: date) -> list[TaxRule]:
        """Rules whose effective range contains the given day."""
        return [
            rule for rule in self.store.tax_rules(org_id)
            if rule.effective_from <= on
            and (rule.effective_to is None or on <= rule.effective_to)
        ]

    # --- Budgets ---

    def add_budget_line(
        self, org_id: str, request: BudgetLineCreate
    ) -> BudgetLine:
        account = self.get_account(org_id, request.account_id)
        self.store.ensure_tenant(org_id)
        line = BudgetLine(
            org_id=org_id,
            period=request.period,
            account_id=account.id,
            amount=request.amount,
            currency=request.currency or account.currency,
        )
        self.store.add(line)
        self.db.flush()
        return line

    def list_budget(
        self, org_id: str, period: str | None = None
    ) -> list[BudgetLine]:
        return self.store.budget_lines(org_id, period=period)

    def budget_variance(self, org_id: str, period: str) -> list[BudgetVariance]:
        """Compare each budget line of the period with the account's movement."""
        report = []
        for line in self.store.budget_lines(org_id, period=period):
            snapshot = self.period_balance(org_id, line.account_id, period)
            report.append(BudgetVariance(
                budget_line_id=line.id,
                account_id=line.account_id,
                period=period,
                budget=line.amount,
                actual=snapshot.debit - snapshot.credit,
            ))
        return report

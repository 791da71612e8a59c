"""
Reconciliation service: bank statement import and matching.

Statement lines are imported from CSV with the positional
layout date,description,amount,externalRef after a header row.
Matching is delegated to a MatchingStrategy so stronger
algorithms can replace the default heuristic without changing
import or listing.

State machine of a statement line: Unmatched -> Matched.
There is no unmatch.
"""

import csv
import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from tenant_ledger.errors import ValidationError
from tenant_ledger.models.bank_statement_line import BankStatementLine
from tenant_ledger.models.journal_entry import JournalEntry
from tenant_ledger.store import LedgerStore

logger = logging.getLogger(__name__)

STATEMENT_COLUMNS = ("date", "description", "amount", "externalRef")


@dataclass(frozen=True)
class Match:
    journal_entry: JournalEntry
    confidence: float


class MatchingStrategy:
    """Find the journal entry a statement line corresponds to."""

    def match(
        self, line: BankStatementLine, entries: list[JournalEntry]
    ) -> Match | None:
        raise NotImplementedError


class DateAmountMatcher(MatchingStrategy):
    """
    First entry, in posting order, dated the same day as the
    statement line and having a line whose debit - credit is
    the negated statement amount.

    The confidence is a fixed, deliberately low score: this is
    a heuristic, not a probability.
    """

    CONFIDENCE = 0.55

    def match(self, line, entries):
        target = -line.amount
        for entry in entries:
            if entry.date != line.date:
                continue
            if any(l.debit - l.credit == target for l in entry.lines):
                return Match(entry, self.CONFIDENCE)
        return None


class ReconciliationService:

    def __init__(
        self,
        db: Session,
        store: LedgerStore | None = None,
        matcher: MatchingStrategy | None = None,
    ):
        self.db = db
        self.store = store or LedgerStore(db)
        self.matcher = matcher or DateAmountMatcher()

    def import_lines(
        self, org_id: str, raw_rows: str | Iterable[str], currency: str
    ) -> list[BankStatementLine]:
        """
        Parse and store statement lines.

        raw_rows is either the CSV text or an iterable of CSV
        rows. Blank rows are dropped and the first remaining row
        is treated as the header. A row with an unparseable
        date or amount rejects the whole import.
        """
        if isinstance(raw_rows, str):
            raw_rows = raw_rows.splitlines()
        rows = [row for row in raw_rows if row.strip()][1:]

        parsed = []
        errors = []
        for number, fields in enumerate(csv.reader(io.StringIO("\n".join(rows))), start=2):
            try:
                parsed.append(self._parse_row(fields))
            except ValueError as e:
                errors.append({"field": f"row {number}", "message": str(e)})
        if errors:
            raise ValidationError("Malformed statement rows", errors)

        self.store.lock_tenant(org_id)
        sequence = self.store.next_statement_sequence(org_id)
        imported = []
        for offset, (day, description, amount, external_ref) in enumerate(parsed):
            line = BankStatementLine(
                org_id=org_id,
                sequence=sequence + offset,
                date=day,
                description=description,
                amount=amount,
                currency=currency.upper(),
                external_ref=external_ref,
            )
            self.store.add(line)
            imported.append(line)
        self.db.flush()
        logger.info("Imported %s statement lines for org %s", len(imported), org_id)
        return imported

    @staticmethod
    def _parse_row(fields: list[str]) -> tuple[date, str, Decimal, str | None]:
        if len(fields) < 3:
            raise ValueError(
                f"expected columns {','.join(STATEMENT_COLUMNS)}, got {len(fields)}"
            )
        try:
            day = date.fromisoformat(fields[0].strip())
        except ValueError:
            raise ValueError(f"invalid date '{fields[0]}'")
        try:
            amount = Decimal(fields[2].strip())
        except InvalidOperation:
            raise ValueError(f"invalid amount '{fields[2]}'")
        if not amount.is_finite():
            raise ValueError(f"invalid amount '{fields[2]}'")
        external_ref = fields[3].strip() if len(fields) > 3 and fields[3].strip() else None
        return day, fields[1].strip(), amount, external_ref

    def auto_match(
        self, org_id: str, journal_entries: list[JournalEntry] | None = None
    ) -> int:
        """
        Match every unmatched statement line of the tenant.

        Uses the tenant's posted entries when journal_entries is
        not given. Already matched lines are left alone, so
        running this twice changes nothing the second time.
        Returns the number of lines matched by this call.
        """
        if journal_entries is None:
            journal_entries = self.store.journal_entries(org_id)
        else:
            journal_entries = [e for e in journal_entries if e.org_id == org_id]

        self.store.lock_tenant(org_id)
        matched = 0
        for line in self.store.statement_lines(org_id, unmatched_only=True):
            result = self.matcher.match(line, journal_entries)
            if result is None:
                continue
            line.matched_journal_entry_id = result.journal_entry.id
            line.confidence = result.confidence
            matched += 1
        self.db.flush()
        logger.info("Auto-matched %s statement lines for org %s", matched, org_id)
        return matched

    def list_lines(self, org_id: str) -> list[BankStatementLine]:
        """All statement lines, matched or not, in import order."""
        return self.store.statement_lines(org_id)

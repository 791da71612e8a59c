"""
Concurrent writers for one tenant.

Each worker uses its own session and holds tenant_lock across
the posting and its commit, the way the routes do.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal

import pytest

from tenant_ledger.errors import DuplicateKey
from tenant_ledger.models.enums import AccountType
from tenant_ledger.schemas.account import AccountCreate
from tenant_ledger.schemas.journal import JournalEntryCreate, JournalLineCreate
from tenant_ledger.services.accounting_service import AccountingService
from tenant_ledger.store import tenant_lock


ORG = "org-a"
WORKERS = 8


@pytest.fixture
def chart(db_session):
    service = AccountingService(db_session)
    service.add_account(ORG, AccountCreate(
        code="1000", name="Cash", account_type=AccountType.ASSET
    ))
    service.add_account(ORG, AccountCreate(
        code="4000", name="Revenue", account_type=AccountType.INCOME
    ))
    db_session.commit()


def run_concurrently(session_factory, refs):
    """Post one entry per ref from parallel threads; return each outcome."""
    barrier = threading.Barrier(len(refs))

    def worker(ref):
        db = session_factory()
        try:
            barrier.wait()
            with tenant_lock(ORG):
                entry = AccountingService(db).post_journal_entry(
                    ORG,
                    JournalEntryCreate(
                        date=date(2024, 1, 15),
                        ref=ref,
                        lines=[
                            JournalLineCreate(account_code="1000", debit=Decimal("10")),
                            JournalLineCreate(account_code="4000", credit=Decimal("10")),
                        ],
                    ),
                )
                db.commit()
                return entry.number
        except DuplicateKey:
            db.rollback()
            return "duplicate"
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=len(refs)) as pool:
        return list(pool.map(worker, refs))


class TestSingleWriterPerTenant:

    def test_numbers_unique_and_consecutive(self, chart, session_factory, db_session):
        refs = [f"JE-{i}" for i in range(WORKERS)]
        numbers = run_concurrently(session_factory, refs)

        assert sorted(numbers) == list(range(1, WORKERS + 1))
        journal = AccountingService(db_session).list_journal(ORG)
        assert [e.number for e in journal] == list(range(1, WORKERS + 1))

    def test_contended_reference_posted_once(self, chart, session_factory, db_session):
        outcomes = run_concurrently(session_factory, ["JE-DUP"] * WORKERS)

        assert outcomes.count("duplicate") == WORKERS - 1
        assert [o for o in outcomes if o != "duplicate"] == [1]
        assert len(AccountingService(db_session).list_journal(ORG)) == 1

"""
Tests for the audit trail helpers and AuditRecorder.
"""

import logging

from sqlalchemy import select

from tenant_ledger.models.audit_log import AuditLog
from tenant_ledger.services.audit_service import (
    UNKNOWN_TENANT,
    AuditRecord,
    AuditRecorder,
    infer_entity,
    infer_entity_id,
    snapshot,
)


class TestInferEntity:

    def test_paths(self):
        assert infer_entity("/api/accounting/journal") == "journal"
        assert infer_entity("/api/accounts") == "account"
        assert infer_entity("/api/invoices/123/status") == "invoice"
        assert infer_entity("/api/expenses") == "expense"
        assert infer_entity("/api/reconciliation/import") is None

    def test_journal_checked_before_account(self):
        # /api/accounting contains "account" as well
        assert infer_entity("/api/accounting/journal") == "journal"

    def test_accounting_paths_are_not_accounts(self):
        assert infer_entity("/api/accounting/tax-rules") is None
        assert infer_entity("/api/accounting/budgets") is None
        assert infer_entity("/api/accounts/abc/deactivate") == "account"


class TestInferEntityId:

    def test_top_level_id(self):
        assert infer_entity_id({"id": "a1", "journal": {"id": "j1"}}) == "a1"

    def test_nested_ids(self):
        assert infer_entity_id({"journal": {"id": "j1"}}) == "j1"
        assert infer_entity_id({"invoice": {"id": "i1"}}) == "i1"

    def test_missing(self):
        assert infer_entity_id({"detail": "Unauthorized"}) is None
        assert infer_entity_id([{"id": "x"}]) is None
        assert infer_entity_id(None) is None


class TestSnapshot:

    def test_json(self):
        assert snapshot(b'{"id": 1}') == {"id": 1}

    def test_not_json(self):
        assert snapshot(b"plain text") is None
        assert snapshot(b"") is None


class TestAuditRecord:

    def test_from_exchange(self):
        record = AuditRecord.from_exchange(
            method="POST",
            path="/api/accounting/journal",
            org_id="org-a",
            actor_id="user-1",
            status_code=201,
            body=b'{"journal": {"id": "j1"}}',
        )
        assert record.action == "POST /api/accounting/journal"
        assert record.entity_type == "journal"
        assert record.entity_id == "j1"
        assert record.new_data == {"journal": {"id": "j1"}}

    def test_missing_tenant(self):
        record = AuditRecord.from_exchange(
            "POST", "/api/accounts", None, None, 400, b'{"detail": "x"}'
        )
        assert record.org_id == UNKNOWN_TENANT


class TestAuditRecorder:

    def _record(self):
        return AuditRecord.from_exchange(
            "POST", "/api/accounts", "org-a", "user-1", 201, b'{"id": "a1"}'
        )

    def test_writes_row(self, session_factory, db_session):
        recorder = AuditRecorder(session_factory)
        recorder.record(self._record())

        [row] = db_session.execute(select(AuditLog)).scalars().all()
        assert row.org_id == "org-a"
        assert row.actor_id == "user-1"
        assert row.entity_type == "account"
        assert row.entity_id == "a1"
        assert row.status_code == 201
        assert row.new_data == {"id": "a1"}
        assert row.old_data is None
        assert len(recorder.dead_letters) == 0

    def test_failed_write_is_dead_lettered(self, caplog):
        def broken_factory():
            raise RuntimeError("database unavailable")

        recorder = AuditRecorder(broken_factory)
        record = self._record()

        with caplog.at_level(logging.ERROR, logger="tenant_ledger.audit.dead_letter"):
            recorder.record(record)

        assert list(recorder.dead_letters) == [record]
        assert "Audit write failed" in caplog.text

    def test_dead_letters_bounded(self):
        def broken_factory():
            raise RuntimeError("database unavailable")

        recorder = AuditRecorder(broken_factory, dead_letter_size=2)
        for _ in range(3):
            recorder.record(self._record())
        assert len(recorder.dead_letters) == 2

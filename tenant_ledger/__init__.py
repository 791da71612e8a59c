"""Multi-tenant double-entry ledger service."""

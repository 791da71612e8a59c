"""
Domain exceptions.

Services raise these; the API layer maps each one to an HTTP
status code. They all derive from ValueError so callers that
only care about "the request was rejected" can catch that.
"""

from decimal import Decimal


class LedgerError(ValueError):
    """Base class for every rejected ledger operation."""


class ValidationError(LedgerError):
    """
    Input failed a rule the schema cannot express
    (unknown account code, inactive account, bad CSV row).

    `errors` is a list of {"field": ..., "message": ...} dicts.
    """

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class InvalidTransition(ValidationError):
    """A status change the state machine does not allow."""


class UnbalancedJournal(LedgerError):
    """Total debits and total credits differ at 2-decimal precision."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        super().__init__(
            f"Unbalanced journal: debits={total_debit}, credits={total_credit}"
        )
        self.total_debit = total_debit
        self.total_credit = total_credit


class DuplicateKey(LedgerError):
    """An account code or journal reference already exists for the tenant."""


class NotFound(LedgerError):
    """The entity does not exist within the caller's tenant."""

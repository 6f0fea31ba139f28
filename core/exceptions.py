"""Failures raised by the ledger and its record store.

Input that is malformed or out of range is rejected with Django's own
``ValidationError`` before anything is written; the classes here cover what
can go wrong once a write is attempted.
"""


class LedgerError(Exception):
    """Base class for shop ledger failures."""


class PersistenceError(LedgerError):
    """The atomic write failed and none of its changes were applied."""


class RecordNotFound(PersistenceError):
    """An operation referenced a record that does not exist."""

    def __init__(self, table, record_id):
        self.table = table
        self.record_id = record_id
        super().__init__(f"No record '{record_id}' in {table}")


class CartError(LedgerError):
    """A cart change would sell more than the product has in stock."""

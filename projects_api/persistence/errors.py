"""
Failure kinds the store adapter can produce.
Repositories raise these instead of leaking sqlite3 exceptions.
"""
from __future__ import annotations


class StoreError(Exception):
    """Base class for store adapter failures."""


class NotFoundError(StoreError):
    """A referenced record does not exist."""


class ConflictError(StoreError):
    """A unique constraint would be violated."""


class StoreUnavailableError(StoreError):
    """The underlying database failed (locked, missing, corrupt, ...)."""

"""Expense storage module."""
from .models import StoredRecord
from .interfaces import IdentityResolver, RecordStore
from .record_store import SQLiteRecordStore
from .identity import SessionIdentityResolver

__all__ = [
    "StoredRecord",
    "IdentityResolver",
    "RecordStore",
    "SQLiteRecordStore",
    "SessionIdentityResolver"
]

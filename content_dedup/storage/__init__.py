"""
Record persistence.

This package contains the record store contract, its flat-file and
in-memory implementations, and the snapshot cache placed in front of them.
"""

from .base import RecordStore, StorageError, StorageReadError, StorageWriteError
from .cache import RecordCache
from .factory import available_backends, create_store
from .json_store import JsonRecordStore
from .memory import InMemoryRecordStore

__all__ = [
    "RecordStore",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "RecordCache",
    "JsonRecordStore",
    "InMemoryRecordStore",
    "available_backends",
    "create_store",
]

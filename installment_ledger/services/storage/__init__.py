"""
Storage Services Package

Provides the abstract record store interface and its implementations.
JSON files are the default backend; Google Sheets and in-memory stores
are drop-in replacements.
"""

from installment_ledger.services.storage.interface import (
    Collection,
    CorruptCollectionError,
    RecordStore,
    StorageConnectionError,
    StorageError,
)
from installment_ledger.services.storage.json_file import JsonFileRecordStore
from installment_ledger.services.storage.memory import InMemoryRecordStore
from installment_ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
)

__all__ = [
    # Interface
    "Collection",
    "RecordStore",
    # Exceptions
    "CorruptCollectionError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
]

"""Services package."""

from installment_ledger.services.storage import (
    Collection,
    CorruptCollectionError,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStore,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "Collection",
    "CorruptCollectionError",
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "RecordStore",
    "StorageConnectionError",
    "StorageError",
]

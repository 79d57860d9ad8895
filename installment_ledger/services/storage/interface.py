"""
Abstract Storage Interface

We define an abstract interface for storage operations so that:
1. The JSON data directory can be swapped for Google Sheets
2. In-memory storage can be used for testing
3. Business logic stays decoupled from storage implementation

The interface is intentionally minimal: a collection is an ordered list of
records that is loaded whole and replaced whole. No querying, indexing or
partial updates. Every mutation in the ledger reads the full collection,
applies the change, and writes the full collection back (last writer wins).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class Collection(str, Enum):
    """
    Persisted collections and their storage keys.

    Order is significant: plans and transactions are newest first.
    """
    CUSTOMERS = "app_customers"
    PLANS = "app_plans"
    TRANSACTIONS = "app_transactions"


class RecordStore(ABC):
    """
    Abstract interface for the record store.

    Any storage implementation (JSON files, Google Sheets, memory)
    must implement these methods.
    """

    @abstractmethod
    def load(self, collection: Collection) -> list[dict[str, Any]]:
        """
        Load every record of a collection.

        Args:
            collection: The collection to read

        Returns:
            The records in stored order, or an empty list if the
            collection has never been written

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def replace_all(
        self,
        collection: Collection,
        records: list[dict[str, Any]],
    ) -> None:
        """
        Replace the full collection with a new list.

        Args:
            collection: The collection to overwrite
            records: The complete new contents, in order

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class CorruptCollectionError(StorageError):
    """A stored collection is not a JSON array of records."""
    pass

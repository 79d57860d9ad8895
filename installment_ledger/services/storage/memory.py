"""In-memory record store for tests and throwaway sessions."""

import copy
from typing import Any, Optional

from installment_ledger.services.storage.interface import Collection, RecordStore


class InMemoryRecordStore(RecordStore):
    """
    Keeps collections in a dict.

    Records are deep-copied on the way in and out so callers can never
    mutate stored state without going through replace_all.
    """

    def __init__(self, initial: Optional[dict[Collection, list[dict[str, Any]]]] = None):
        self._collections: dict[Collection, list[dict[str, Any]]] = {
            collection: copy.deepcopy(list(records))
            for collection, records in (initial or {}).items()
        }
        # Number of replace_all calls, so tests can assert no-ops don't write
        self.write_count = 0

    def load(self, collection: Collection) -> list[dict[str, Any]]:
        return copy.deepcopy(self._collections.get(collection, []))

    def replace_all(
        self,
        collection: Collection,
        records: list[dict[str, Any]],
    ) -> None:
        self._collections[collection] = copy.deepcopy(list(records))
        self.write_count += 1

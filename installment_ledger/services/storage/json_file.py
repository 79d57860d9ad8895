"""
JSON File Storage Implementation

The default backend: one `<collection>.json` file per collection inside a
data directory, each holding a JSON array. This mirrors the key-value
layout the ledger has always used, so an exported data set can be dropped
into the directory as-is.

Writes go to a temporary file first and are moved into place, so a crash
mid-write leaves the previous version of the collection intact.
"""

import json
import os
from pathlib import Path
from typing import Any, Union

from installment_ledger.services.storage.interface import (
    Collection,
    CorruptCollectionError,
    RecordStore,
    StorageError,
)


class JsonFileRecordStore(RecordStore):
    """Record store backed by a directory of JSON files."""

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, collection: Collection) -> Path:
        return self._data_dir / f"{collection.value}.json"

    def load(self, collection: Collection) -> list[dict[str, Any]]:
        path = self._path_for(collection)
        if not path.exists():
            return []

        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as e:
            raise CorruptCollectionError(
                f"Collection {collection.value} is not valid JSON: {e}"
            )
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

        if data is None:
            return []
        if not isinstance(data, list):
            raise CorruptCollectionError(
                f"Collection {collection.value} must be a JSON array, "
                f"found {type(data).__name__}"
            )
        return data

    def replace_all(
        self,
        collection: Collection,
        records: list[dict[str, Any]],
    ) -> None:
        path = self._path_for(collection)
        tmp_path = path.with_suffix(".json.tmp")

        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(records, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

"""
Google Sheets Storage Implementation

Optional backend for owners who want to see their books in a spreadsheet:
1. Non-technical users can view their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each collection lives in its own worksheet with one record per row:
column A holds the record id (for humans scanning the sheet), column B the
full record as JSON. Since the store contract is whole-collection replace,
a write clears the worksheet and rewrites every row.

TRADEOFFS:
- Not suitable for high-volume data (fine for a single shop)
- No transactions (last writer wins, same as every other backend)
"""

import json
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from installment_ledger.config import GoogleSheetsSettings, get_settings
from installment_ledger.services.storage.interface import (
    Collection,
    CorruptCollectionError,
    RecordStore,
    StorageConnectionError,
    StorageError,
)


SHEET_COLUMNS = ["id", "record_json"]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_collection_sheet(self, collection: Collection) -> gspread.Worksheet:
        """Get or create the worksheet for a collection."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(collection.value)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=collection.value,
                rows=1000,
                cols=len(SHEET_COLUMNS),
            )
            sheet.append_row(SHEET_COLUMNS)
        return sheet


class GoogleSheetsRecordStore(RecordStore):
    """
    Google Sheets implementation of the record store.

    Row order in the sheet is the collection order.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _record_to_row(self, record: dict[str, Any]) -> list[str]:
        return [
            str(record.get("id", "")),
            json.dumps(record, ensure_ascii=False),
        ]

    def _row_to_record(self, row: list[str]) -> dict[str, Any]:
        try:
            record = json.loads(row[1])
        except (IndexError, json.JSONDecodeError) as e:
            raise CorruptCollectionError(f"Unreadable row for id {row[0]!r}: {e}")
        if not isinstance(record, dict):
            raise CorruptCollectionError(f"Row for id {row[0]!r} is not a JSON object")
        return record

    @retry(
        retry=retry_if_not_exception_type(CorruptCollectionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def load(self, collection: Collection) -> list[dict[str, Any]]:
        """Read every record row (header excluded)."""
        try:
            sheet = self._client.get_collection_sheet(collection)
            all_rows = sheet.get_all_values()[1:]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to load {collection.value}: {e}")

        # Skip empty rows left behind by manual edits
        return [self._row_to_record(row) for row in all_rows if row and any(row)]

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def replace_all(
        self,
        collection: Collection,
        records: list[dict[str, Any]],
    ) -> None:
        """Clear the worksheet and write header plus one row per record."""
        rows = [SHEET_COLUMNS] + [self._record_to_row(r) for r in records]
        try:
            sheet = self._client.get_collection_sheet(collection)
            sheet.clear()
            sheet.update(range_name="A1", values=rows, value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write {collection.value}: {e}")

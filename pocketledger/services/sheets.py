"""
Google Sheets Mirror

DESIGN DECISION: Google Sheets is an optional MIRROR, not the store.
Each new transaction is appended as one human-readable row so the user
can browse and chart their spending in Sheets. The local store stays the
source of truth; a failed append is logged and forgotten.

TRADEOFFS:
- Append-only: edits and deletes are not mirrored
- gspread is synchronous; calls run off the event loop in a worker thread
"""

import asyncio
import threading
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from pocketledger.config import GoogleSheetsSettings, get_settings
from pocketledger.models.transaction import TransactionType, serialize_amount
from pocketledger.services.notifications import NotificationSink, TransactionAdded
from pocketledger.services.storage.interface import ConnectionError, StorageError


SHEET_COLUMNS = ["Ngày", "Loại", "Danh mục", "Số tiền", "Ghi chú", "Tháng", "Năm"]

TYPE_LABELS = {
    TransactionType.INCOME: "Thu nhập",
    TransactionType.EXPENSE: "Chi tiêu",
}


def payload_to_row(payload: TransactionAdded) -> list:
    """Convert a notification payload to a spreadsheet row."""
    return [
        payload.date.strftime("%d/%m/%Y"),
        TYPE_LABELS[payload.type],
        payload.category_name,
        serialize_amount(payload.amount),
        payload.note,
        payload.date.month,
        payload.date.year,
    ]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._worksheet: Optional[gspread.Worksheet] = None
        # Sink deliveries run on several worker threads; set-up happens once
        self._lock = threading.RLock()
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
        with self._lock:
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
                    raise ConnectionError(
                        f"Google credentials file not found: {self._settings.credentials_path}"
                    )
                except Exception as e:
                    raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

            return self._client

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def get_worksheet(self) -> gspread.Worksheet:
        """Get or create the transactions worksheet (with header row)."""
        with self._lock:
            if self._worksheet is None:
                client = self.connect()
                try:
                    spreadsheet = client.open_by_key(self._settings.spreadsheet_id)
                except gspread.SpreadsheetNotFound:
                    raise ConnectionError(
                        f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                    )
                try:
                    sheet = spreadsheet.worksheet(self._settings.worksheet_name)
                except gspread.WorksheetNotFound:
                    sheet = spreadsheet.add_worksheet(
                        title=self._settings.worksheet_name,
                        rows=1000,
                        cols=len(SHEET_COLUMNS),
                    )
                    sheet.append_row(SHEET_COLUMNS)
                self._worksheet = sheet
            return self._worksheet

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def append_row(self, row: list) -> None:
        sheet = self.get_worksheet()
        sheet.append_row(row, value_input_option="USER_ENTERED")


class GoogleSheetsSync(NotificationSink):
    """Appends every new transaction to the configured worksheet."""

    name = "google_sheets"

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    async def handle(self, payload: TransactionAdded) -> None:
        if not self._client.is_configured:
            raise ConnectionError("Google Sheets sync is not configured")
        row = payload_to_row(payload)
        try:
            await asyncio.to_thread(self._client.append_row, row)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to mirror transaction: {e}")

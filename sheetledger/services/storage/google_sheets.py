"""
Google Sheets Storage Implementation

DESIGN DECISION: One Google Sheets spreadsheet is one ledger.
1. Household members can open the spreadsheet and read their data
2. No database to host
3. Sharing a ledger is sharing a spreadsheet

TRADEOFFS:
- No transactions across row operations (last write wins)
- No query facilities used - every list is a full range read,
  filtered in Python
- No retries: a failure is reported once to the caller

Unlike a service-account setup, every request brings the caller's own
OAuth2 access token, so a client is built per request and never shared.
"""

from typing import Any, Optional, Sequence

import gspread
import structlog
from google.oauth2.credentials import Credentials

from sheetledger.config import get_settings
from sheetledger.services.storage.interface import (
    REQUIRED_TABS,
    TAB_HEADERS,
    Rows,
    SchemaResult,
    StoreConnectionError,
    StoreError,
    TabularStore,
    header_range,
)


logger = structlog.get_logger(__name__)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Authenticates with a caller-supplied OAuth2 access token and opens
    one spreadsheet by key.
    """

    def __init__(
        self,
        access_token: str,
        spreadsheet_id: str,
        spreadsheet: Optional[gspread.Spreadsheet] = None,
    ):
        self._access_token = access_token
        self._spreadsheet_id = spreadsheet_id
        self._client: Optional[gspread.Client] = None
        self._spreadsheet = spreadsheet

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheet_id

    def connect(self) -> gspread.Client:
        """
        Build an authorized gspread client.

        The token is used as-is; refreshing it is the identity
        provider's job.
        """
        if self._client is None:
            try:
                credentials = Credentials(token=self._access_token)
                self._client = gspread.authorize(credentials)
            except Exception as e:
                raise StoreConnectionError(
                    f"Failed to connect to Google Sheets: {e}",
                    operation="connect",
                )

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the spreadsheet this client was opened for."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(self._spreadsheet_id)
            except gspread.SpreadsheetNotFound:
                raise StoreConnectionError(
                    f"Spreadsheet not found: {self._spreadsheet_id}",
                    operation="open",
                )
            except Exception as e:
                raise StoreConnectionError(
                    f"Failed to open spreadsheet {self._spreadsheet_id}: {e}",
                    operation="open",
                )
        return self._spreadsheet


class GoogleSheetsStore(TabularStore):
    """
    Google Sheets implementation of the tabular store.

    All four primitives map one-to-one onto the Sheets values API
    (values.get / append / update / clear).
    """

    def __init__(self, client: GoogleSheetsClient):
        self._client = client
        self._settings = get_settings().google_sheets

    @property
    def spreadsheet_id(self) -> str:
        return self._client.spreadsheet_id

    def _write_params(self) -> dict:
        return {"valueInputOption": self._settings.value_input_option}

    @staticmethod
    def _as_cells(rows: Sequence[Sequence[Any]]) -> list[list[Any]]:
        return [list(row) for row in rows]

    def read(self, range_: str) -> Rows:
        """Read all rows of a range as raw cell strings."""
        try:
            spreadsheet = self._client.get_spreadsheet()
            response = spreadsheet.values_get(range_)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to read {range_}: {e}", "read", range_)

        values = response.get("values") or []
        return [["" if cell is None else str(cell) for cell in row] for row in values]

    def append(self, range_: str, rows: Sequence[Sequence[Any]]) -> None:
        """Append rows after the existing content of the tab."""
        try:
            spreadsheet = self._client.get_spreadsheet()
            spreadsheet.values_append(
                range_,
                params=self._write_params(),
                body={"values": self._as_cells(rows)},
            )
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to append to {range_}: {e}", "append", range_)

    def update(self, range_: str, rows: Sequence[Sequence[Any]]) -> None:
        """Overwrite the cells at exactly this range."""
        try:
            spreadsheet = self._client.get_spreadsheet()
            spreadsheet.values_update(
                range_,
                params=self._write_params(),
                body={"values": self._as_cells(rows)},
            )
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to update {range_}: {e}", "update", range_)

    def clear(self, range_: str) -> None:
        """Erase values in a range, keeping the tab."""
        try:
            spreadsheet = self._client.get_spreadsheet()
            spreadsheet.values_clear(range_)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to clear {range_}: {e}", "clear", range_)

    def _existing_tabs(self) -> set[str]:
        try:
            spreadsheet = self._client.get_spreadsheet()
            metadata = spreadsheet.fetch_sheet_metadata()
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to list tabs: {e}", "list_tabs")

        return {
            sheet.get("properties", {}).get("title")
            for sheet in metadata.get("sheets", [])
        }

    def _create_tabs(self, titles: list[str]) -> None:
        requests = [
            {
                "addSheet": {
                    "properties": {
                        "title": title,
                        "gridProperties": {
                            "rowCount": self._settings.new_tab_rows,
                            "columnCount": self._settings.new_tab_columns,
                        },
                    }
                }
            }
            for title in titles
        ]
        try:
            spreadsheet = self._client.get_spreadsheet()
            spreadsheet.batch_update({"requests": requests})
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to create tabs {titles}: {e}", "create_tabs")

    def ensure_schema(self) -> SchemaResult:
        """
        Create missing tabs, then write headers into empty first rows.

        Tabs are created in a single batch update. A header is written
        only when row 1 of the tab reads back empty, so a second call
        on a provisioned spreadsheet only reads.
        """
        existing = self._existing_tabs()
        to_create = [tab for tab in REQUIRED_TABS if tab not in existing]

        if to_create:
            self._create_tabs(to_create)
            logger.info(
                "tabs_created",
                spreadsheet_id=self.spreadsheet_id,
                tabs=to_create,
            )

        headers_written = []
        for tab, header in TAB_HEADERS.items():
            target = header_range(tab)
            if not self.read(target):
                self.update(target, [header])
                headers_written.append(tab)

        return SchemaResult(created_tabs=to_create, headers_written=headers_written)

"""
Abstract Tabular Store Interface

DESIGN DECISION: Resource services never talk to Google Sheets directly.
They see a spreadsheet as a handful of range-addressed primitives:
read, append, update and clear. This allows us to:
1. Keep the five resource services free of gspread details
2. Use a fake spreadsheet for testing
3. Swap the backend later without touching business logic

The interface is intentionally tiny - we're not building an ORM.
Filtering, joins and aggregation all happen in Python.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Sequence

from pydantic import BaseModel, Field

# Row values as read from the store: each row is a list of raw cell strings.
Rows = list[list[str]]


# =============================================================================
# LEDGER SCHEMA - one tab per record type, header in row 1, data from row 2
# =============================================================================

USERS_TAB = "Meta_Users"
ACCOUNTS_TAB = "Meta_Accounts"
CATEGORIES_TAB = "Meta_Categories"
ALLOCATION_TAB = "Config_Allocation"
LEDGER_TAB = "Ledger"

TAB_HEADERS: dict[str, list[str]] = {
    USERS_TAB: ["UserID", "UserName", "Role", "Email"],
    ACCOUNTS_TAB: ["AccountID", "UserID", "BankName", "AccountAlias", "Balance"],
    CATEGORIES_TAB: ["CategoryID", "CategoryName", "Type"],
    ALLOCATION_TAB: ["Alloc_Type", "Target_Percent", "Description"],
    LEDGER_TAB: [
        "TxID",
        "Date",
        "UserID",
        "AccountID",
        "CategoryID",
        "Amount",
        "Description",
        "Timestamp",
    ],
}

REQUIRED_TABS = list(TAB_HEADERS)


def column_letter(index: int) -> str:
    """1-based column index to A1 letters (1 -> A, 27 -> AA)."""
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def data_range(tab: str) -> str:
    """Range holding every data row of a tab (e.g. 'Ledger!A2:H')."""
    return f"{tab}!A2:{column_letter(len(TAB_HEADERS[tab]))}"


def append_range(tab: str) -> str:
    """Range used as the append target of a tab (e.g. 'Ledger!A:H')."""
    return f"{tab}!A:{column_letter(len(TAB_HEADERS[tab]))}"


def header_range(tab: str) -> str:
    return f"{tab}!A1:{column_letter(len(TAB_HEADERS[tab]))}1"


def parse_number(value: Any) -> float:
    """
    Tolerant numeric read.

    Monetary and percentage cells are parsed as floats. Anything that
    does not parse (empty cells, "N/A", legacy junk) reads as 0 instead
    of raising.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except (TypeError, ValueError):
            return 0.0
    if math.isnan(number):
        return 0.0
    return number


class TabularStore(ABC):
    """
    Abstract interface over one logical spreadsheet.

    Any implementation (Google Sheets, in-memory, ...) must implement
    these methods. Every method raises StoreError on backend failure.
    """

    @abstractmethod
    def read(self, range_: str) -> Rows:
        """
        Read all rows of a range.

        Args:
            range_: A1 range, e.g. 'Ledger!A2:H'

        Returns:
            Rows in store order; an empty list if the range has no data.

        Raises:
            StoreError: On authentication, permission or quota failures
        """
        pass

    @abstractmethod
    def append(self, range_: str, rows: Sequence[Sequence[Any]]) -> None:
        """
        Append rows after the existing content of the target tab.

        No duplicate checking is performed.

        Raises:
            StoreError: If the append fails
        """
        pass

    @abstractmethod
    def update(self, range_: str, rows: Sequence[Sequence[Any]]) -> None:
        """
        Overwrite the cells at exactly this range.

        Raises:
            StoreError: If the update fails
        """
        pass

    @abstractmethod
    def clear(self, range_: str) -> None:
        """
        Erase all values in a range. The tab itself is kept.

        Raises:
            StoreError: If the clear fails
        """
        pass

    @abstractmethod
    def ensure_schema(self) -> "SchemaResult":
        """
        Provision the required tabs and their header rows.

        Idempotent: when every tab and header already exists, no
        mutating call is made.

        Returns:
            The tabs created and the tabs whose header row was written
        """
        pass


class SchemaResult(BaseModel):
    """Outcome of one ensure_schema() call."""

    created_tabs: list[str] = Field(default_factory=list)
    headers_written: list[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created_tabs or self.headers_written)


class StoreError(Exception):
    """
    Base exception for tabular store operations.

    Carries the operation and range that failed so the caller can log
    them without re-deriving context.
    """

    def __init__(self, message: str, operation: str = "", range_: str = ""):
        super().__init__(message)
        self.operation = operation
        self.range = range_


class StoreConnectionError(StoreError):
    """Could not open the spreadsheet (bad token, unknown id, no access)."""
    pass

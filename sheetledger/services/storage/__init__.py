"""
Storage Services Package

Provides the abstract tabular store and its Google Sheets implementation.
"""

from sheetledger.services.storage.interface import (
    ACCOUNTS_TAB,
    ALLOCATION_TAB,
    CATEGORIES_TAB,
    LEDGER_TAB,
    REQUIRED_TABS,
    TAB_HEADERS,
    USERS_TAB,
    Rows,
    SchemaResult,
    StoreConnectionError,
    StoreError,
    TabularStore,
    append_range,
    column_letter,
    data_range,
    header_range,
    parse_number,
)
from sheetledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsStore,
)

__all__ = [
    # Interface
    "Rows",
    "SchemaResult",
    "TabularStore",
    # Exceptions
    "StoreConnectionError",
    "StoreError",
    # Schema
    "ACCOUNTS_TAB",
    "ALLOCATION_TAB",
    "CATEGORIES_TAB",
    "LEDGER_TAB",
    "REQUIRED_TABS",
    "TAB_HEADERS",
    "USERS_TAB",
    "append_range",
    "column_letter",
    "data_range",
    "header_range",
    "parse_number",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsStore",
]

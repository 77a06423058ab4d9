"""Services package."""

from sheetledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsStore,
    SchemaResult,
    StoreConnectionError,
    StoreError,
    TabularStore,
)

__all__ = [
    "GoogleSheetsClient",
    "GoogleSheetsStore",
    "SchemaResult",
    "StoreConnectionError",
    "StoreError",
    "TabularStore",
]

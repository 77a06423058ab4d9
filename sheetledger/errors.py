"""
Request-level error taxonomy.

Every failure that reaches the HTTP boundary is one of these. Each
carries the status code it maps to; the web layer turns them into
`{"error": message}` responses.

Unresolvable ids during a join are NOT errors: the aggregation layer
skips those records silently.
"""

from typing import Iterable, Optional

from sheetledger.services.storage import StoreError


class LedgerError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(LedgerError):
    """No principal or no access token on the request."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", reason: str = ""):
        super().__init__(message)
        self.reason = reason or message


class ValidationError(LedgerError):
    """
    Missing or malformed required input.

    `fields` holds the wire names (camelCase) of every offending field.
    """

    status_code = 400

    def __init__(self, message: str, fields: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])

    @classmethod
    def missing(cls, fields: Iterable[str]) -> "ValidationError":
        fields = list(fields)
        noun = "field" if len(fields) == 1 else "fields"
        return cls(f"Missing required {noun}: {', '.join(fields)}", fields)


class UpstreamStoreError(LedgerError):
    """The spreadsheet backend failed. Never retried."""

    status_code = 500

    def __init__(self, message: str, cause: Optional[StoreError] = None):
        super().__init__(message)
        self.cause = cause

    @property
    def operation(self) -> str:
        return self.cause.operation if self.cause else ""

    @property
    def range(self) -> str:
        return self.cause.range if self.cause else ""

"""Payload validation package."""

from sheetledger.validation.validator import (
    PayloadValidator,
    is_blank,
    missing_fields,
    require_fields,
)

__all__ = ["PayloadValidator", "is_blank", "missing_fields", "require_fields"]

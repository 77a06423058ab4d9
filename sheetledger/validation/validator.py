"""
Two-Stage Payload Validation

STAGE 1 - PRESENCE:
- Every required field must be present and non-empty
- Empty strings and null count as missing
- Some fields only need to be defined (amount=0 is a valid amount)

STAGE 2 - SCHEMA:
- The payload is parsed into its pydantic create-model
- Type errors (e.g. a non-numeric amount) are reported per field

WHY TWO STAGES:
1. A missing field gets a "missing" message naming it, not a type error
2. Stage 2 only runs on payloads that have everything

IMPORTANT: Validation runs before any write. A payload that fails
here never reaches the spreadsheet.
"""

from typing import Any, Iterable, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from sheetledger.errors import ValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)


def is_blank(value: Any) -> bool:
    """True for values that count as "not supplied"."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def missing_fields(
    payload: Mapping[str, Any],
    required: Iterable[str],
    defined_only: Iterable[str] = (),
) -> list[str]:
    """
    Stage 1: names of required fields that are absent.

    Fields listed in `defined_only` are missing only when absent or null;
    falsy values such as 0 are accepted for them.
    """
    defined_only = set(defined_only)
    missing = []
    for name in required:
        value = payload.get(name)
        if name in defined_only:
            if value is None:
                missing.append(name)
        elif is_blank(value):
            missing.append(name)
    return missing


def require_fields(
    payload: Mapping[str, Any],
    required: Iterable[str],
    defined_only: Iterable[str] = (),
) -> None:
    """Raise ValidationError naming every missing field."""
    missing = missing_fields(payload, required, defined_only)
    if missing:
        raise ValidationError.missing(missing)


def _error_fields(error: PydanticValidationError) -> list[str]:
    fields = []
    for item in error.errors():
        loc = item.get("loc") or ()
        name = str(loc[0]) if loc else "payload"
        if name not in fields:
            fields.append(name)
    return fields


class PayloadValidator:
    """
    Validates a raw JSON payload against one create-model.

    Usage:
        validator = PayloadValidator(
            NewTransaction,
            required=["date", "userId", "accountId", "categoryId", "amount"],
            defined_only=["amount"],
        )
        new_tx = validator.validate(payload)
    """

    def __init__(
        self,
        model: Type[ModelT],
        required: Iterable[str],
        defined_only: Iterable[str] = (),
    ):
        self._model = model
        self._required = list(required)
        self._defined_only = list(defined_only)

    @property
    def required(self) -> list[str]:
        return list(self._required)

    @property
    def defined_only(self) -> list[str]:
        return list(self._defined_only)

    def validate(self, payload: Optional[Mapping[str, Any]]) -> ModelT:
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be a JSON object", ["payload"])

        # Stage 1: presence
        require_fields(payload, self._required, self._defined_only)

        # Stage 2: schema
        try:
            return self._model.model_validate(dict(payload))
        except PydanticValidationError as e:
            fields = _error_fields(e)
            raise ValidationError(f"Invalid value for: {', '.join(fields)}", fields)

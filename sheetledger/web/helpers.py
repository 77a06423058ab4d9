"""Request helpers shared by the blueprints."""

from typing import Any, Iterable, Optional

from flask import current_app, g, request

from sheetledger.audit import AuditLogger
from sheetledger.auth import current_session
from sheetledger.errors import ValidationError
from sheetledger.orchestrator import LedgerWorkspace
from sheetledger.validation import is_blank, missing_fields


def json_body() -> dict:
    """The request's JSON object; an empty dict when there is no body."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", ["payload"])
    return body


def query_arg(name: str) -> Optional[str]:
    """A query-string argument, with empty values treated as absent."""
    value = request.args.get(name)
    return None if is_blank(value) else value.strip()


def workspace_for(spreadsheet_id: Any) -> LedgerWorkspace:
    """
    Open the ledger named by the request for the current session.

    Raises:
        ValidationError: If no spreadsheetId was given
    """
    if is_blank(spreadsheet_id) or not isinstance(spreadsheet_id, str):
        raise ValidationError.missing(["spreadsheetId"])

    context = current_session().for_spreadsheet(spreadsheet_id.strip())
    audit = getattr(g, "audit", None) or AuditLogger(correlation_id=context.correlation_id)
    return LedgerWorkspace(
        context,
        store_factory=current_app.config.get("STORE_FACTORY"),
        audit_logger=audit,
    )


def workspace_for_body(
    body: dict,
    required: Iterable[str] = (),
    defined_only: Iterable[str] = (),
) -> LedgerWorkspace:
    """
    Open the ledger named by a JSON body, after checking the body's own
    required fields.

    spreadsheetId and every other missing field are reported together
    in one 400, before the store is opened.
    """
    fields = ["spreadsheetId", *required]
    missing = missing_fields(body, fields, defined_only)
    if missing:
        error = ValidationError.missing(missing)
        audit = getattr(g, "audit", None)
        if audit is not None:
            audit.log_validation_failed("payload", error.fields, error.message)
        raise error
    return workspace_for(body["spreadsheetId"])


"""Ledger (transaction) endpoints."""

from flask import Blueprint, Response, jsonify, request

from sheetledger.auth import require_session
from sheetledger.orchestrator import current_month
from sheetledger.resources import LedgerService
from sheetledger.web.helpers import (
    json_body,
    query_arg,
    workspace_for,
    workspace_for_body,
)


ledger_bp = Blueprint("ledger", __name__, url_prefix="/ledger")


@ledger_bp.route("", methods=["GET"])
@require_session
def list_transactions():
    workspace = workspace_for(request.args.get("spreadsheetId"))
    transactions = workspace.ledger.list(
        user_id=query_arg("userId"),
        month=query_arg("month"),
    )
    return jsonify({"transactions": [t.to_wire() for t in transactions]})


@ledger_bp.route("", methods=["POST"])
@require_session
def create_transaction():
    body = json_body()
    workspace = workspace_for_body(
        body,
        LedgerService.validator.required,
        LedgerService.validator.defined_only,
    )
    transaction = workspace.ledger.create(body)
    return jsonify({"success": True, "transaction": transaction.to_wire()})


@ledger_bp.route("/export", methods=["GET"])
@require_session
def export_transactions():
    workspace = workspace_for(request.args.get("spreadsheetId"))
    month = query_arg("month") or current_month()
    return Response(
        workspace.export_csv(month),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=ledger_{month}.csv"},
    )

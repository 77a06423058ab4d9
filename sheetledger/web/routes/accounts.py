"""Account endpoints."""

from flask import Blueprint, jsonify, request

from sheetledger.auth import require_session
from sheetledger.resources import AccountService
from sheetledger.web.helpers import (
    json_body,
    query_arg,
    workspace_for,
    workspace_for_body,
)


accounts_bp = Blueprint("accounts", __name__, url_prefix="/accounts")


@accounts_bp.route("", methods=["GET"])
@require_session
def list_accounts():
    workspace = workspace_for(request.args.get("spreadsheetId"))
    accounts = workspace.accounts.list(user_id=query_arg("userId"))
    return jsonify({"accounts": [a.to_wire() for a in accounts]})


@accounts_bp.route("", methods=["POST"])
@require_session
def create_account():
    body = json_body()
    workspace = workspace_for_body(body, AccountService.validator.required)
    account = workspace.accounts.create(body)
    return jsonify({"success": True, "account": account.to_wire()})

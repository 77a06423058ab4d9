"""Spreadsheet provisioning endpoint."""

from flask import Blueprint, jsonify

from sheetledger.auth import require_session
from sheetledger.web.helpers import json_body, workspace_for_body


sheets_bp = Blueprint("sheets", __name__, url_prefix="/sheets")


@sheets_bp.route("/init", methods=["POST"])
@require_session
def init_sheets():
    body = json_body()
    workspace = workspace_for_body(body)
    result = workspace.initialize()
    return jsonify({
        "success": True,
        "message": "Sheets initialized successfully",
        "createdTabs": result.created_tabs,
    })

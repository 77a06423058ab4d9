"""Dashboard endpoints: aggregates computed from freshly read tabs."""

from flask import Blueprint, jsonify, request

from sheetledger.auth import require_session
from sheetledger.errors import ValidationError
from sheetledger.web.helpers import query_arg, workspace_for


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


@dashboard_bp.route("/combined", methods=["GET"])
@require_session
def combined():
    workspace = workspace_for(request.args.get("spreadsheetId"))
    dashboard = workspace.combined_dashboard(month=query_arg("month"))
    return jsonify(dashboard.to_wire())


@dashboard_bp.route("/personal", methods=["GET"])
@require_session
def personal():
    workspace = workspace_for(request.args.get("spreadsheetId"))
    user_id = query_arg("userId")
    if not user_id:
        raise ValidationError.missing(["userId"])
    dashboard = workspace.personal_dashboard(user_id, month=query_arg("month"))
    return jsonify(dashboard.to_wire())

"""User endpoints."""

from flask import Blueprint, jsonify, request

from sheetledger.auth import require_session
from sheetledger.resources import UserService
from sheetledger.web.helpers import json_body, workspace_for, workspace_for_body


users_bp = Blueprint("users", __name__, url_prefix="/users")


@users_bp.route("", methods=["GET"])
@require_session
def list_users():
    workspace = workspace_for(request.args.get("spreadsheetId"))
    return jsonify({"users": [u.to_wire() for u in workspace.users.list()]})


@users_bp.route("", methods=["POST"])
@require_session
def create_user():
    body = json_body()
    workspace = workspace_for_body(body, UserService.validator.required)
    user = workspace.users.create(body)
    return jsonify({"success": True, "user": user.to_wire()})

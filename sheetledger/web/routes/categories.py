"""Category endpoints."""

from flask import Blueprint, jsonify, request

from sheetledger.auth import require_session
from sheetledger.resources import CategoryService
from sheetledger.web.helpers import json_body, workspace_for, workspace_for_body


categories_bp = Blueprint("categories", __name__, url_prefix="/categories")


@categories_bp.route("", methods=["GET"])
@require_session
def list_categories():
    workspace = workspace_for(request.args.get("spreadsheetId"))
    return jsonify({"categories": [c.to_wire() for c in workspace.categories.list()]})


@categories_bp.route("", methods=["POST"])
@require_session
def create_category():
    body = json_body()
    workspace = workspace_for_body(body, CategoryService.validator.required)
    category = workspace.categories.create(body)
    return jsonify({"success": True, "category": category.to_wire()})

"""
Allocation endpoints.

POST /allocation replaces the whole collection as sent.
POST /allocation/edit changes one bucket and clamps it so the total
stays at or below 100, then saves the collection.
"""

from flask import Blueprint, jsonify, request

from sheetledger.auth import require_session
from sheetledger.web.helpers import json_body, workspace_for, workspace_for_body


allocation_bp = Blueprint("allocation", __name__, url_prefix="/allocation")


@allocation_bp.route("", methods=["GET"])
@require_session
def list_allocations():
    workspace = workspace_for(request.args.get("spreadsheetId"))
    return jsonify({"allocations": [a.to_wire() for a in workspace.allocations.list()]})


@allocation_bp.route("", methods=["POST"])
@require_session
def replace_allocations():
    body = json_body()
    workspace = workspace_for_body(body, ["allocations"], defined_only=["allocations"])
    allocations = workspace.allocations.replace_all(body.get("allocations"))
    return jsonify({
        "success": True,
        "allocations": [a.to_wire() for a in allocations],
    })


@allocation_bp.route("/edit", methods=["POST"])
@require_session
def edit_allocation():
    body = json_body()
    workspace = workspace_for_body(
        body,
        ["index", "targetPercent"],
        defined_only=["index", "targetPercent"],
    )
    allocations = workspace.allocations.edit(body["index"], body.get("targetPercent"))
    return jsonify({
        "success": True,
        "allocations": [a.to_wire() for a in allocations],
    })

"""
Session endpoints.

The identity provider itself is external: whatever completed the OAuth2
flow posts the resulting user and access token here, and they are kept
in Flask's signed session cookie.
"""

from flask import Blueprint, jsonify

from sheetledger.auth import end_session, start_session
from sheetledger.validation import require_fields
from sheetledger.web.helpers import json_body


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/session", methods=["POST"])
def login():
    body = json_body()
    require_fields(body, ["accessToken", "user"])
    start_session(body["user"], body["accessToken"])
    return jsonify({"success": True})


@auth_bp.route("/session", methods=["DELETE"])
def logout():
    end_session()
    return jsonify({"success": True})

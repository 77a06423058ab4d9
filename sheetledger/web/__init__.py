"""
Flask application for SheetLedger

Every resource endpoint is a thin, stateless shim:
session gate -> resource service -> Google Sheets -> JSON.

All errors are caught here, at the request boundary, and turned into
`{"error": "..."}` with 401, 400 or 500. No partial-success responses.
"""

from typing import Optional

import structlog
from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

from sheetledger.audit import AuditLogger, configure_logging, create_correlation_id
from sheetledger.config import get_settings
from sheetledger.errors import LedgerError
from sheetledger.orchestrator import StoreFactory, google_sheets_store
from sheetledger.web.routes import BLUEPRINTS


logger = structlog.get_logger(__name__)


def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(LedgerError)
    def handle_ledger_error(error: LedgerError):
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        audit = getattr(g, "audit", None)
        if audit is not None:
            audit.log_error(type(error).__name__, str(error))
        logger.exception("unhandled_error")
        return jsonify({"error": "Internal server error"}), 500


def create_app(
    store_factory: Optional[StoreFactory] = None,
    config: Optional[dict] = None,
) -> Flask:
    """
    Application factory.

    Args:
        store_factory: Builds a tabular store from (access_token,
                      spreadsheet_id). Defaults to Google Sheets.
        config: Extra Flask config, applied last.
    """
    settings = get_settings().app
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["DEBUG"] = settings.debug_mode
    app.config["STORE_FACTORY"] = store_factory or google_sheets_store
    if config:
        app.config.update(config)

    # Keep aggregate dicts (e.g. expenseByCategory) in insertion order
    app.json.sort_keys = False

    @app.before_request
    def bind_request_context():
        g.correlation_id = create_correlation_id()
        g.audit = AuditLogger(correlation_id=g.correlation_id)

    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    _register_error_handlers(app)
    return app


__all__ = ["create_app"]

"""
HTTP entry point for SheetLedger

Run locally:
    python app/main.py

Or with the Flask CLI:
    flask --app app.main run

Configuration comes from the environment / .env (see sheetledger.config).
"""

import os

from sheetledger.config import get_settings, validate_all_settings
from sheetledger.web import create_app


app = create_app()


def main():
    """Check configuration, then serve with Flask's development server."""
    status = validate_all_settings()
    for key, value in status.items():
        if key.endswith("_error"):
            app.logger.warning("configuration problem: %s", value)

    settings = get_settings().app
    app.run(
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "5000")),
        debug=settings.debug_mode,
    )


if __name__ == "__main__":
    main()

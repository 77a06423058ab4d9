"""HTTP blueprints, one per resource."""

from sheetledger.web.routes.accounts import accounts_bp
from sheetledger.web.routes.allocation import allocation_bp
from sheetledger.web.routes.auth import auth_bp
from sheetledger.web.routes.categories import categories_bp
from sheetledger.web.routes.dashboard import dashboard_bp
from sheetledger.web.routes.ledger import ledger_bp
from sheetledger.web.routes.sheets import sheets_bp
from sheetledger.web.routes.users import users_bp

BLUEPRINTS = [
    auth_bp,
    sheets_bp,
    users_bp,
    accounts_bp,
    categories_bp,
    allocation_bp,
    ledger_bp,
    dashboard_bp,
]

__all__ = ["BLUEPRINTS"]

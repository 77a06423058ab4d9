"""
Orchestrator for SheetLedger

Ties one request's SessionContext to a tabular store and the five
resource services, and defines the flows that span several services
(schema provisioning, dashboards, CSV export).

DESIGN DECISION: Everything here is built per request.
- The store is opened with the caller's own access token
- Nothing is cached between requests
- Every service shares the request's AuditLogger, so all events of a
  request carry one correlation id
"""

from datetime import date
from typing import Callable, Optional

from sheetledger.aggregation import (
    combined_dashboard,
    personal_dashboard,
    transactions_to_csv,
)
from sheetledger.audit import AuditLogger
from sheetledger.auth import SessionContext
from sheetledger.errors import UpstreamStoreError
from sheetledger.models.records import CombinedDashboard, PersonalDashboard
from sheetledger.resources import (
    AccountService,
    AllocationService,
    CategoryService,
    LedgerService,
    UserService,
)
from sheetledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsStore,
    SchemaResult,
    StoreError,
    TabularStore,
)


# (access_token, spreadsheet_id) -> store
StoreFactory = Callable[[str, str], TabularStore]


def google_sheets_store(access_token: str, spreadsheet_id: str) -> TabularStore:
    """Default store factory: a fresh gspread-backed store."""
    return GoogleSheetsStore(GoogleSheetsClient(access_token, spreadsheet_id))


def current_month() -> str:
    return date.today().strftime("%Y-%m")


class LedgerWorkspace:
    """
    One ledger spreadsheet, as seen by one request.

    Services are created lazily so a request that only lists users
    never builds the others.
    """

    def __init__(
        self,
        context: SessionContext,
        store_factory: Optional[StoreFactory] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        if not context.spreadsheet_id:
            raise ValueError("SessionContext has no spreadsheet_id")
        self._context = context
        self._store_factory = store_factory or google_sheets_store
        self._audit = audit_logger or AuditLogger(
            correlation_id=context.correlation_id,
        )
        self._audit.bind_spreadsheet(context.spreadsheet_id)
        self._store: Optional[TabularStore] = None
        self._services: dict = {}

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def store(self) -> TabularStore:
        if self._store is None:
            self._store = self._store_factory(
                self._context.access_token,
                self._context.spreadsheet_id,
            )
        return self._store

    def _service(self, cls):
        if cls not in self._services:
            self._services[cls] = cls(self.store, self._audit)
        return self._services[cls]

    @property
    def users(self) -> UserService:
        return self._service(UserService)

    @property
    def accounts(self) -> AccountService:
        return self._service(AccountService)

    @property
    def categories(self) -> CategoryService:
        return self._service(CategoryService)

    @property
    def allocations(self) -> AllocationService:
        return self._service(AllocationService)

    @property
    def ledger(self) -> LedgerService:
        return self._service(LedgerService)

    def initialize(self) -> SchemaResult:
        """Create missing tabs and header rows (safe to repeat)."""
        try:
            result = self.store.ensure_schema()
        except StoreError as e:
            self._audit.log_store_error(
                operation=e.operation or "ensure_schema",
                range_=e.range or None,
                error_message=str(e),
            )
            raise UpstreamStoreError("Failed to initialize sheets", cause=e) from e

        if result.changed:
            self._audit.log_schema_provisioned(
                result.created_tabs,
                result.headers_written,
            )
        return result

    def combined_dashboard(self, month: Optional[str] = None) -> CombinedDashboard:
        """Shared dashboard: the month's surplus, its split, and breakdowns."""
        month = month or current_month()
        return combined_dashboard(
            month=month,
            transactions=self.ledger.list(month=month),
            categories=self.categories.list(),
            users=self.users.list(),
            allocations=self.allocations.list(),
        )

    def personal_dashboard(
        self,
        user_id: str,
        month: Optional[str] = None,
    ) -> PersonalDashboard:
        """One user's accounts and income/expense totals."""
        return personal_dashboard(
            user_id=user_id,
            accounts=self.accounts.list(user_id=user_id),
            transactions=self.ledger.list(user_id=user_id, month=month),
            categories=self.categories.list(),
            month=month,
        )

    def export_csv(self, month: Optional[str] = None) -> str:
        """The month's transactions as CSV with user and category names."""
        return transactions_to_csv(
            self.ledger.list(month=month),
            self.categories.list(),
            self.users.list(),
        )

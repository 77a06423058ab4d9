"""
Audit Logger

DESIGN DECISION: Every write and every failure is logged as a typed
AuditEvent. This provides:
1. Traceability of who wrote what to which spreadsheet
2. Debugging of backend failures (operation + range are always logged)
3. Correlation of all events of one HTTP request

The audit logger:
- Only writes to the structured log (the ledger spreadsheet has no audit tab)
- Never raises - a logging failure must not fail the request
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from sheetledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog once per process.

    Later calls only adjust the level.
    """
    global _configured

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)

    if _configured:
        return

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


class AuditLogger:
    """
    Central audit logging service.

    One instance per request, bound to that request's correlation id
    and spreadsheet.
    """

    def __init__(
        self,
        correlation_id: Optional[UUID] = None,
        spreadsheet_id: Optional[str] = None,
    ):
        self._correlation_id = correlation_id or create_correlation_id()
        self._spreadsheet_id = spreadsheet_id
        self._logger = structlog.get_logger("sheetledger.audit")

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    def bind_spreadsheet(self, spreadsheet_id: Optional[str]) -> None:
        self._spreadsheet_id = spreadsheet_id

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Fills in the correlation id and spreadsheet when the builder
        did not. Returns False if the event could not be written.
        """
        if event.correlation_id is None:
            event.correlation_id = self._correlation_id
        if event.spreadsheet_id is None:
            event.spreadsheet_id = self._spreadsheet_id

        log_dict = event.to_log_dict()
        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Fall back to the stdlib logger; never fail the request
            logging.getLogger(__name__).error("audit log failed: %s", e)
            return False
        return True

    def log_record_created(self, entity_type: str, entity_id: str) -> None:
        """Log a successful append of one record."""
        self.log(AuditEventBuilder.record_created(
            entity_type=entity_type,
            entity_id=entity_id,
        ))

    def log_allocations_replaced(self, count: int, total_percent: float) -> None:
        self.log(AuditEventBuilder.allocations_replaced(
            count=count,
            total_percent=total_percent,
        ))

    def log_schema_provisioned(
        self,
        created_tabs: list[str],
        headers_written: list[str],
    ) -> None:
        self.log(AuditEventBuilder.schema_provisioned(
            created_tabs=created_tabs,
            headers_written=headers_written,
            spreadsheet_id=self._spreadsheet_id,
        ))

    def log_auth_rejected(self, reason: str, path: Optional[str] = None) -> None:
        self.log(AuditEventBuilder.auth_rejected(reason=reason, path=path))

    def log_validation_failed(
        self,
        entity_type: str,
        fields: list[str],
        message: str,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            entity_type=entity_type,
            fields=fields,
            message=message,
        ))

    def log_store_error(
        self,
        operation: str,
        range_: Optional[str],
        error_message: str,
    ) -> None:
        """Log a failed spreadsheet operation with its range."""
        self.log(AuditEventBuilder.store_error(
            operation=operation,
            range_=range_,
            error_message=error_message,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    One per HTTP request; every event of that request carries it.
    """
    return uuid4()

"""
Audit Models for SheetLedger

Every write to the ledger, every rejected request and every failure of
the spreadsheet backend produces an AuditEvent. Events are emitted to
the structured log; they are never written into the ledger spreadsheet
itself (its five-tab layout is fixed).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Writes
    RECORD_CREATED = "record_created"
    ALLOCATIONS_REPLACED = "allocations_replaced"
    SCHEMA_PROVISIONED = "schema_provisioned"

    # Rejections
    AUTH_REJECTED = "auth_rejected"
    VALIDATION_FAILED = "validation_failed"

    # Failures
    STORE_ERROR = "store_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Tab-level entity (e.g., 'account', 'transaction')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Identifier of the record this event relates to"
    )
    spreadsheet_id: Optional[str] = None

    # Correlation - one id per HTTP request
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "spreadsheet_id": self.spreadsheet_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_created(
            entity_type="account",
            entity_id=account.account_id,
            spreadsheet_id=spreadsheet_id,
            correlation_id=correlation_id,
        )
        audit_logger.log(event)
    """

    @staticmethod
    def record_created(
        entity_type: str,
        entity_id: str,
        spreadsheet_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            spreadsheet_id=spreadsheet_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} created",
        )

    @staticmethod
    def allocations_replaced(
        count: int,
        total_percent: float,
        spreadsheet_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        # Totals over 100 are allowed on direct writes, but worth a warning
        severity = AuditSeverity.WARNING if total_percent > 100 else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.ALLOCATIONS_REPLACED,
            severity=severity,
            entity_type="allocation",
            spreadsheet_id=spreadsheet_id,
            correlation_id=correlation_id,
            description=f"Allocations replaced ({count} buckets)",
            details={
                "count": count,
                "total_percent": total_percent,
            },
        )

    @staticmethod
    def schema_provisioned(
        created_tabs: list[str],
        headers_written: list[str],
        spreadsheet_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEMA_PROVISIONED,
            entity_type="spreadsheet",
            entity_id=spreadsheet_id,
            spreadsheet_id=spreadsheet_id,
            correlation_id=correlation_id,
            description=f"Schema ensured: {len(created_tabs)} tabs created",
            details={
                "created_tabs": created_tabs,
                "headers_written": headers_written,
            },
        )

    @staticmethod
    def auth_rejected(
        reason: str,
        path: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTH_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Request rejected by session gate",
            details={"reason": reason, "path": path},
        )

    @staticmethod
    def validation_failed(
        entity_type: str,
        fields: list[str],
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=f"Validation failed for {entity_type}",
            error_message=message,
            details={"fields": fields},
        )

    @staticmethod
    def store_error(
        operation: str,
        range_: Optional[str],
        error_message: str,
        spreadsheet_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_ERROR,
            severity=AuditSeverity.ERROR,
            spreadsheet_id=spreadsheet_id,
            correlation_id=correlation_id,
            description=f"Spreadsheet operation failed: {operation}",
            error_message=error_message,
            details={
                "operation": operation,
                "range": range_,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

"""
Data Models Package

This package contains all Pydantic models used in SheetLedger.
All data flowing through the system must conform to these schemas.
"""

from sheetledger.models.records import (
    Account,
    Allocation,
    AllocationShare,
    Category,
    CategoryType,
    CombinedDashboard,
    IncomeExpenseTotals,
    LedgerModel,
    NewAccount,
    NewCategory,
    NewTransaction,
    NewUser,
    PersonalDashboard,
    Transaction,
    User,
    UserComparison,
)
from sheetledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger records
    "Account",
    "Allocation",
    "Category",
    "CategoryType",
    "LedgerModel",
    "Transaction",
    "User",
    # Create payloads
    "NewAccount",
    "NewCategory",
    "NewTransaction",
    "NewUser",
    # Aggregates
    "AllocationShare",
    "CombinedDashboard",
    "IncomeExpenseTotals",
    "PersonalDashboard",
    "UserComparison",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

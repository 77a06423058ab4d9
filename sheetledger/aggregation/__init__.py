"""Aggregation package: pure functions over fetched records."""

from sheetledger.aggregation.aggregates import (
    allocation_split,
    apply_allocation_edit,
    combined_dashboard,
    expense_by_category,
    income_expense_by_user,
    index_categories,
    index_users,
    personal_dashboard,
    surplus,
    total_percent,
    totals,
)
from sheetledger.aggregation.export import EXPORT_HEADER, transactions_to_csv

__all__ = [
    "EXPORT_HEADER",
    "allocation_split",
    "apply_allocation_edit",
    "combined_dashboard",
    "expense_by_category",
    "income_expense_by_user",
    "index_categories",
    "index_users",
    "personal_dashboard",
    "surplus",
    "total_percent",
    "totals",
    "transactions_to_csv",
]

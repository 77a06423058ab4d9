"""CSV export of ledger transactions with names resolved."""

import csv
import io
from typing import Iterable

from sheetledger.aggregation.aggregates import index_categories, index_users
from sheetledger.models.records import Category, Transaction, User


EXPORT_HEADER = [
    "TxID",
    "Date",
    "User",
    "Account",
    "Category",
    "Amount",
    "Description",
    "Timestamp",
]


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else str(amount)


def transactions_to_csv(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    users: Iterable[User],
) -> str:
    """
    Render transactions as CSV, every data cell quoted.

    Unresolved users and categories export as empty cells.
    """
    category_by_id = index_categories(categories)
    user_by_id = index_users(users)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for tx in transactions:
        user = user_by_id.get(tx.user_id)
        category = category_by_id.get(tx.category_id)
        writer.writerow([
            tx.tx_id,
            tx.date,
            user.user_name if user else "",
            tx.account_id,
            category.category_name if category else "",
            _format_amount(tx.amount),
            tx.description,
            tx.timestamp,
        ])
    return buffer.getvalue()

"""
Transactions (Ledger tab).

The ledger is append-only. There is no update or delete: a wrong entry
is corrected in the spreadsheet by hand.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from sheetledger.models.records import NewTransaction, Transaction
from sheetledger.resources.base import ResourceService, cell, new_id
from sheetledger.services.storage import LEDGER_TAB, parse_number
from sheetledger.validation import PayloadValidator


def utc_timestamp() -> str:
    """Server-side creation timestamp, ISO-8601 in UTC with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LedgerService(ResourceService[Transaction]):

    tab = LEDGER_TAB
    entity = "transaction"

    # amount only has to be defined: 0 is a valid amount
    validator = PayloadValidator(
        NewTransaction,
        required=["date", "userId", "accountId", "categoryId", "amount"],
        defined_only=["amount"],
    )

    def _row_to_record(self, row: Sequence[str]) -> Transaction:
        return Transaction(
            tx_id=cell(row, 0),
            date=cell(row, 1),
            user_id=cell(row, 2),
            account_id=cell(row, 3),
            category_id=cell(row, 4),
            amount=parse_number(cell(row, 5)),
            description=cell(row, 6),
            timestamp=cell(row, 7),
        )

    def create(self, payload: Mapping[str, Any]) -> Transaction:
        new_tx = self._validate(self.validator, payload)
        transaction = Transaction(
            tx_id=new_id(),
            date=new_tx.date,
            user_id=new_tx.user_id,
            account_id=new_tx.account_id,
            category_id=new_tx.category_id,
            amount=new_tx.amount,
            description=new_tx.description,
            timestamp=utc_timestamp(),
        )
        self._append_one(
            [
                transaction.tx_id,
                transaction.date,
                transaction.user_id,
                transaction.account_id,
                transaction.category_id,
                transaction.amount,
                transaction.description,
                transaction.timestamp,
            ],
            transaction.tx_id,
        )
        return transaction

    def list(
        self,
        user_id: Optional[str] = None,
        month: Optional[str] = None,
    ) -> list[Transaction]:
        """
        Transactions in insertion order.

        `month` is matched as a literal prefix of the stored date, so
        "2024-03" matches "2024-03-15" but not "2024-3-1".
        """
        predicates = []
        if user_id:
            predicates.append(lambda t: t.user_id == user_id)
        if month:
            predicates.append(lambda t: t.date.startswith(month))
        return self._filter(self._read_records(), predicates)

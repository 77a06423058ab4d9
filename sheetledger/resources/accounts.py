"""Bank accounts (Meta_Accounts tab)."""

from typing import Any, Mapping, Optional, Sequence

from sheetledger.models.records import Account, NewAccount
from sheetledger.resources.base import ResourceService, cell, new_id
from sheetledger.services.storage import ACCOUNTS_TAB, parse_number
from sheetledger.validation import PayloadValidator


class AccountService(ResourceService[Account]):
    """
    Accounts belong to one user.

    The balance is whatever was entered at creation; recording
    transactions does not change it.
    """

    tab = ACCOUNTS_TAB
    entity = "account"

    validator = PayloadValidator(
        NewAccount,
        required=["userId", "bankName", "accountAlias"],
    )

    def _row_to_record(self, row: Sequence[str]) -> Account:
        return Account(
            account_id=cell(row, 0),
            user_id=cell(row, 1),
            bank_name=cell(row, 2),
            account_alias=cell(row, 3),
            balance=parse_number(cell(row, 4)),
        )

    def create(self, payload: Mapping[str, Any]) -> Account:
        new_account = self._validate(self.validator, payload)
        account = Account(
            account_id=new_id(),
            user_id=new_account.user_id,
            bank_name=new_account.bank_name,
            account_alias=new_account.account_alias,
            balance=new_account.balance,
        )
        self._append_one(
            [
                account.account_id,
                account.user_id,
                account.bank_name,
                account.account_alias,
                account.balance,
            ],
            account.account_id,
        )
        return account

    def list(self, user_id: Optional[str] = None) -> list[Account]:
        """All accounts, or only those owned by `user_id`."""
        predicates = []
        if user_id:
            predicates.append(lambda a: a.user_id == user_id)
        return self._filter(self._read_records(), predicates)

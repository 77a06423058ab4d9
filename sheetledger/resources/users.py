"""Users of a shared ledger (Meta_Users tab)."""

from typing import Any, Mapping, Sequence

from sheetledger.models.records import NewUser, User
from sheetledger.resources.base import ResourceService, cell, new_id
from sheetledger.services.storage import USERS_TAB
from sheetledger.validation import PayloadValidator


class UserService(ResourceService[User]):
    """Users are created by append and never updated or deleted."""

    tab = USERS_TAB
    entity = "user"

    validator = PayloadValidator(NewUser, required=["userName"])

    def _row_to_record(self, row: Sequence[str]) -> User:
        return User(
            user_id=cell(row, 0),
            user_name=cell(row, 1),
            role=cell(row, 2),
            email=cell(row, 3),
        )

    def create(self, payload: Mapping[str, Any]) -> User:
        new_user = self._validate(self.validator, payload)
        user = User(
            user_id=new_id(),
            user_name=new_user.user_name,
            role=new_user.role,
            email=new_user.email,
        )
        self._append_one(
            [user.user_id, user.user_name, user.role, user.email],
            user.user_id,
        )
        return user

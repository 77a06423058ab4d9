"""
Core Data Models for SheetLedger

These models define the schemas for every record kept in the ledger
spreadsheet and for every payload accepted by the API.

DESIGN DECISION: Python attributes are snake_case, but the JSON wire
format is camelCase (userId, accountAlias, txId, ...). Every model uses
an alias generator so `model_dump(by_alias=True)` produces the wire shape
and both spellings are accepted on input.

The spreadsheet provides no referential integrity. Relationships between
records (Transaction.category_id -> Category.category_id, ...) are purely
logical and are joined at read time.
"""

from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


def _reject_bool(v):
    """JSON true/false is not a number, even though bool is an int subclass."""
    if isinstance(v, bool):
        raise ValueError("must be a number, not a boolean")
    return v


class LedgerModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_wire(self) -> dict:
        """Dump to the JSON shape returned by the API."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# ENUMS
# =============================================================================

class CategoryType(str, Enum):
    """
    Classification of a category.

    Drives the sign of every transaction: amounts are always stored
    positive and are counted as income or expense by joining on category.
    """
    INCOME = "Income"
    EXPENSE = "Expense"


# =============================================================================
# STORED RECORDS
# =============================================================================

class User(LedgerModel):
    """A person sharing the ledger."""

    user_id: str
    user_name: str = ""
    role: str = "User"
    email: str = ""


class Account(LedgerModel):
    """
    A bank account owned by a user.

    Balance is recorded at creation only. Transactions never mutate it.
    """

    account_id: str
    user_id: str = ""
    bank_name: str = ""
    account_alias: str = ""
    balance: float = 0.0


class Category(LedgerModel):
    """
    Income or expense category.

    `type` is kept as a plain string when read back so that legacy rows
    with an unexpected value still load; only new categories are checked
    against CategoryType.
    """

    category_id: str
    category_name: str = ""
    type: str = ""

    @property
    def is_income(self) -> bool:
        return self.type == CategoryType.INCOME.value

    @property
    def is_expense(self) -> bool:
        return self.type == CategoryType.EXPENSE.value


class Allocation(LedgerModel):
    """
    A named bucket (savings, investment, ...) with a target share of
    the monthly surplus. `alloc_type` acts as the key.
    """

    alloc_type: str = ""
    target_percent: float = Field(default=0.0, allow_inf_nan=False)
    description: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("target_percent", mode="before")
    @classmethod
    def percent_not_bool(cls, v):
        return _reject_bool(v)


class Transaction(LedgerModel):
    """
    A single ledger entry.

    `amount` is always positive; whether it is income or expense comes
    from the category. `timestamp` is set by the server on creation.
    """

    tx_id: str
    date: str = ""
    user_id: str = ""
    account_id: str = ""
    category_id: str = ""
    amount: float = 0.0
    description: str = ""
    timestamp: str = ""


# =============================================================================
# CREATE PAYLOADS
# =============================================================================

class NewUser(LedgerModel):
    """Payload for POST /users."""

    user_name: str = Field(..., min_length=1)
    role: str = "User"
    email: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, v):
        return "User" if v is None else v

    @field_validator("email", mode="before")
    @classmethod
    def email_none_as_empty(cls, v):
        return "" if v is None else v


class NewAccount(LedgerModel):
    """Payload for POST /accounts."""

    user_id: str = Field(..., min_length=1)
    bank_name: str = Field(..., min_length=1)
    account_alias: str = Field(..., min_length=1)
    balance: float = Field(default=0.0, allow_inf_nan=False)

    @field_validator("balance", mode="before")
    @classmethod
    def balance_none_as_zero(cls, v):
        return 0.0 if v is None else _reject_bool(v)


class NewCategory(LedgerModel):
    """Payload for POST /categories."""

    category_name: str = Field(..., min_length=1)
    type: CategoryType


class NewTransaction(LedgerModel):
    """Payload for POST /ledger."""

    date: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    account_id: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    amount: float = Field(..., allow_inf_nan=False)
    description: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def amount_not_bool(cls, v):
        return _reject_bool(v)

    @field_validator("description", mode="before")
    @classmethod
    def description_none_as_empty(cls, v):
        return "" if v is None else v


# =============================================================================
# AGGREGATES
# =============================================================================

class IncomeExpenseTotals(LedgerModel):
    """Income, expense and surplus over one set of transactions."""

    income: float = 0.0
    expense: float = 0.0

    @property
    def surplus(self) -> float:
        return self.income - self.expense

    def to_wire(self) -> dict:
        data = super().to_wire()
        data["surplus"] = self.surplus
        return data


class AllocationShare(LedgerModel):
    """How much of the surplus one allocation bucket receives."""

    alloc_type: str
    target_percent: float
    description: str = ""
    amount: float


class UserComparison(LedgerModel):
    """Income and expense attributed to one user."""

    user_id: str
    user_name: str
    income: float = 0.0
    expense: float = 0.0


class CombinedDashboard(LedgerModel):
    """Everything the shared dashboard shows for one month."""

    month: str
    totals: IncomeExpenseTotals
    allocations: list[AllocationShare] = Field(default_factory=list)
    allocation_total_percent: float = 0.0
    expense_by_category: dict[str, float] = Field(default_factory=dict)
    users: list[UserComparison] = Field(default_factory=list)

    def to_wire(self) -> dict:
        data = super().to_wire()
        data["totals"] = self.totals.to_wire()
        data["surplus"] = self.totals.surplus
        return data


class PersonalDashboard(LedgerModel):
    """One user's accounts and income/expense summary."""

    user_id: str
    month: Optional[str] = None
    accounts: list[Account] = Field(default_factory=list)
    total_balance: float = 0.0
    totals: IncomeExpenseTotals

    def to_wire(self) -> dict:
        data = super().to_wire()
        data["totals"] = self.totals.to_wire()
        return data

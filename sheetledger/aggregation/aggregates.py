"""
Aggregation Engine

DESIGN DECISION: Aggregation is PURE. Every function here works on
record lists that were already fetched by the resource services; none
of them touches the spreadsheet.

Joins (transaction -> category, transaction -> user) go through an
id -> record index built once per call. A transaction whose category or
user does not resolve is skipped silently: it counts toward no total.
"""

from typing import Iterable, Optional, Sequence

from sheetledger.models.records import (
    Account,
    Allocation,
    AllocationShare,
    Category,
    CombinedDashboard,
    IncomeExpenseTotals,
    PersonalDashboard,
    Transaction,
    User,
    UserComparison,
)


def index_categories(categories: Iterable[Category]) -> dict[str, Category]:
    """category_id -> Category. Later duplicates win."""
    return {c.category_id: c for c in categories}


def index_users(users: Iterable[User]) -> dict[str, User]:
    return {u.user_id: u for u in users}


def totals(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> IncomeExpenseTotals:
    """Sum income and expense amounts, classified by category type."""
    by_id = index_categories(categories)
    income = 0.0
    expense = 0.0
    for tx in transactions:
        category = by_id.get(tx.category_id)
        if category is None:
            continue
        if category.is_income:
            income += tx.amount
        elif category.is_expense:
            expense += tx.amount
    return IncomeExpenseTotals(income=income, expense=expense)


def surplus(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> float:
    """Income minus expense over whatever transactions were fetched."""
    return totals(transactions, categories).surplus


def expense_by_category(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> dict[str, float]:
    """
    Expense amounts grouped by category display name.

    Keys appear in order of first occurrence. Two categories sharing a
    name share a bucket.
    """
    by_id = index_categories(categories)
    result: dict[str, float] = {}
    for tx in transactions:
        category = by_id.get(tx.category_id)
        if category is None or not category.is_expense:
            continue
        result[category.category_name] = result.get(category.category_name, 0.0) + tx.amount
    return result


def income_expense_by_user(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    users: Sequence[User],
) -> list[UserComparison]:
    """
    Income and expense per known user.

    Every user starts at zero, so users without transactions still
    appear. A transaction counts only if both its user and its category
    resolve.
    """
    category_by_id = index_categories(categories)
    stats = {
        u.user_id: UserComparison(user_id=u.user_id, user_name=u.user_name)
        for u in users
    }

    for tx in transactions:
        entry = stats.get(tx.user_id)
        category = category_by_id.get(tx.category_id)
        if entry is None or category is None:
            continue
        if category.is_income:
            entry.income += tx.amount
        elif category.is_expense:
            entry.expense += tx.amount

    return list(stats.values())


def total_percent(allocations: Iterable[Allocation]) -> float:
    return sum(a.target_percent for a in allocations)


def apply_allocation_edit(
    allocations: Sequence[Allocation],
    index: int,
    new_percent: float,
) -> list[Allocation]:
    """
    Set one bucket's target percentage, keeping the total at most 100.

    If the new total exceeds 100, ONLY the edited bucket is lowered by
    the overflow; the other buckets are untouched. This is a local
    correction, not a proportional renormalization. When the other
    buckets alone exceed 100, the edited bucket ends up negative.

    Returns a new list; the input is not modified.
    """
    if not 0 <= index < len(allocations):
        raise IndexError(f"allocation index out of range: {index}")

    updated = [a.model_copy() for a in allocations]
    updated[index].target_percent = new_percent

    total = total_percent(updated)
    if total > 100:
        updated[index].target_percent = new_percent - (total - 100)

    return updated


def allocation_split(
    allocations: Iterable[Allocation],
    surplus_amount: float,
) -> list[AllocationShare]:
    """Each bucket's share of the surplus: surplus * percent / 100."""
    return [
        AllocationShare(
            alloc_type=a.alloc_type,
            target_percent=a.target_percent,
            description=a.description,
            amount=surplus_amount * a.target_percent / 100,
        )
        for a in allocations
    ]


def combined_dashboard(
    month: str,
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    users: Sequence[User],
    allocations: Sequence[Allocation],
) -> CombinedDashboard:
    """Everything the shared dashboard shows for one month of transactions."""
    month_totals = totals(transactions, categories)
    return CombinedDashboard(
        month=month,
        totals=month_totals,
        allocations=allocation_split(allocations, month_totals.surplus),
        allocation_total_percent=total_percent(allocations),
        expense_by_category=expense_by_category(transactions, categories),
        users=income_expense_by_user(transactions, categories, users),
    )


def personal_dashboard(
    user_id: str,
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    month: Optional[str] = None,
) -> PersonalDashboard:
    """One user's accounts, their total balance, and income/expense totals."""
    own_accounts = [a for a in accounts if a.user_id == user_id]
    own_transactions = [t for t in transactions if t.user_id == user_id]
    return PersonalDashboard(
        user_id=user_id,
        month=month,
        accounts=own_accounts,
        total_balance=sum(a.balance for a in own_accounts),
        totals=totals(own_transactions, categories),
    )

"""
Tests for SheetLedger models

Test strategy:
1. Unit tests for individual components (models, validators, aggregation)
2. Integration tests for flows (against an in-memory fake spreadsheet)
3. No real API calls in tests
"""

import pytest
from pydantic import ValidationError as PydanticValidationError
from uuid import uuid4

from sheetledger.models.records import (
    Account,
    Allocation,
    Category,
    CategoryType,
    CombinedDashboard,
    IncomeExpenseTotals,
    NewAccount,
    NewCategory,
    NewTransaction,
    NewUser,
    Transaction,
)
from sheetledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestRecordModels:
    """Tests for the stored record models."""

    def test_wire_format_is_camel_case(self):
        """Test that to_wire() uses camelCase keys."""
        account = Account(
            account_id="a1",
            user_id="u1",
            bank_name="Chase",
            account_alias="Checking",
            balance=100.0,
        )
        assert account.to_wire() == {
            "accountId": "a1",
            "userId": "u1",
            "bankName": "Chase",
            "accountAlias": "Checking",
            "balance": 100.0,
        }

    def test_accepts_both_spellings(self):
        """Test that camelCase and snake_case input both populate fields."""
        by_alias = Transaction.model_validate({"txId": "t1", "categoryId": "c1"})
        by_name = Transaction(tx_id="t1", category_id="c1")
        assert by_alias == by_name

    def test_category_type_flags(self):
        """Test is_income / is_expense."""
        income = Category(category_id="c1", category_name="Salary", type="Income")
        expense = Category(category_id="c2", category_name="Rent", type="Expense")
        legacy = Category(category_id="c3", category_name="Old", type="Transfer")

        assert income.is_income and not income.is_expense
        assert expense.is_expense and not expense.is_income
        assert not legacy.is_income and not legacy.is_expense

    def test_allocation_description_none_becomes_empty(self):
        """Test that a null description reads as ''."""
        allocation = Allocation(alloc_type="Savings", target_percent=50, description=None)
        assert allocation.description == ""


class TestCreatePayloads:
    """Tests for the create-payload models."""

    def test_new_user_defaults(self):
        """Test NewUser role and email defaults."""
        user = NewUser.model_validate({"userName": "Alice", "role": None, "email": None})
        assert user.role == "User"
        assert user.email == ""

    def test_new_user_strips_whitespace(self):
        """Test that whitespace is stripped from names."""
        user = NewUser(user_name="  Alice  ")
        assert user.user_name == "Alice"

    def test_new_account_balance_defaults_to_zero(self):
        """Test that a missing or null balance is 0."""
        account = NewAccount.model_validate(
            {"userId": "u1", "bankName": "Chase", "accountAlias": "Main", "balance": None}
        )
        assert account.balance == 0.0

    def test_new_category_rejects_unknown_type(self):
        """Test that only Income and Expense are accepted on create."""
        with pytest.raises(PydanticValidationError):
            NewCategory.model_validate({"categoryName": "Moves", "type": "Transfer"})

    def test_new_category_accepts_enum_value(self):
        category = NewCategory.model_validate({"categoryName": "Salary", "type": "Income"})
        assert category.type is CategoryType.INCOME

    def test_new_transaction_rejects_non_numeric_amount(self):
        """Test that amount must be a number."""
        with pytest.raises(PydanticValidationError):
            NewTransaction.model_validate({
                "date": "2024-03-15",
                "userId": "u1",
                "accountId": "a1",
                "categoryId": "c1",
                "amount": "lots",
            })

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), "-Infinity", True])
    def test_new_transaction_rejects_non_finite_and_bool(self, amount):
        """Test that NaN, infinities and JSON booleans are not amounts."""
        with pytest.raises(PydanticValidationError):
            NewTransaction.model_validate({
                "date": "2024-03-15",
                "userId": "u1",
                "accountId": "a1",
                "categoryId": "c1",
                "amount": amount,
            })

    @pytest.mark.parametrize("balance", [float("nan"), False])
    def test_new_account_rejects_bad_balance(self, balance):
        with pytest.raises(PydanticValidationError):
            NewAccount.model_validate({
                "userId": "u1",
                "bankName": "Chase",
                "accountAlias": "Main",
                "balance": balance,
            })

    def test_allocation_rejects_infinite_percent(self):
        with pytest.raises(PydanticValidationError):
            Allocation.model_validate({"allocType": "Savings", "targetPercent": float("inf")})


class TestAggregateModels:
    """Tests for dashboard models."""

    def test_totals_surplus(self):
        """Test that surplus is income minus expense."""
        totals = IncomeExpenseTotals(income=100, expense=40)
        assert totals.surplus == 60
        assert totals.to_wire()["surplus"] == 60

    def test_combined_dashboard_wire_includes_surplus(self):
        dashboard = CombinedDashboard(
            month="2024-03",
            totals=IncomeExpenseTotals(income=10, expense=15),
        )
        wire = dashboard.to_wire()
        assert wire["surplus"] == -5
        assert wire["totals"]["surplus"] == -5
        assert wire["expenseByCategory"] == {}


class TestAuditModels:
    """Tests for audit event models."""

    def test_record_created_event(self):
        """Test AuditEventBuilder.record_created."""
        correlation_id = uuid4()
        event = AuditEventBuilder.record_created(
            entity_type="account",
            entity_id="a1",
            spreadsheet_id="sheet-1",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.RECORD_CREATED
        assert event.severity == AuditSeverity.INFO
        assert event.description == "Account created"
        assert event.correlation_id == correlation_id

    def test_allocations_over_100_is_warning(self):
        """Test that a total above 100 percent is flagged."""
        event = AuditEventBuilder.allocations_replaced(count=2, total_percent=120)
        assert event.severity == AuditSeverity.WARNING
        assert event.details["total_percent"] == 120

        ok = AuditEventBuilder.allocations_replaced(count=2, total_percent=100)
        assert ok.severity == AuditSeverity.INFO

    def test_store_error_event(self):
        event = AuditEventBuilder.store_error(
            operation="append",
            range_="Ledger!A:H",
            error_message="PERMISSION_DENIED",
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"operation": "append", "range": "Ledger!A:H"}

    def test_to_log_dict_is_serializable(self):
        """Test that to_log_dict only contains plain values."""
        event = AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            description="boom",
            correlation_id=uuid4(),
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "system_error"
        assert isinstance(log_dict["event_id"], str)
        assert isinstance(log_dict["correlation_id"], str)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""
Tests for Installment Ledger

Test strategy:
1. Unit tests for individual components (models, validators, calculator)
2. Integration tests for the ledger over an in-memory store
3. No real API calls in tests (use mocks)
"""

import pytest
from datetime import date
from decimal import Decimal

from installment_ledger.models.records import (
    Customer,
    CustomerStatus,
    InstallmentPlan,
    Payment,
    PlanStatus,
    SafeType,
    Transaction,
    TransactionType,
)
from installment_ledger.models.reports import (
    TreasuryStats,
    ValidationIssue,
    ValidationResult,
)


def _plan(**overrides) -> InstallmentPlan:
    data = dict(
        customer_id="c-1",
        customer_name="Mona",
        product_name="Washing machine",
        base_price=Decimal("10000"),
        seller_percentage=Decimal("30"),
        customer_percentage=Decimal("40"),
        total_cost_to_intermediary=Decimal("13000"),
        total_price_to_customer=Decimal("14000"),
        intermediary_profit=Decimal("1000"),
        down_payment=Decimal("2000"),
        months=10,
        monthly_installment=Decimal("1200"),
        start_date=date(2024, 1, 15),
        due_date=date(2024, 11, 15),
        remaining_balance=Decimal("12000"),
    )
    data.update(overrides)
    return InstallmentPlan(**data)


class TestCustomerModel:
    """Tests for the Customer record."""

    def test_strips_whitespace(self):
        """Test strips whitespace."""
        customer = Customer(name="  Mona  ", phone=" 0100 ")
        assert customer.name == "Mona"
        assert customer.phone == "0100"

    def test_unset_status_reads_as_average(self):
        """Test unset status reads as average."""
        customer = Customer(name="Mona", phone="0100")
        assert customer.status is None
        assert customer.classification == CustomerStatus.AVERAGE
        assert not customer.is_blocked

    def test_blocked(self):
        """Test the blocked flag follows the status."""
        customer = Customer(name="Mona", phone="0100", status=CustomerStatus.BLOCKED)
        assert customer.is_blocked

    def test_ids_are_unique(self):
        """Test ids are unique."""
        assert Customer().id != Customer().id


class TestPaymentModel:
    """Tests for the Payment record."""

    def test_rejects_non_positive_amount(self):
        """Test rejects non positive amount."""
        with pytest.raises(ValueError):
            Payment(date=date(2024, 2, 1), amount=Decimal("0"))

    def test_missing_safe_is_cash(self):
        """Test missing safe is cash."""
        payment = Payment(date=date(2024, 2, 1), amount=Decimal("100"))
        assert payment.effective_safe == SafeType.CASH

    def test_explicit_safe(self):
        """Test explicit safe."""
        payment = Payment(
            date=date(2024, 2, 1),
            amount=Decimal("100"),
            safe_type=SafeType.WALLET,
        )
        assert payment.effective_safe == SafeType.WALLET


class TestInstallmentPlanModel:
    """Tests for the InstallmentPlan record."""

    def test_defaults(self):
        """Test InstallmentPlan defaults."""
        plan = _plan()
        assert plan.status == PlanStatus.ACTIVE
        assert plan.payments == []
        assert plan.payments_total == Decimal("0")

    def test_amount_paid_includes_down_payment(self):
        """Test amount paid includes down payment."""
        plan = _plan(
            payments=[Payment(date=date(2024, 2, 15), amount=Decimal("1200"))],
            remaining_balance=Decimal("10800"),
        )
        assert plan.payments_total == Decimal("1200")
        assert plan.amount_paid == Decimal("3200")

    def test_find_payment(self):
        """Test find payment."""
        payment = Payment(date=date(2024, 2, 15), amount=Decimal("500"))
        plan = _plan(payments=[payment])
        assert plan.find_payment(payment.id) == payment
        assert plan.find_payment("missing") is None


class TestWireFormat:
    """Persisted records keep camelCase keys and numeric money."""

    def test_plan_keys_are_camel_case(self):
        """Test plan keys are camel case."""
        record = _plan().to_record()
        assert record["customerId"] == "c-1"
        assert record["totalPriceToCustomer"] == 14000
        assert record["remainingBalance"] == 12000
        assert record["startDate"] == "2024-01-15"
        assert "notes" not in record

    def test_fractional_money_is_a_float(self):
        """Test fractional money is a float."""
        record = _plan(monthly_installment=Decimal("1166.5")).to_record()
        assert record["monthlyInstallment"] == 1166.5
        assert isinstance(record["monthlyInstallment"], float)

    def test_transaction_direction_is_stored_as_type(self):
        """Test transaction direction is stored as type."""
        tx = Transaction(
            date=date(2024, 1, 1),
            amount=Decimal("50"),
            direction=TransactionType.EXPENSE,
            category="Rent",
        )
        record = tx.to_record()
        assert record["type"] == "expense"
        assert "direction" not in record

    def test_reads_legacy_records_without_safe(self):
        """Test reads legacy records without safe."""
        tx = Transaction.from_record({
            "id": "t-1",
            "date": "2023-05-01",
            "amount": 250,
            "type": "deposit",
            "category": "Installment collection",
            "relatedPlanId": "p-1",
        })
        assert tx.safe_type is None
        assert tx.effective_safe == SafeType.CASH
        assert tx.amount == Decimal("250")
        assert tx.related_plan_id == "p-1"

    def test_plan_record_round_trip(self):
        """Test plan record round trip."""
        plan = _plan(
            payments=[Payment(date=date(2024, 2, 15), amount=Decimal("1200"), safe_type=SafeType.INSTAPAY)],
            remaining_balance=Decimal("10800"),
        )
        assert InstallmentPlan.from_record(plan.to_record()) == plan


class TestReportModels:
    """Tests for derived views."""

    def test_treasury_stats_start_at_zero(self):
        """Test treasury stats start at zero."""
        stats = TreasuryStats()
        assert stats.total.balance == Decimal("0")
        assert stats.for_safe(SafeType.WALLET) is stats.wallet


class TestValidationModels:
    """Tests for validation-related models."""

    def test_validation_issue_creation(self):
        """Test validation issue creation."""
        issue = ValidationIssue(
            field="amount",
            issue_type="invalid_value",
            message="Amount must be greater than zero",
            severity="error",
        )
        assert issue.field == "amount"
        assert issue.severity == "error"

    def test_validation_issue_rejects_unknown_severity(self):
        """Test validation issue rejects unknown severity."""
        with pytest.raises(ValueError):
            ValidationIssue(
                field="x",
                issue_type="missing",
                message="m",
                severity="fatal",
            )

    def test_validation_result_with_errors(self):
        """Test validation result with errors."""
        result = ValidationResult(
            issues=[
                ValidationIssue(
                    field="customer.name",
                    issue_type="missing",
                    message="Customer name is required",
                    severity="error",
                ),
                ValidationIssue(
                    field="months",
                    issue_type="suspicious_value",
                    message="Term is zero months",
                    severity="warning",
                ),
            ]
        )
        assert result.has_errors
        assert not result.is_valid
        assert result.error_count == 1
        assert result.warnings == ["Term is zero months"]
        assert result.reason == "Customer name is required"

    def test_validation_result_without_errors(self):
        """Test validation result without errors."""
        result = ValidationResult()
        assert result.is_valid
        assert result.reason is None

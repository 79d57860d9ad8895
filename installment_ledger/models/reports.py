"""
Derived Views and Validation Models

Nothing in this module is persisted. Every value here is computed from
the stored records on demand:
- plan previews from the calculator
- treasury balances folded from the full transaction list
- per-plan payment summaries
- dashboard totals
- validation outcomes for rejected operations
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from installment_ledger.models.records import (
    InstallmentPlan,
    Money,
    Payment,
    SafeType,
)


# =============================================================================
# PLAN CALCULATION
# =============================================================================

class PlanPreview(BaseModel):
    """Figures derived from the plan-entry inputs."""

    cost_basis: Money
    total_price: Money
    profit: Money
    remaining: Money
    monthly: Money


# =============================================================================
# TREASURY
# =============================================================================

class SafeBalance(BaseModel):
    """Totals for one safe (or for all of them)."""

    balance: Money = Decimal("0")
    income: Money = Decimal("0")
    expenses: Money = Decimal("0")


class TreasuryStats(BaseModel):
    """
    Per-safe and aggregate balances.

    Always recomputed from the transaction list; never stored.
    """

    cash: SafeBalance = Field(default_factory=SafeBalance)
    instapay: SafeBalance = Field(default_factory=SafeBalance)
    wallet: SafeBalance = Field(default_factory=SafeBalance)
    total: SafeBalance = Field(default_factory=SafeBalance)

    def for_safe(self, safe: SafeType) -> SafeBalance:
        return getattr(self, safe.value)


# =============================================================================
# PLAN VIEWS
# =============================================================================

class MonthlySummary(BaseModel):
    """Payments of one plan collected in one calendar month."""

    month: str = Field(..., description="YYYY-MM label")
    total_paid: Money
    average_paid: Money
    payment_count: int = Field(ge=1)


class PaymentHistoryEntry(BaseModel):
    """A payment with its position in the plan and notional due date."""

    ordinal: int = Field(ge=1)
    payment: Payment
    due_date: date


class DashboardStats(BaseModel):
    """Portfolio totals across all plans."""

    total_plans: int = 0
    total_profit: Money = Decimal("0")
    total_revenue: Money = Decimal("0")
    total_receivables: Money = Decimal("0")
    recent_plans: list[InstallmentPlan] = Field(default_factory=list)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'exceeds_balance')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating a command before it touches storage.

    Errors block the command. Warnings are passed back to the caller
    and do not block.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == "warning"]

    @property
    def reason(self) -> Optional[str]:
        """Error messages joined into one sentence, None when valid."""
        errors = [i.message for i in self.issues if i.severity == "error"]
        return "; ".join(errors) if errors else None

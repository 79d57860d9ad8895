"""
Command Validation

Every command that writes to the books is validated before anything is
loaded for mutation. Issues come in two severities:

ERROR   - the command is rejected and nothing is written
WARNING - the command proceeds; the message is handed back to the caller

Validation NEVER silently fixes input. It reports, and the ledger either
rejects the command or records exactly what it was given.
"""

from decimal import Decimal
from typing import Optional

from installment_ledger.models.records import Customer, InstallmentPlan
from installment_ledger.models.reports import (
    PlanPreview,
    ValidationIssue,
    ValidationResult,
)


class PaymentValidator:
    """
    Preconditions for recording a payment against a plan.

    Checked in order, stopping at the first failure, so the caller gets the
    single most relevant reason:
    1. the plan exists
    2. the plan is not already fully paid
    3. the amount is a finite number greater than zero
    4. the amount does not exceed the remaining balance
    """

    def validate(
        self,
        plan: Optional[InstallmentPlan],
        amount: Decimal,
    ) -> ValidationResult:
        issue = self._first_issue(plan, amount)
        return ValidationResult(issues=[issue] if issue else [])

    def _first_issue(
        self,
        plan: Optional[InstallmentPlan],
        amount: Decimal,
    ) -> Optional[ValidationIssue]:
        if plan is None:
            return ValidationIssue(
                field="plan_id",
                issue_type="not_found",
                message="Installment plan not found",
                severity="error",
            )

        if plan.is_paid:
            return ValidationIssue(
                field="status",
                issue_type="already_paid",
                message="Cannot add payments to a fully paid plan",
                severity="error",
            )

        if not amount.is_finite() or amount <= 0:
            return ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Payment amount must be greater than zero",
                severity="error",
            )

        if amount > plan.remaining_balance:
            return ValidationIssue(
                field="amount",
                issue_type="exceeds_balance",
                message=(
                    f"Payment amount ({amount}) is greater than the "
                    f"remaining balance ({plan.remaining_balance})"
                ),
                severity="error",
            )

        return None


class PlanValidator:
    """
    Checks a new plan before it is created.

    Only missing customer details block creation. Pricing oddities are
    warnings: the calculator accepts any numbers and the owner may have
    a reason for an unusual deal.
    """

    def validate(
        self,
        customer: Customer,
        product_name: str,
        base_price: Decimal,
        months: int,
        preview: PlanPreview,
    ) -> ValidationResult:
        issues = []

        if not customer.name:
            issues.append(ValidationIssue(
                field="customer.name",
                issue_type="missing",
                message="Customer name is required",
                severity="error",
            ))

        if not customer.phone:
            issues.append(ValidationIssue(
                field="customer.phone",
                issue_type="missing",
                message="Customer phone number is required",
                severity="error",
            ))

        if not product_name:
            issues.append(ValidationIssue(
                field="product_name",
                issue_type="missing",
                message="No product label was entered",
                severity="warning",
            ))

        if base_price <= 0:
            issues.append(ValidationIssue(
                field="base_price",
                issue_type="suspicious_value",
                message="Base price is zero or negative",
                severity="warning",
            ))

        if months <= 0:
            issues.append(ValidationIssue(
                field="months",
                issue_type="suspicious_value",
                message="Term is zero months; the monthly installment will be 0",
                severity="warning",
            ))

        if preview.remaining < 0:
            issues.append(ValidationIssue(
                field="down_payment",
                issue_type="suspicious_value",
                message="Down payment is larger than the total price",
                severity="warning",
            ))

        return ValidationResult(issues=issues)


class TransactionValidator:
    """Checks a manually entered treasury movement."""

    def validate(self, amount: Decimal) -> ValidationResult:
        issues = []
        if not amount.is_finite() or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))
        return ValidationResult(issues=issues)


def get_user_friendly_summary(result: ValidationResult) -> str:
    """
    Generate a user-friendly summary of validation results.

    This is what a caller shows next to a rejected (or warned) command.
    """
    if result.is_valid and not result.warnings:
        return "✅ All checks passed."

    lines = []

    if result.has_errors:
        lines.append("❌ This cannot be saved:")
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"   • {issue.message}")

    if result.warnings:
        if lines:
            lines.append("")
        lines.append("⚠️ Please double-check:")
        for warning in result.warnings:
            lines.append(f"   • {warning}")

    return "\n".join(lines)

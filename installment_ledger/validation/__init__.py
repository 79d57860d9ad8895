"""Command validation package."""

from installment_ledger.validation.validator import (
    PaymentValidator,
    PlanValidator,
    TransactionValidator,
    get_user_friendly_summary,
)

__all__ = [
    "PaymentValidator",
    "PlanValidator",
    "TransactionValidator",
    "get_user_friendly_summary",
]

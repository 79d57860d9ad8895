"""
Financial consistency engine.

Calculator, treasury ledger, plan lifecycle and customer registry.
"""

from installment_ledger.ledger.calculator import (
    PlanDraft,
    add_months,
    compute_preview,
    installment_due_date,
    plan_due_date,
)
from installment_ledger.ledger.customers import CustomerRegistry
from installment_ledger.ledger.exceptions import (
    LedgerError,
    OperationRejectedError,
    PaymentRejectedError,
    PlanRejectedError,
    TransactionRejectedError,
)
from installment_ledger.ledger.plans import (
    PlanCreation,
    PlanManager,
    build_payment_history,
    summarize_payments_by_month,
)
from installment_ledger.ledger.treasury import (
    TreasuryLedger,
    compute_stats,
    filter_transactions,
    index_by_plan,
)

__all__ = [
    # Calculator
    "PlanDraft",
    "add_months",
    "compute_preview",
    "installment_due_date",
    "plan_due_date",
    # Components
    "CustomerRegistry",
    "PlanManager",
    "TreasuryLedger",
    "PlanCreation",
    # Pure views
    "build_payment_history",
    "compute_stats",
    "filter_transactions",
    "index_by_plan",
    "summarize_payments_by_month",
    # Exceptions
    "LedgerError",
    "OperationRejectedError",
    "PaymentRejectedError",
    "PlanRejectedError",
    "TransactionRejectedError",
]

"""
Data Models Package

This package contains all Pydantic models used by the installment ledger.
All data flowing through the system must conform to these schemas.
"""

from installment_ledger.models.records import (
    Customer,
    CustomerStatus,
    InstallmentPlan,
    LedgerRecord,
    Money,
    Payment,
    PlanStatus,
    SafeType,
    Transaction,
    TransactionType,
    new_id,
)
from installment_ledger.models.reports import (
    DashboardStats,
    MonthlySummary,
    PaymentHistoryEntry,
    PlanPreview,
    SafeBalance,
    TreasuryStats,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Records
    "Customer",
    "CustomerStatus",
    "InstallmentPlan",
    "LedgerRecord",
    "Money",
    "Payment",
    "PlanStatus",
    "SafeType",
    "Transaction",
    "TransactionType",
    "new_id",
    # Derived views
    "DashboardStats",
    "MonthlySummary",
    "PaymentHistoryEntry",
    "PlanPreview",
    "SafeBalance",
    "TreasuryStats",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]

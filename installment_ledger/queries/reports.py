"""
Portfolio Reports

Deterministic, read-only views over the stored plans for the dashboard:
totals across the book and a simple search.

Nothing here writes, and nothing here caches. Every call works from the
plan list it is given.
"""

from decimal import Decimal
from typing import Iterable, Optional

from installment_ledger.models.records import InstallmentPlan, PlanStatus
from installment_ledger.models.reports import DashboardStats


def dashboard_stats(
    plans: list[InstallmentPlan],
    recent_limit: int = 7,
) -> DashboardStats:
    """
    Sum profit, revenue and receivables over every plan.

    `recent_plans` takes the first plans of the list, which is newest
    first as stored.
    """
    zero = Decimal("0")
    return DashboardStats(
        total_plans=len(plans),
        total_profit=sum((p.intermediary_profit for p in plans), zero),
        total_revenue=sum((p.total_price_to_customer for p in plans), zero),
        total_receivables=sum((p.remaining_balance for p in plans), zero),
        recent_plans=plans[:recent_limit],
    )


def filter_plans(
    plans: Iterable[InstallmentPlan],
    search_term: Optional[str] = None,
    status: Optional[PlanStatus] = None,
) -> list[InstallmentPlan]:
    """Case-insensitive customer-name search, optionally narrowed by status."""
    term = (search_term or "").strip().lower()
    result = []
    for plan in plans:
        if term and term not in plan.customer_name.lower():
            continue
        if status is not None and plan.status != status:
            continue
        result.append(plan)
    return result


def plans_for_customer(
    plans: Iterable[InstallmentPlan],
    customer_id: str,
) -> list[InstallmentPlan]:
    return [p for p in plans if p.customer_id == customer_id]

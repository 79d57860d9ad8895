"""Portfolio report package."""

from installment_ledger.queries.reports import (
    dashboard_stats,
    filter_plans,
    plans_for_customer,
)

__all__ = ["dashboard_stats", "filter_plans", "plans_for_customer"]

"""AI Agents package."""

from installment_ledger.agents.advisory import (
    EMPTY_RESPONSE_MESSAGE,
    ERROR_MESSAGE,
    MISSING_KEY_MESSAGE,
    OFFLINE_MESSAGE,
    AdvisoryAgent,
    PlanSummary,
)

__all__ = [
    "AdvisoryAgent",
    "PlanSummary",
    "EMPTY_RESPONSE_MESSAGE",
    "ERROR_MESSAGE",
    "MISSING_KEY_MESSAGE",
    "OFFLINE_MESSAGE",
]

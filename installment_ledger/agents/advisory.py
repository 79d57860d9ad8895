"""
Advisory Agent

Asks Gemini for a short, human-readable review of a plan before it is
committed: is the margin healthy, is the monthly installment sensible,
and one line of advice for the intermediary.

BOUNDARIES:
- CAN: Comment on figures the calculator already produced
- CANNOT: Change any figure, create or block a plan
- The returned text is an opaque annotation. Nothing parses it.

The agent NEVER raises. Missing credentials, no network, a remote error or
an empty reply all resolve to a fallback sentence, so a failed advisory
can never fail the financial operation around it.
"""

from decimal import Decimal
from typing import Any, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import BaseModel

from installment_ledger.config import GeminiSettings, get_settings
from installment_ledger.ledger.calculator import PlanDraft
from installment_ledger.models.reports import PlanPreview
from installment_ledger.observability import get_logger


logger = get_logger(__name__)


OFFLINE_MESSAGE = (
    "⚠️ No internet connection.\n"
    "The ledger works fully offline, but the advisory note needs internet access."
)
MISSING_KEY_MESSAGE = "API key missing. Cannot generate analysis."
ERROR_MESSAGE = (
    "An error occurred while contacting the advisory service "
    "(check your internet connection)."
)
EMPTY_RESPONSE_MESSAGE = "No response was received from the advisory service."


# Failures that mean "we could not reach Google" rather than "Google said no"
_NETWORK_ERRORS = (
    ConnectionError,
    TimeoutError,
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.RetryError,
)


class PlanSummary(BaseModel):
    """The figures the advisor is allowed to see."""

    product_name: str
    base_price: Decimal
    seller_percentage: Decimal
    customer_percentage: Decimal
    intermediary_profit: Decimal
    down_payment: Decimal
    monthly_installment: Decimal
    months: int

    @classmethod
    def from_draft(cls, draft: PlanDraft, preview: Optional[PlanPreview] = None) -> "PlanSummary":
        preview = preview or draft.preview()
        return cls(
            product_name=draft.product_name,
            base_price=draft.base_price,
            seller_percentage=draft.seller_percentage,
            customer_percentage=draft.customer_percentage,
            intermediary_profit=preview.profit,
            down_payment=draft.down_payment,
            monthly_installment=preview.monthly,
            months=draft.months,
        )


class AdvisoryAgent:
    """
    Gemini-backed plan reviewer.

    The model is configured lazily on first use, so constructing the
    agent without an API key is fine; it just answers with the fallback.
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
        currency_label: Optional[str] = None,
    ):
        self._settings = settings or get_settings().gemini
        self._model = model
        self._currency = currency_label or get_settings().app.currency_label

    def _get_model(self) -> Any:
        """Configure Google Generative AI and build the model."""
        if self._model is None:
            genai.configure(api_key=self._settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=self._settings.model_name,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_tokens,
                }
            )
        return self._model

    def build_prompt(self, summary: PlanSummary) -> str:
        c = self._currency
        monthly = summary.monthly_installment.quantize(Decimal("0.01"))
        profit = summary.intermediary_profit.quantize(Decimal("0.01"))
        return f"""Act as an expert financial advisor to a small installment-sales intermediary.
Review the following installment plan and give a brief report in {self._settings.response_language}.

Product: {summary.product_name or "(unnamed)"}
Base price: {summary.base_price} {c}
Seller markup: {summary.seller_percentage}%
Customer markup: {summary.customer_percentage}%
Net profit for the intermediary: {profit} {c}
Down payment: {summary.down_payment} {c}
Monthly installment: {monthly} {c}
Term: {summary.months} months

Points to cover:
1. Is the profit margin good for the intermediary?
2. Does the monthly installment look reasonable relative to the price?
3. One very short piece of advice (a single line) for the intermediary.

Use ONLY the figures above. Do not invent any other numbers."""

    async def generate_advisory(self, summary: PlanSummary) -> str:
        """
        Produce the advisory note for a plan.

        Always returns text; on any failure the text is a fallback message.
        """
        if not self._settings.api_key and self._model is None:
            return MISSING_KEY_MESSAGE

        prompt = self.build_prompt(summary)

        try:
            response = await self._get_model().generate_content_async(prompt)
            text = (response.text or "").strip()
        except _NETWORK_ERRORS as e:
            logger.warning("advisory_failed", kind="network", error=str(e))
            return OFFLINE_MESSAGE
        except Exception as e:
            # Includes ValueError from .text when the reply was blocked
            logger.warning("advisory_failed", kind="remote", error=str(e))
            return ERROR_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE

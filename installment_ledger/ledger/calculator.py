"""
Plan Calculator

Pure functions: no state, no storage, no validation beyond the
zero-month guard. The same formulas produce the live preview while a plan
is being entered and the stored figures when it is committed.

    cost_basis  = base_price * (1 + seller_percentage / 100)
    total_price = base_price * (1 + customer_percentage / 100)
    profit      = total_price - cost_basis
    remaining   = total_price - down_payment
    monthly     = remaining / months   (0 when months <= 0, rounded half-up to cents)

Month arithmetic clamps to the last day of the target month:
Jan 31 + 1 month is Feb 28 (or Feb 29 in a leap year).
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Union

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field

from installment_ledger.config import AppSettings, get_settings
from installment_ledger.models.records import Money, SafeType
from installment_ledger.models.reports import PlanPreview


Number = Union[Decimal, int, float, str]

HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Convert user input to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_preview(
    base_price: Number,
    seller_percentage: Number,
    customer_percentage: Number,
    down_payment: Number,
    months: int,
) -> PlanPreview:
    """Derive cost basis, selling price, profit and schedule for a plan."""
    base = to_decimal(base_price)

    cost_basis = base * (1 + to_decimal(seller_percentage) / HUNDRED)
    total_price = base * (1 + to_decimal(customer_percentage) / HUNDRED)
    profit = total_price - cost_basis
    remaining = total_price - to_decimal(down_payment)
    if months > 0:
        monthly = (remaining / months).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        monthly = Decimal("0")

    return PlanPreview(
        cost_basis=cost_basis,
        total_price=total_price,
        profit=profit,
        remaining=remaining,
        monthly=monthly,
    )


def add_months(start: date, months: int) -> date:
    return start + relativedelta(months=months)


def plan_due_date(start: date, months: int) -> date:
    """Date of the last installment."""
    return add_months(start, months)


def installment_due_date(start: date, installment_number: int) -> date:
    """Notional due date of the Nth installment (1-based)."""
    return add_months(start, installment_number)


class PlanDraft(BaseModel):
    """
    The plan-entry inputs, before a customer is attached.

    Defaults match the entry form: 30% seller markup, 40% customer
    markup, 12 months, everything paid in and out of the cash safe.
    """

    product_name: str = ""
    base_price: Money
    seller_percentage: Money = Decimal("30")
    customer_percentage: Money = Decimal("40")
    down_payment: Money = Decimal("0")
    months: int = 12
    start_date: date = Field(default_factory=date.today)
    notes: Optional[str] = None
    purchase_safe: SafeType = SafeType.CASH
    down_payment_safe: SafeType = SafeType.CASH

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None, **fields: Any) -> "PlanDraft":
        """
        Start a draft from the configured entry-form defaults.

        Explicit fields win over DEFAULT_SELLER_PERCENTAGE,
        DEFAULT_CUSTOMER_PERCENTAGE and DEFAULT_MONTHS.
        """
        settings = settings or get_settings().app
        defaults = {
            "seller_percentage": settings.default_seller_percentage,
            "customer_percentage": settings.default_customer_percentage,
            "months": settings.default_months,
        }
        return cls(**{**defaults, **fields})

    def preview(self) -> PlanPreview:
        return compute_preview(
            self.base_price,
            self.seller_percentage,
            self.customer_percentage,
            self.down_payment,
            self.months,
        )

    @property
    def due_date(self) -> date:
        return plan_due_date(self.start_date, self.months)

"""
Core Records for Installment Ledger

These models define the persisted schemas: customers, installment plans
(with their embedded payments) and treasury transactions.

They are designed to:
1. Enforce type safety at runtime
2. Keep money exact (Decimal in memory)
3. Serialize to the established wire format (camelCase keys,
   money as JSON numbers, dates as YYYY-MM-DD)

Collections are persisted as plain JSON arrays, so every record knows how
to turn itself into a dict (`to_record`) and back (`from_record`).
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel


def _money_to_json(value: Decimal) -> Union[int, float]:
    """Whole amounts stay integers on the wire, others become floats."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Money = Annotated[
    Decimal,
    PlainSerializer(_money_to_json, return_type=Union[int, float], when_used="json"),
]


def new_id() -> str:
    """Generate a record identifier."""
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SafeType(str, Enum):
    """
    The three safes money can sit in.

    Records written before safes existed carry no safe at all;
    those are read as CASH.
    """
    CASH = "cash"
    INSTAPAY = "instapay"
    WALLET = "wallet"


class CustomerStatus(str, Enum):
    """
    Customer trust tier.

    Advisory only: BLOCKED asks the caller for confirmation before a new
    plan, no tier changes any computation.
    """
    TRUSTWORTHY = "trustworthy"
    GOOD = "good"
    AVERAGE = "average"
    BAD = "bad"
    BLOCKED = "blocked"


class PlanStatus(str, Enum):
    """Installment plan status."""
    ACTIVE = "active"
    PAID = "paid"
    OVERDUE = "overdue"  # Declared, never computed


class TransactionType(str, Enum):
    """Direction of a treasury movement."""
    DEPOSIT = "deposit"
    EXPENSE = "expense"
    WITHDRAWAL = "withdrawal"  # Declared, never produced


# =============================================================================
# BASE
# =============================================================================

class LedgerRecord(BaseModel):
    """Shared config and wire-format helpers for persisted records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dict using the persisted key names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, data: dict[str, Any]):
        """Rebuild a model from a persisted dict."""
        return cls.model_validate(data)


# =============================================================================
# CUSTOMERS
# =============================================================================

class Customer(LedgerRecord):
    """
    A person buying on installments.

    Contact fields are not enforced here; plan creation validates the
    ones it needs so the caller gets a readable reason.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(default="", max_length=200)
    phone: str = Field(default="", max_length=50)
    national_id: Optional[str] = Field(default=None, max_length=50)
    status: Optional[CustomerStatus] = Field(
        default=None,
        description="Trust tier; unset reads as average"
    )
    feedback: Optional[str] = Field(
        default=None,
        max_length=2000,
        description="Free-text notes about the customer's behaviour"
    )

    @property
    def classification(self) -> CustomerStatus:
        return self.status or CustomerStatus.AVERAGE

    @property
    def is_blocked(self) -> bool:
        return self.classification == CustomerStatus.BLOCKED


# =============================================================================
# PLANS AND PAYMENTS
# =============================================================================

class Payment(LedgerRecord):
    """
    A single installment payment.

    Owned by its plan. Immutable once created; it can only be deleted.
    """

    id: str = Field(default_factory=new_id)
    date: date
    amount: Money = Field(..., gt=0)
    notes: Optional[str] = None
    safe_type: Optional[SafeType] = Field(
        default=None,
        description="Safe the payment was deposited into"
    )

    @property
    def effective_safe(self) -> SafeType:
        return self.safe_type or SafeType.CASH


class InstallmentPlan(LedgerRecord):
    """
    An installment sale.

    The derived triple (cost, price, profit) is computed once at creation
    and stored; it is never recomputed.

    Invariants maintained by the plan manager:
    - remaining_balance == max(0, total_price_to_customer - down_payment - sum(payments))
    - status == PAID iff remaining_balance <= 0
    """

    id: str = Field(default_factory=new_id)

    # Denormalized customer reference
    customer_id: str
    customer_name: str

    product_name: str = ""

    # Pricing inputs
    base_price: Money
    seller_percentage: Money
    customer_percentage: Money

    # Derived at creation
    total_cost_to_intermediary: Money
    total_price_to_customer: Money
    intermediary_profit: Money

    down_payment: Money = Decimal("0")
    months: int
    monthly_installment: Money
    start_date: date
    due_date: date

    notes: Optional[str] = None
    ai_analysis: Optional[str] = None

    payments: list[Payment] = Field(default_factory=list)
    remaining_balance: Money
    status: PlanStatus = PlanStatus.ACTIVE

    @property
    def payments_total(self) -> Decimal:
        """Sum of all recorded installment payments."""
        return sum((p.amount for p in self.payments), Decimal("0"))

    @property
    def amount_paid(self) -> Decimal:
        """Paid so far, down payment included."""
        return self.total_price_to_customer - self.remaining_balance

    @property
    def is_paid(self) -> bool:
        return self.status == PlanStatus.PAID

    def find_payment(self, payment_id: str) -> Optional[Payment]:
        for payment in self.payments:
            if payment.id == payment_id:
                return payment
        return None


# =============================================================================
# TREASURY
# =============================================================================

class Transaction(LedgerRecord):
    """
    A cash movement in one of the safes.

    related_plan_id is a lookup hint only. Plans can be deleted while
    their transactions remain, so it is NOT guaranteed to resolve.
    """

    id: str = Field(default_factory=new_id)
    date: date
    amount: Money
    direction: TransactionType = Field(..., alias="type")
    category: str
    description: Optional[str] = None
    related_plan_id: Optional[str] = None
    safe_type: Optional[SafeType] = None

    @property
    def effective_safe(self) -> SafeType:
        return self.safe_type or SafeType.CASH

    @property
    def is_deposit(self) -> bool:
        return self.direction == TransactionType.DEPOSIT

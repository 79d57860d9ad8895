"""
Plan Lifecycle Manager

Owns every rule that changes an installment plan, and the rule that every
change to money owed is mirrored in the treasury:

    create plan     -> expense  (base price, purchase safe)
                       deposit  (down payment, if any, down-payment safe)
    add payment     -> deposit  (payment amount, payment safe)
    delete payment  -> expense  (payment amount, the payment's own safe)
    delete plan     -> nothing  (treasury history is left untouched)

The original deposit of a deleted payment is never removed. The
correction is a new offsetting expense, so the treasury keeps a complete
trail.

States are ACTIVE and PAID. OVERDUE exists in the model but nothing here
computes it; there is no date-based overdue rule.

Plans are stored newest first. Deleting a plan leaves any transaction whose
related_plan_id pointed at it dangling; that reference is not guaranteed
to resolve.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from installment_ledger.ledger.calculator import (
    Number,
    PlanDraft,
    installment_due_date,
    to_decimal,
)
from installment_ledger.ledger.customers import CustomerRegistry
from installment_ledger.ledger.exceptions import PaymentRejectedError, PlanRejectedError
from installment_ledger.ledger.treasury import (
    COLLECTION_CATEGORY,
    DOWN_PAYMENT_CATEGORY,
    PAYMENT_REVERSAL_CATEGORY,
    PURCHASE_CATEGORY,
    TreasuryLedger,
)
from installment_ledger.models.records import (
    Customer,
    CustomerStatus,
    InstallmentPlan,
    Payment,
    PlanStatus,
    SafeType,
    Transaction,
    TransactionType,
    new_id,
)
from installment_ledger.models.reports import MonthlySummary, PaymentHistoryEntry
from installment_ledger.observability import get_logger
from installment_ledger.services.storage import Collection, RecordStore
from installment_ledger.validation import PaymentValidator, PlanValidator


logger = get_logger(__name__)


class PlanCreation(BaseModel):
    """Everything written when a plan is committed."""

    plan: InstallmentPlan
    customer: Customer
    purchase_transaction: Transaction
    down_payment_transaction: Optional[Transaction] = None
    warnings: list[str] = Field(default_factory=list)


def status_for_balance(remaining_balance: Decimal) -> PlanStatus:
    return PlanStatus.PAID if remaining_balance <= 0 else PlanStatus.ACTIVE


def summarize_payments_by_month(payments: list[Payment]) -> list[MonthlySummary]:
    """
    Group payments by calendar month of payment date.

    Returns one entry per YYYY-MM with the total and average paid,
    sorted chronologically.
    """
    groups: dict[str, list[Decimal]] = defaultdict(list)
    for payment in payments:
        groups[payment.date.strftime("%Y-%m")].append(payment.amount)

    return [
        MonthlySummary(
            month=month,
            total_paid=sum(amounts, Decimal("0")),
            average_paid=sum(amounts, Decimal("0")) / len(amounts),
            payment_count=len(amounts),
        )
        for month, amounts in sorted(groups.items())
    ]


def build_payment_history(plan: InstallmentPlan) -> list[PaymentHistoryEntry]:
    """
    Number each payment by its position and pair it with a notional due date.

    The Nth payment is due N calendar months after the plan start.
    """
    return [
        PaymentHistoryEntry(
            ordinal=n,
            payment=payment,
            due_date=installment_due_date(plan.start_date, n),
        )
        for n, payment in enumerate(plan.payments, start=1)
    ]


class PlanManager:
    """
    Creates plans and applies payment changes.

    Each operation validates first, then performs read-modify-write on the
    plans collection and appends the mirrored treasury transaction(s).
    Rejected operations write nothing.
    """

    def __init__(
        self,
        store: RecordStore,
        treasury: TreasuryLedger,
        customers: CustomerRegistry,
        payment_validator: Optional[PaymentValidator] = None,
        plan_validator: Optional[PlanValidator] = None,
    ):
        self._store = store
        self._treasury = treasury
        self._customers = customers
        self._payment_validator = payment_validator or PaymentValidator()
        self._plan_validator = plan_validator or PlanValidator()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_plans(self) -> list[InstallmentPlan]:
        """All plans, newest first."""
        return [
            InstallmentPlan.from_record(r)
            for r in self._store.load(Collection.PLANS)
        ]

    def get_plan(self, plan_id: str) -> Optional[InstallmentPlan]:
        for plan in self.list_plans():
            if plan.id == plan_id:
                return plan
        return None

    def _save(self, plans: list[InstallmentPlan]) -> None:
        self._store.replace_all(
            Collection.PLANS,
            [p.to_record() for p in plans],
        )

    @staticmethod
    def _find(plans: list[InstallmentPlan], plan_id: str) -> Optional[int]:
        for idx, plan in enumerate(plans):
            if plan.id == plan_id:
                return idx
        return None

    # -------------------------------------------------------------------------
    # Create / delete plan
    # -------------------------------------------------------------------------

    def create_plan(
        self,
        draft: PlanDraft,
        customer: Customer,
        ai_analysis: Optional[str] = None,
        on: Optional[date] = None,
    ) -> PlanCreation:
        """
        Commit a new plan with its seed treasury transactions.

        Write order: customer (only if not yet registered), plan,
        purchase expense, down-payment deposit (only if down payment > 0).
        Both transactions are dated `on` (today by default).

        Raises:
            PlanRejectedError: If required customer details are missing
        """
        on = on or date.today()
        preview = draft.preview()

        result = self._plan_validator.validate(
            customer=customer,
            product_name=draft.product_name,
            base_price=draft.base_price,
            months=draft.months,
            preview=preview,
        )
        if result.has_errors:
            logger.warning("plan_rejected", customer_id=customer.id, reason=result.reason)
            raise PlanRejectedError(result)

        if self._customers.get(customer.id) is None:
            if customer.status is None:
                customer = customer.model_copy(update={"status": CustomerStatus.AVERAGE})
            self._customers.upsert(customer)

        plan = InstallmentPlan(
            id=new_id(),
            customer_id=customer.id,
            customer_name=customer.name,
            product_name=draft.product_name,
            base_price=draft.base_price,
            seller_percentage=draft.seller_percentage,
            customer_percentage=draft.customer_percentage,
            total_cost_to_intermediary=preview.cost_basis,
            total_price_to_customer=preview.total_price,
            intermediary_profit=preview.profit,
            down_payment=draft.down_payment,
            months=draft.months,
            monthly_installment=preview.monthly,
            start_date=draft.start_date,
            due_date=draft.due_date,
            notes=draft.notes,
            ai_analysis=ai_analysis or None,
            payments=[],
            remaining_balance=max(Decimal("0"), preview.remaining),
            status=status_for_balance(preview.remaining),
        )

        plans = self.list_plans()
        plans.insert(0, plan)
        self._save(plans)

        purchase = self._treasury.add_transaction(Transaction(
            date=on,
            amount=draft.base_price,
            direction=TransactionType.EXPENSE,
            category=PURCHASE_CATEGORY,
            description=f"Purchase of {plan.product_name} for {plan.customer_name}",
            related_plan_id=plan.id,
            safe_type=draft.purchase_safe,
        ))

        down_payment_tx = None
        if draft.down_payment > 0:
            down_payment_tx = self._treasury.add_transaction(Transaction(
                date=on,
                amount=draft.down_payment,
                direction=TransactionType.DEPOSIT,
                category=DOWN_PAYMENT_CATEGORY,
                description=f"Down payment for {plan.product_name} - {plan.customer_name}",
                related_plan_id=plan.id,
                safe_type=draft.down_payment_safe,
            ))

        logger.info(
            "plan_created",
            plan_id=plan.id,
            customer_id=customer.id,
            total_price=str(plan.total_price_to_customer),
            remaining_balance=str(plan.remaining_balance),
            months=plan.months,
            warnings=result.warnings,
        )

        return PlanCreation(
            plan=plan,
            customer=customer,
            purchase_transaction=purchase,
            down_payment_transaction=down_payment_tx,
            warnings=result.warnings,
        )

    def delete_plan(self, plan_id: str) -> bool:
        """
        Remove a plan outright.

        Linked transactions are NOT touched. Returns False, without
        writing, if the plan does not exist. Callers confirm with the
        user before calling this.
        """
        plans = self.list_plans()
        idx = self._find(plans, plan_id)
        if idx is None:
            return False

        del plans[idx]
        self._save(plans)
        logger.info("plan_deleted", plan_id=plan_id)
        return True

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def add_payment(
        self,
        plan_id: str,
        amount: Number,
        notes: Optional[str] = None,
        paid_on: Optional[date] = None,
        safe_type: SafeType = SafeType.CASH,
    ) -> tuple[InstallmentPlan, Transaction]:
        """
        Record a payment and deposit it into the chosen safe.

        Returns:
            (updated plan, mirrored deposit transaction)

        Raises:
            PaymentRejectedError: If the plan is missing or fully paid, or
                the amount is not positive or exceeds the remaining balance
        """
        amount = to_decimal(amount)
        plans = self.list_plans()
        idx = self._find(plans, plan_id)
        plan = plans[idx] if idx is not None else None

        result = self._payment_validator.validate(plan, amount)
        if result.has_errors:
            logger.warning(
                "payment_rejected",
                plan_id=plan_id,
                amount=str(amount),
                reason=result.reason,
            )
            raise PaymentRejectedError(result)

        payment = Payment(
            date=paid_on or date.today(),
            amount=amount,
            notes=notes or None,
            safe_type=safe_type,
        )
        new_balance = plan.remaining_balance - amount

        updated = plan.model_copy(update={
            "payments": [*plan.payments, payment],
            "remaining_balance": max(Decimal("0"), new_balance),
            "status": status_for_balance(new_balance),
        })
        plans[idx] = updated
        self._save(plans)

        description = f"Installment payment: {plan.customer_name} - {plan.product_name}"
        if notes:
            description += f" ({notes})"

        transaction = self._treasury.add_transaction(Transaction(
            date=payment.date,
            amount=amount,
            direction=TransactionType.DEPOSIT,
            category=COLLECTION_CATEGORY,
            description=description,
            related_plan_id=plan.id,
            safe_type=safe_type,
        ))

        logger.info(
            "payment_added",
            plan_id=plan.id,
            payment_id=payment.id,
            amount=str(amount),
            safe=safe_type.value,
            remaining_balance=str(updated.remaining_balance),
            status=updated.status.value,
        )
        return updated, transaction

    def delete_payment(
        self,
        plan_id: str,
        payment_id: str,
        on: Optional[date] = None,
    ) -> Optional[Transaction]:
        """
        Remove a payment and take its amount back out of the same safe.

        The remaining balance grows by the payment amount (no clamp) and the
        status is recomputed. The reversal expense is dated `on` (today by
        default), not the original payment date.

        Returns:
            The reversal transaction, or None if the plan or payment does
            not exist (nothing is written in that case)
        """
        plans = self.list_plans()
        idx = self._find(plans, plan_id)
        if idx is None:
            return None

        plan = plans[idx]
        payment = plan.find_payment(payment_id)
        if payment is None:
            return None

        new_balance = plan.remaining_balance + payment.amount
        updated = plan.model_copy(update={
            "payments": [p for p in plan.payments if p.id != payment_id],
            "remaining_balance": new_balance,
            "status": status_for_balance(new_balance),
        })
        plans[idx] = updated
        self._save(plans)

        transaction = self._treasury.add_transaction(Transaction(
            date=on or date.today(),
            amount=payment.amount,
            direction=TransactionType.EXPENSE,
            category=PAYMENT_REVERSAL_CATEGORY,
            description=f"Payment reversed: {plan.customer_name} - {plan.product_name}",
            related_plan_id=plan.id,
            safe_type=payment.effective_safe,
        ))

        logger.info(
            "payment_deleted",
            plan_id=plan.id,
            payment_id=payment_id,
            amount=str(payment.amount),
            safe=payment.effective_safe.value,
            remaining_balance=str(new_balance),
            status=updated.status.value,
        )
        return transaction

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    def monthly_summary(self, plan: InstallmentPlan) -> list[MonthlySummary]:
        return summarize_payments_by_month(plan.payments)

    def payment_history(self, plan: InstallmentPlan) -> list[PaymentHistoryEntry]:
        return build_payment_history(plan)

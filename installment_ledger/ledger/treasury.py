"""
Treasury Ledger

The treasury is the list of every cash movement across the three safes
(cash, instapay, wallet), newest first.

Balances are NEVER stored. `compute_stats` folds the full transaction list
on every read, so there is no second source of truth that could drift
from the transactions themselves.

Transactions are append-only from the ledger's point of view. The only
way one disappears is an explicit user deletion; corrections to plan
payments are recorded as new offsetting transactions instead.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from installment_ledger.ledger.calculator import Number, to_decimal
from installment_ledger.ledger.exceptions import TransactionRejectedError
from installment_ledger.models.records import SafeType, Transaction, TransactionType
from installment_ledger.models.reports import SafeBalance, TreasuryStats
from installment_ledger.observability import get_logger
from installment_ledger.services.storage import Collection, RecordStore
from installment_ledger.validation import TransactionValidator


logger = get_logger(__name__)


# Categories the ledger writes on its own
PURCHASE_CATEGORY = "Purchase of goods"
DOWN_PAYMENT_CATEGORY = "Plan down payment"
COLLECTION_CATEGORY = "Installment collection"
PAYMENT_REVERSAL_CATEGORY = "Correction - payment deleted"

# Fallbacks for manual entries left uncategorized
MANUAL_DEPOSIT_CATEGORY = "Cash deposit"
MANUAL_EXPENSE_CATEGORY = "General expenses"


def compute_stats(transactions: Iterable[Transaction]) -> TreasuryStats:
    """
    Fold transactions into per-safe and aggregate balances.

    Deposits add to income and balance. Every other direction (expense,
    and the never-produced withdrawal) adds to expenses and subtracts from
    balance. A transaction without a safe counts against cash.
    """
    stats = TreasuryStats()

    for t in transactions:
        for bucket in (stats.for_safe(t.effective_safe), stats.total):
            if t.is_deposit:
                bucket.income += t.amount
                bucket.balance += t.amount
            else:
                bucket.expenses += t.amount
                bucket.balance -= t.amount

    return stats


def filter_transactions(
    transactions: Iterable[Transaction],
    direction: Optional[TransactionType] = None,
    safe_type: Optional[SafeType] = None,
) -> list[Transaction]:
    """
    Narrow a transaction list for display.

    direction=DEPOSIT keeps deposits; any other direction keeps every
    non-deposit, matching how the stats classify money going out.
    """
    result = []
    for t in transactions:
        if direction is not None:
            if direction == TransactionType.DEPOSIT and not t.is_deposit:
                continue
            if direction != TransactionType.DEPOSIT and t.is_deposit:
                continue
        if safe_type is not None and t.effective_safe != safe_type:
            continue
        result.append(t)
    return result


def index_by_plan(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    """
    Map plan id to the transactions that reference it.

    Plan ids in the index may belong to plans that no longer exist.
    """
    index: dict[str, list[Transaction]] = defaultdict(list)
    for t in transactions:
        if t.related_plan_id:
            index[t.related_plan_id].append(t)
    return dict(index)


class TreasuryLedger:
    """
    Reads and writes the transactions collection.

    Every write loads the full collection, applies one change and
    replaces the collection.
    """

    def __init__(
        self,
        store: RecordStore,
        validator: Optional[TransactionValidator] = None,
    ):
        self._store = store
        self._validator = validator or TransactionValidator()

    def list_transactions(self) -> list[Transaction]:
        """All transactions, newest first."""
        return [
            Transaction.from_record(r)
            for r in self._store.load(Collection.TRANSACTIONS)
        ]

    def _save(self, transactions: list[Transaction]) -> None:
        self._store.replace_all(
            Collection.TRANSACTIONS,
            [t.to_record() for t in transactions],
        )

    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Prepend a transaction and persist. No amount or safe checks."""
        transactions = self.list_transactions()
        transactions.insert(0, transaction)
        self._save(transactions)

        logger.info(
            "transaction_added",
            transaction_id=transaction.id,
            direction=transaction.direction.value,
            amount=str(transaction.amount),
            safe=transaction.effective_safe.value,
            category=transaction.category,
            related_plan_id=transaction.related_plan_id,
        )
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        """
        Remove a transaction by id.

        Returns False, without writing, if no such transaction exists.
        """
        transactions = self.list_transactions()
        remaining = [t for t in transactions if t.id != transaction_id]
        if len(remaining) == len(transactions):
            return False

        self._save(remaining)
        logger.info("transaction_deleted", transaction_id=transaction_id)
        return True

    def record_manual(
        self,
        direction: TransactionType,
        amount: Number,
        safe_type: SafeType = SafeType.CASH,
        category: Optional[str] = None,
        description: Optional[str] = None,
        on: Optional[date] = None,
    ) -> Transaction:
        """
        Record a deposit or expense entered by hand (rent, top-ups, ...).

        Raises:
            TransactionRejectedError: If the amount is not positive
        """
        amount = to_decimal(amount)
        result = self._validator.validate(amount)
        if result.has_errors:
            logger.warning("transaction_rejected", reason=result.reason)
            raise TransactionRejectedError(result)

        if not category:
            category = (
                MANUAL_DEPOSIT_CATEGORY
                if direction == TransactionType.DEPOSIT
                else MANUAL_EXPENSE_CATEGORY
            )

        return self.add_transaction(Transaction(
            date=on or date.today(),
            amount=amount,
            direction=direction,
            category=category,
            description=description,
            safe_type=safe_type,
        ))

    def stats(self) -> TreasuryStats:
        """Current balances, recomputed from the stored transactions."""
        return compute_stats(self.list_transactions())

    def balance(self, safe_type: Optional[SafeType] = None) -> Decimal:
        stats = self.stats()
        bucket: SafeBalance = stats.for_safe(safe_type) if safe_type else stats.total
        return bucket.balance

    def transactions_for_plan(self, plan_id: str) -> list[Transaction]:
        return index_by_plan(self.list_transactions()).get(plan_id, [])

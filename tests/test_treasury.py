"""Tests for the treasury ledger."""

import pytest
from datetime import date
from decimal import Decimal

from installment_ledger.ledger import TransactionRejectedError
from installment_ledger.ledger.treasury import (
    MANUAL_DEPOSIT_CATEGORY,
    MANUAL_EXPENSE_CATEGORY,
    compute_stats,
    filter_transactions,
    index_by_plan,
)
from installment_ledger.models.records import SafeType, Transaction, TransactionType
from installment_ledger.services.storage import Collection


def _tx(direction, amount, safe=None, plan_id=None) -> Transaction:
    return Transaction(
        date=date(2024, 1, 1),
        amount=Decimal(str(amount)),
        direction=direction,
        category="test",
        safe_type=safe,
        related_plan_id=plan_id,
    )


class TestComputeStats:
    """The fold from transactions to balances."""

    def test_empty(self):
        """Test stats over no transactions."""
        stats = compute_stats([])
        assert stats.total.balance == Decimal("0")
        assert stats.cash.income == Decimal("0")

    def test_per_safe_and_total(self):
        """Test per safe and total."""
        stats = compute_stats([
            _tx(TransactionType.DEPOSIT, 1000, SafeType.CASH),
            _tx(TransactionType.EXPENSE, 300, SafeType.CASH),
            _tx(TransactionType.DEPOSIT, 500, SafeType.INSTAPAY),
            _tx(TransactionType.EXPENSE, 200, SafeType.WALLET),
        ])
        assert stats.cash.balance == Decimal("700")
        assert stats.cash.income == Decimal("1000")
        assert stats.cash.expenses == Decimal("300")
        assert stats.instapay.balance == Decimal("500")
        assert stats.wallet.balance == Decimal("-200")
        assert stats.total.income == Decimal("1500")
        assert stats.total.expenses == Decimal("500")
        assert stats.total.balance == Decimal("1000")

    def test_unset_safe_counts_as_cash(self):
        """Test unset safe counts as cash."""
        stats = compute_stats([_tx(TransactionType.DEPOSIT, 250)])
        assert stats.cash.balance == Decimal("250")

    def test_withdrawal_is_money_out(self):
        """Test withdrawal is money out."""
        stats = compute_stats([
            _tx(TransactionType.DEPOSIT, 100, SafeType.WALLET),
            _tx(TransactionType.WITHDRAWAL, 40, SafeType.WALLET),
        ])
        assert stats.wallet.expenses == Decimal("40")
        assert stats.wallet.balance == Decimal("60")

    @pytest.mark.parametrize("transactions", [
        [],
        [(TransactionType.DEPOSIT, 10, SafeType.CASH)],
        [
            (TransactionType.DEPOSIT, 1200, SafeType.INSTAPAY),
            (TransactionType.EXPENSE, 10000, None),
            (TransactionType.WITHDRAWAL, 5, SafeType.WALLET),
            (TransactionType.DEPOSIT, 2000, SafeType.WALLET),
            (TransactionType.EXPENSE, 500, SafeType.WALLET),
        ],
    ])
    def test_aggregate_invariant(self, transactions):
        """Test aggregate invariant."""
        stats = compute_stats([_tx(d, a, s) for d, a, s in transactions])
        safes = [stats.cash, stats.instapay, stats.wallet]

        assert stats.total.balance == sum((s.balance for s in safes), Decimal("0"))
        for safe in safes + [stats.total]:
            assert safe.balance == safe.income - safe.expenses


class TestFilterAndIndex:
    """Display filters and the plan back-reference index."""

    def test_filter_by_direction(self):
        """Test filter by direction."""
        deposit = _tx(TransactionType.DEPOSIT, 1)
        expense = _tx(TransactionType.EXPENSE, 2)
        withdrawal = _tx(TransactionType.WITHDRAWAL, 3)
        all_tx = [deposit, expense, withdrawal]

        assert filter_transactions(all_tx, direction=TransactionType.DEPOSIT) == [deposit]
        assert filter_transactions(all_tx, direction=TransactionType.EXPENSE) == [expense, withdrawal]

    def test_filter_by_effective_safe(self):
        """Test filter by effective safe."""
        legacy = _tx(TransactionType.DEPOSIT, 1)
        wallet = _tx(TransactionType.DEPOSIT, 2, SafeType.WALLET)

        assert filter_transactions([legacy, wallet], safe_type=SafeType.CASH) == [legacy]
        assert filter_transactions([legacy, wallet], safe_type=SafeType.WALLET) == [wallet]

    def test_index_by_plan(self):
        """Test index by plan."""
        a1 = _tx(TransactionType.EXPENSE, 1, plan_id="a")
        a2 = _tx(TransactionType.DEPOSIT, 2, plan_id="a")
        b = _tx(TransactionType.DEPOSIT, 3, plan_id="b")
        loose = _tx(TransactionType.EXPENSE, 4)

        index = index_by_plan([a1, a2, b, loose])
        assert index == {"a": [a1, a2], "b": [b]}


class TestTreasuryLedger:
    """Reads and writes through the record store."""

    def test_add_prepends(self, treasury):
        """Test add prepends."""
        first = treasury.add_transaction(_tx(TransactionType.DEPOSIT, 1))
        second = treasury.add_transaction(_tx(TransactionType.DEPOSIT, 2))
        assert [t.id for t in treasury.list_transactions()] == [second.id, first.id]

    def test_stats_are_recomputed_from_storage(self, treasury, store):
        """Test stats are recomputed from storage."""
        treasury.add_transaction(_tx(TransactionType.DEPOSIT, 100))
        assert treasury.balance() == Decimal("100")

        store.replace_all(Collection.TRANSACTIONS, [])
        assert treasury.balance() == Decimal("0")

    def test_balance_per_safe(self, treasury):
        """Test balance per safe."""
        treasury.add_transaction(_tx(TransactionType.DEPOSIT, 100, SafeType.INSTAPAY))
        treasury.add_transaction(_tx(TransactionType.DEPOSIT, 30, SafeType.CASH))
        assert treasury.balance(SafeType.INSTAPAY) == Decimal("100")
        assert treasury.balance() == Decimal("130")

    def test_delete_transaction(self, treasury):
        """Test delete transaction."""
        tx = treasury.add_transaction(_tx(TransactionType.DEPOSIT, 100))
        assert treasury.delete_transaction(tx.id) is True
        assert treasury.list_transactions() == []

    def test_delete_missing_transaction_does_not_write(self, treasury, store):
        """Test delete missing transaction does not write."""
        treasury.add_transaction(_tx(TransactionType.DEPOSIT, 100))
        before = store.load(Collection.TRANSACTIONS)
        writes = store.write_count

        assert treasury.delete_transaction("no-such-id") is False
        assert store.write_count == writes
        assert store.load(Collection.TRANSACTIONS) == before

    def test_record_manual_defaults_category(self, treasury):
        """Test record manual defaults category."""
        deposit = treasury.record_manual(TransactionType.DEPOSIT, 500)
        expense = treasury.record_manual(
            TransactionType.EXPENSE,
            "120.50",
            safe_type=SafeType.WALLET,
            description="Shop rent",
        )
        assert deposit.category == MANUAL_DEPOSIT_CATEGORY
        assert deposit.effective_safe == SafeType.CASH
        assert expense.category == MANUAL_EXPENSE_CATEGORY
        assert expense.amount == Decimal("120.50")
        assert treasury.balance() == Decimal("379.50")

    def test_record_manual_keeps_given_category(self, treasury):
        """Test record manual keeps given category."""
        tx = treasury.record_manual(
            TransactionType.EXPENSE,
            75,
            category="Transport",
            on=date(2024, 6, 1),
        )
        assert tx.category == "Transport"
        assert tx.date == date(2024, 6, 1)

    @pytest.mark.parametrize("amount", [0, -10, "0", float("nan"), float("inf"), "NaN"])
    def test_record_manual_rejects_non_positive(self, treasury, store, amount):
        """Test record manual rejects non positive."""
        with pytest.raises(TransactionRejectedError) as exc_info:
            treasury.record_manual(TransactionType.DEPOSIT, amount)

        assert "greater than zero" in exc_info.value.reason
        assert store.write_count == 0

    def test_transactions_for_plan(self, treasury):
        """Test transactions for plan."""
        linked = treasury.add_transaction(_tx(TransactionType.DEPOSIT, 1, plan_id="p-1"))
        treasury.add_transaction(_tx(TransactionType.DEPOSIT, 2))
        assert treasury.transactions_for_plan("p-1") == [linked]
        assert treasury.transactions_for_plan("gone") == []

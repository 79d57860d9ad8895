"""Shared fixtures: an in-memory store and the components wired over it."""

from datetime import date
from decimal import Decimal

import pytest

from installment_ledger.ledger import (
    CustomerRegistry,
    PlanDraft,
    PlanManager,
    TreasuryLedger,
)
from installment_ledger.models.records import Customer
from installment_ledger.services.storage import InMemoryRecordStore


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def customers(store):
    return CustomerRegistry(store)


@pytest.fixture
def treasury(store):
    return TreasuryLedger(store)


@pytest.fixture
def plans(store, treasury, customers):
    return PlanManager(store, treasury, customers)


@pytest.fixture
def customer():
    return Customer(name="Ahmed Hassan", phone="01001234567")


@pytest.fixture
def draft():
    """The reference deal: 10000 base, 30/40 markup, 2000 down, 10 months."""
    return PlanDraft(
        product_name="Refrigerator",
        base_price=Decimal("10000"),
        seller_percentage=Decimal("30"),
        customer_percentage=Decimal("40"),
        down_payment=Decimal("2000"),
        months=10,
        start_date=date(2024, 1, 15),
    )

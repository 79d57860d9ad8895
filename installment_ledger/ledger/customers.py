"""
Customer Registry

Customers are created the first time they appear on a plan and are only
changed afterwards by explicit re-classification. They are never deleted.

The trust tier is advisory. A BLOCKED customer makes `requires_confirmation`
return True so the caller can ask before starting a new plan; the registry
itself never refuses anything.
"""

from typing import Optional

from installment_ledger.models.records import Customer, CustomerStatus
from installment_ledger.observability import get_logger
from installment_ledger.services.storage import Collection, RecordStore


logger = get_logger(__name__)


class CustomerRegistry:
    """Reads and writes the customers collection."""

    def __init__(self, store: RecordStore):
        self._store = store

    def list_customers(self) -> list[Customer]:
        return [
            Customer.from_record(r)
            for r in self._store.load(Collection.CUSTOMERS)
        ]

    def get(self, customer_id: str) -> Optional[Customer]:
        for customer in self.list_customers():
            if customer.id == customer_id:
                return customer
        return None

    def upsert(self, customer: Customer) -> Customer:
        """
        Insert a new customer or fully replace an existing one.

        Existing customers keep their position; new ones are appended.
        """
        customers = self.list_customers()
        for idx, existing in enumerate(customers):
            if existing.id == customer.id:
                customers[idx] = customer
                created = False
                break
        else:
            customers.append(customer)
            created = True

        self._store.replace_all(
            Collection.CUSTOMERS,
            [c.to_record() for c in customers],
        )
        logger.info(
            "customer_saved",
            customer_id=customer.id,
            created=created,
            status=customer.classification.value,
        )
        return customer

    def classify(
        self,
        customer_id: str,
        status: CustomerStatus,
        feedback: Optional[str] = None,
    ) -> Optional[Customer]:
        """
        Change a customer's trust tier and feedback notes.

        Passing feedback=None keeps the existing notes. Returns None if the
        customer does not exist.
        """
        customer = self.get(customer_id)
        if customer is None:
            return None

        updated = customer.model_copy(update={
            "status": status,
            "feedback": feedback if feedback is not None else customer.feedback,
        })
        return self.upsert(updated)

    def requires_confirmation(self, customer: Customer) -> bool:
        """
        True when a new plan for this customer needs explicit confirmation.

        The stored record decides for a registered customer, whatever copy
        the caller holds. Unregistered customers are judged as passed in.
        """
        stored = self.get(customer.id)
        return (stored or customer).is_blocked

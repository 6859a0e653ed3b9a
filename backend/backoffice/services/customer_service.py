"""
Customer service
"""
from __future__ import annotations

from typing import List, Optional

from backoffice.core.logger import logger
from backoffice.db.schemas import CustomerCreate, CustomerResponse, CustomerUpdate
from backoffice.store.base import Store, StoreError

_CLEARABLE = ("phone_number",)


class CustomerService:
    def __init__(self, store: Store):
        self.store = store

    def list_customers(self) -> List[CustomerResponse]:
        try:
            customers = self.store.customers.list()
        except StoreError as e:
            logger.error(f"Failed to list customers: {e.message}")
            return []
        return sorted(customers, key=lambda c: c.created_at, reverse=True)

    def get_customer(self, customer_id: str) -> Optional[CustomerResponse]:
        return self.store.customers.get(customer_id)

    def create_customer(self, data: CustomerCreate) -> CustomerResponse:
        customer = self.store.customers.create(data.model_dump())
        logger.info(f"Customer created: {customer.id}")
        return customer

    def update_customer(self, customer_id: str, data: CustomerUpdate) -> Optional[CustomerResponse]:
        changes = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k in _CLEARABLE
        }
        return self.store.customers.update(customer_id, changes)

    def delete_customer(self, customer_id: str) -> bool:
        """Tasks and invoices keep existing with their customer reference cleared."""
        if self.store.customers.get(customer_id) is None:
            return False
        tasks = self.store.tasks.update_where({"assign_to_customer": customer_id}, {"assign_to_customer": None})
        invoices = self.store.invoices.update_where({"customer_id": customer_id}, {"customer_id": None})
        deleted = self.store.customers.delete(customer_id)
        if deleted:
            logger.info(f"Customer deleted: {customer_id} (released {tasks} tasks, {invoices} invoices)")
        return deleted

"""
Dictionary-backed store.

Mirrors the referential rules of the SQL schema so services behave the same
on both backends:
  - deleting a legal case deletes its hearings
  - deleting an invoice deletes its payments and un-bills its tasks
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel

from backoffice.db.schemas import (
    CustomerResponse,
    EmployeeResponse,
    HearingResponse,
    InvoiceResponse,
    LegalCaseResponse,
    PaymentResponse,
    TaskResponse,
)
from backoffice.store.base import R, Ranges, Store, StoreError, TableStore, Where, in_range
from backoffice.utils.helpers import generate_uuid, utcnow


class MemoryTable(TableStore[R]):
    def __init__(
        self,
        record_type: Type[R],
        clock: Callable = utcnow,
        unique: Iterable[str] = (),
    ):
        self.record_type = record_type
        self.clock = clock
        self.unique = tuple(unique)
        self.on_delete: List[Callable[[R], None]] = []
        self._rows: Dict[str, R] = {}

    def _matches(self, row: BaseModel, where: Optional[Where], ranges: Optional[Ranges]) -> bool:
        for field, expected in (where or {}).items():
            actual = getattr(row, field)
            if expected is None:
                if actual is not None:
                    return False
            elif actual != expected:
                return False
        for field, bounds in (ranges or {}).items():
            if not in_range(getattr(row, field), bounds):
                return False
        return True

    def _check_unique(self, candidate: R) -> None:
        for field in self.unique:
            value = getattr(candidate, field)
            for row in self._rows.values():
                if row.id != candidate.id and getattr(row, field) == value:
                    raise StoreError(f"Duplicate {field} '{value}'")

    def get(self, record_id: str) -> Optional[R]:
        row = self._rows.get(record_id)
        return row.model_copy(deep=True) if row else None

    def list(self, where: Optional[Where] = None, ranges: Optional[Ranges] = None) -> List[R]:
        return [
            row.model_copy(deep=True)
            for row in self._rows.values()
            if self._matches(row, where, ranges)
        ]

    def count(self, where: Optional[Where] = None) -> int:
        return sum(1 for row in self._rows.values() if self._matches(row, where, None))

    def create(self, fields: Dict[str, Any]) -> R:
        record = self.record_type(**{**fields, "id": generate_uuid(), "created_at": self.clock()})
        self._check_unique(record)
        self._rows[record.id] = record
        return record.model_copy(deep=True)

    def update(self, record_id: str, fields: Dict[str, Any]) -> Optional[R]:
        existing = self._rows.get(record_id)
        if existing is None:
            return None
        merged = existing.model_dump()
        merged.update(fields)
        merged["id"] = existing.id
        merged["created_at"] = existing.created_at
        record = self.record_type(**merged)
        self._check_unique(record)
        self._rows[record_id] = record
        return record.model_copy(deep=True)

    def update_where(self, where: Where, fields: Dict[str, Any]) -> int:
        ids = [row.id for row in self._rows.values() if self._matches(row, where, None)]
        for record_id in ids:
            self.update(record_id, fields)
        return len(ids)

    def delete(self, record_id: str) -> bool:
        row = self._rows.pop(record_id, None)
        if row is None:
            return False
        for hook in self.on_delete:
            hook(row)
        return True


class MemoryStore(Store):
    def __init__(self, clock: Callable = utcnow):
        self.employees = MemoryTable(EmployeeResponse, clock)
        self.customers = MemoryTable(CustomerResponse, clock)
        self.tasks = MemoryTable(TaskResponse, clock)
        self.invoices = MemoryTable(InvoiceResponse, clock, unique=("invoice_number",))
        self.payments = MemoryTable(PaymentResponse, clock)
        self.legal_cases = MemoryTable(LegalCaseResponse, clock)
        self.hearings = MemoryTable(HearingResponse, clock)

        self.legal_cases.on_delete.append(self._cascade_hearings)
        self.invoices.on_delete.append(self._release_invoice)

    def _cascade_hearings(self, legal_case: LegalCaseResponse) -> None:
        for hearing in self.hearings.list({"legal_case_id": legal_case.id}):
            self.hearings.delete(hearing.id)

    def _release_invoice(self, invoice: InvoiceResponse) -> None:
        self.tasks.update_where({"invoice_id": invoice.id}, {"invoice_id": None})
        for payment in self.payments.list({"invoice_id": invoice.id}):
            self.payments.delete(payment.id)

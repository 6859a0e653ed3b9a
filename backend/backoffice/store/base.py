"""
Storage interface shared by the in-memory and SQL backends.

Business logic only talks to `Store`; which backend sits behind it is decided
by the API dependencies (SQL) or by tests (memory).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

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
from backoffice.utils.exceptions import StoreError  # noqa: F401  (re-exported)

R = TypeVar("R", bound=BaseModel)

Where = Dict[str, Any]
Ranges = Dict[str, Tuple[Optional[date], Optional[date]]]


class TableStore(ABC, Generic[R]):
    """CRUD primitives over one entity type, keyed by id."""

    @abstractmethod
    def get(self, record_id: str) -> Optional[R]:
        ...

    @abstractmethod
    def list(self, where: Optional[Where] = None, ranges: Optional[Ranges] = None) -> List[R]:
        """
        Equality predicates (None matches null) and inclusive range predicates.
        No ordering guarantee.
        """

    @abstractmethod
    def count(self, where: Optional[Where] = None) -> int:
        ...

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> R:
        """Assign id and created_at, persist, return the stored record."""

    @abstractmethod
    def update(self, record_id: str, fields: Dict[str, Any]) -> Optional[R]:
        """Shallow-merge fields into the record. None when it doesn't exist."""

    @abstractmethod
    def update_where(self, where: Where, fields: Dict[str, Any]) -> int:
        """Bulk update; returns the number of rows touched."""

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        ...


class Store(ABC):
    """One table store per entity."""

    employees: TableStore[EmployeeResponse]
    customers: TableStore[CustomerResponse]
    tasks: TableStore[TaskResponse]
    invoices: TableStore[InvoiceResponse]
    payments: TableStore[PaymentResponse]
    legal_cases: TableStore[LegalCaseResponse]
    hearings: TableStore[HearingResponse]


def in_range(value: Any, bounds: Tuple[Optional[date], Optional[date]]) -> bool:
    low, high = bounds
    if value is None:
        return low is None and high is None
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True

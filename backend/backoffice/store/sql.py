"""
SQLAlchemy-backed store. Every operation commits on its own; multi-step
sequences are coordinated (and compensated) by the services.
"""
from __future__ import annotations

import enum
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from backoffice.core.logger import logger
from backoffice.db import models
from backoffice.db.schemas import (
    CustomerResponse,
    EmployeeResponse,
    HearingResponse,
    InvoiceResponse,
    LegalCaseResponse,
    PaymentResponse,
    TaskResponse,
)
from backoffice.store.base import R, Ranges, Store, StoreError, TableStore, Where


def _column_value(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value


class SqlTable(TableStore[R]):
    def __init__(self, db: Session, model, record_type: Type[R]):
        self.db = db
        self.model = model
        self.record_type = record_type

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action} {self.model.__tablename__}: {str(e)}")
            raise StoreError(f"Failed to {action} {self.model.__tablename__}") from e

    def _filtered(self, where: Optional[Where], ranges: Optional[Ranges] = None) -> Query:
        query = self.db.query(self.model)
        for field, expected in (where or {}).items():
            column = getattr(self.model, field)
            if expected is None:
                query = query.filter(column.is_(None))
            else:
                query = query.filter(column == _column_value(expected))
        for field, (low, high) in (ranges or {}).items():
            column = getattr(self.model, field)
            if low is not None:
                query = query.filter(column >= low)
            if high is not None:
                query = query.filter(column <= high)
        return query

    def _record(self, row) -> R:
        return self.record_type.model_validate(row)

    def get(self, record_id: str) -> Optional[R]:
        with self._guard("read"):
            row = self.db.get(self.model, record_id)
            return self._record(row) if row else None

    def list(self, where: Optional[Where] = None, ranges: Optional[Ranges] = None) -> List[R]:
        with self._guard("list"):
            return [self._record(row) for row in self._filtered(where, ranges).all()]

    def count(self, where: Optional[Where] = None) -> int:
        with self._guard("count"):
            return self._filtered(where).count()

    def create(self, fields: Dict[str, Any]) -> R:
        with self._guard("create"):
            row = self.model(**{key: _column_value(value) for key, value in fields.items()})
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return self._record(row)

    def update(self, record_id: str, fields: Dict[str, Any]) -> Optional[R]:
        with self._guard("update"):
            row = self.db.get(self.model, record_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, _column_value(value))
            self.db.commit()
            self.db.refresh(row)
            return self._record(row)

    def update_where(self, where: Where, fields: Dict[str, Any]) -> int:
        with self._guard("update"):
            touched = self._filtered(where).update(
                {key: _column_value(value) for key, value in fields.items()},
                synchronize_session=False,
            )
            self.db.commit()
            return int(touched or 0)

    def delete(self, record_id: str) -> bool:
        with self._guard("delete"):
            row = self.db.get(self.model, record_id)
            if row is None:
                return False
            self.db.delete(row)
            self.db.commit()
            return True


class SqlStore(Store):
    def __init__(self, db: Session):
        self.db = db
        self.employees = SqlTable(db, models.Employee, EmployeeResponse)
        self.customers = SqlTable(db, models.Customer, CustomerResponse)
        self.tasks = SqlTable(db, models.Task, TaskResponse)
        self.invoices = SqlTable(db, models.Invoice, InvoiceResponse)
        self.payments = SqlTable(db, models.Payment, PaymentResponse)
        self.legal_cases = SqlTable(db, models.LegalCase, LegalCaseResponse)
        self.hearings = SqlTable(db, models.Hearing, HearingResponse)

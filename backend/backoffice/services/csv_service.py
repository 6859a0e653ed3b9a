"""
CSV export / import for employees, customers and tasks.

Export quotes any field holding a comma, quote or newline. Import reads
either the same quoted dialect or, in "naive" mode, splits lines on bare
commas the way the legacy importer did (quoted delimiters break rows).
Every row is validated before anything is written.
"""
from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

from backoffice.core.config import settings
from backoffice.core.logger import logger
from backoffice.db.models import TaskStatus
from backoffice.db.schemas import CustomerCreate, EmployeeCreate, ImportResult, TaskCreate
from backoffice.services.task_service import TaskService
from backoffice.store.base import Store
from backoffice.utils.exceptions import ValidationFailedError

# Server-assigned columns ignored on import
_TASK_DROPPED = ("id", "invoice_id", "completed_at", "created_at")
_ENTITY_DROPPED = ("id", "created_at")


def _serialize_csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(getattr(value, "value", value))


def export_csv(records: Sequence[BaseModel]) -> str:
    """Header row from the first record's fields, then one row per record."""
    if not records:
        return ""
    headers = list(type(records[0]).model_fields.keys())
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(headers)
    for record in records:
        writer.writerow([_serialize_csv_value(getattr(record, field)) for field in headers])
    return output.getvalue()


def parse_csv(text: str, mode: str = "quoted") -> List[Dict[str, str]]:
    if isinstance(text, bytes):
        text = text.decode("utf-8-sig")
    text = text.lstrip("\ufeff")
    mode = (mode or "quoted").strip().lower()

    if mode == "quoted":
        reader = csv.reader(io.StringIO(text))
        rows = [row for row in reader if any(cell.strip() for cell in row)]
    elif mode == "naive":
        rows = [line.rstrip("\r").split(",") for line in text.split("\n") if line.strip()]
    else:
        raise ValueError(f"Unsupported CSV import mode: {mode}")

    if not rows:
        return []
    headers = [h.strip() for h in rows[0]]
    return [
        {header: (row[idx].strip() if idx < len(row) else "") for idx, header in enumerate(headers)}
        for row in rows[1:]
    ]


def _clean(row: Dict[str, str], dropped: Sequence[str]) -> Dict[str, Any]:
    """Blank cells fall back to the schema defaults."""
    return {key: value for key, value in row.items() if key and key not in dropped and value != ""}


def _error_messages(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'row'}: {err['msg']}"
        for err in error.errors()
    ]


class CsvService:
    def __init__(self, store: Store, task_service: TaskService, mode: Optional[str] = None):
        self.store = store
        self.task_service = task_service
        self.mode = (mode or settings.CSV_IMPORT_MODE).strip().lower()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_employees(self) -> str:
        return export_csv(sorted(self.store.employees.list(), key=lambda e: e.created_at))

    def export_customers(self) -> str:
        return export_csv(sorted(self.store.customers.list(), key=lambda c: c.created_at))

    def export_tasks(self) -> str:
        tasks = self.task_service.list_tasks()
        return export_csv(sorted(tasks, key=lambda t: t.created_at))

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def import_employees(self, text: str) -> ImportResult:
        validated = self._validate(parse_csv(text, self.mode), EmployeeCreate, _ENTITY_DROPPED)
        ids = [self.store.employees.create(item.model_dump()).id for item in validated]
        logger.info(f"Imported {len(ids)} employees")
        return ImportResult(success=True, imported=len(ids), ids=ids)

    def import_customers(self, text: str) -> ImportResult:
        validated = self._validate(parse_csv(text, self.mode), CustomerCreate, _ENTITY_DROPPED)
        ids = [self.store.customers.create(item.model_dump()).id for item in validated]
        logger.info(f"Imported {len(ids)} customers")
        return ImportResult(success=True, imported=len(ids), ids=ids)

    def import_tasks(self, text: str) -> ImportResult:
        employees = self._lookup(
            [(e.id, e.full_name) for e in self.store.employees.list()]
        )
        customers = self._lookup(
            [(c.id, c.company_name) for c in self.store.customers.list()]
        )

        rows = []
        errors = []
        for index, raw in enumerate(parse_csv(text, self.mode), start=2):
            row = _clean(raw, _TASK_DROPPED)
            row_errors = []
            for field, lookup, label in (
                ("assign_to_employee", employees, "employee"),
                ("assign_to_customer", customers, "customer"),
            ):
                ref = row.get(field)
                if ref:
                    resolved = lookup.get(ref.lower())
                    if resolved is None:
                        row_errors.append(f"{field}: unknown {label} '{ref}'")
                    row[field] = resolved
            status = row.get("status")
            if status and status.strip().lower() == TaskStatus.overdue.value.lower():
                row["status"] = TaskStatus.open.value
            if row_errors:
                errors.append({"row": index, "errors": row_errors})
                continue
            rows.append((index, row))

        validated = []
        for index, row in rows:
            try:
                validated.append(TaskCreate(**row))
            except ValidationError as e:
                errors.append({"row": index, "errors": _error_messages(e)})

        if errors:
            errors.sort(key=lambda err: err["row"])
            raise ValidationFailedError("CSV import failed; nothing was imported", errors)

        ids = [self.task_service.create_task(item).id for item in validated]
        logger.info(f"Imported {len(ids)} tasks")
        return ImportResult(success=True, imported=len(ids), ids=ids)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _lookup(pairs) -> Dict[str, str]:
        """Case-insensitive name -> id map that also accepts the id itself."""
        lookup = {}
        for record_id, name in pairs:
            if name:
                lookup.setdefault(name.strip().lower(), record_id)
            lookup[record_id.lower()] = record_id
        return lookup

    @staticmethod
    def _validate(rows: List[Dict[str, str]], schema: Type[BaseModel], dropped: Sequence[str]) -> List[BaseModel]:
        validated = []
        errors = []
        for index, raw in enumerate(rows, start=2):
            try:
                validated.append(schema(**_clean(raw, dropped)))
            except ValidationError as e:
                errors.append({"row": index, "errors": _error_messages(e)})
        if errors:
            raise ValidationFailedError("CSV import failed; nothing was imported", errors)
        return validated

"""Tests for the SQLAlchemy-backed store."""

from datetime import date, timedelta

import pytest

from backoffice.db.models import PaymentMethod, TaskStatus
from backoffice.store.base import StoreError


def _invoice(sql_store, number="INV-1"):
    return sql_store.invoices.create({
        "invoice_number": number,
        "invoice_date": date(2024, 6, 1),
        "total_amount": 100,
        "paid_amount": 0,
    })


def test_create_assigns_id_and_timestamp(sql_store):
    employee = sql_store.employees.create({
        "full_name": "Jane Doe", "email": "jane@x.com", "position": "Auditor",
    })

    assert employee.id
    assert employee.created_at is not None
    assert sql_store.employees.get(employee.id).full_name == "Jane Doe"
    assert sql_store.employees.get("missing") is None


def test_enums_are_stored_as_labels(sql_store):
    task = sql_store.tasks.create({"title": "Audit", "status": TaskStatus.in_progress})
    assert task.status == TaskStatus.in_progress
    assert sql_store.tasks.count({"status": TaskStatus.in_progress}) == 1
    assert sql_store.tasks.count({"status": "In Progress"}) == 1


def test_where_none_matches_null(sql_store):
    invoice = _invoice(sql_store)
    billed = sql_store.tasks.create({"title": "Billed", "invoice_id": invoice.id})
    unbilled = sql_store.tasks.create({"title": "Unbilled"})

    assert [t.id for t in sql_store.tasks.list({"invoice_id": None})] == [unbilled.id]
    assert [t.id for t in sql_store.tasks.list({"invoice_id": invoice.id})] == [billed.id]


def test_range_predicates_are_inclusive(sql_store):
    start = date(2024, 6, 1)
    for offset in range(4):
        sql_store.tasks.create({"title": f"T{offset}", "due_date": start + timedelta(days=offset)})
    sql_store.tasks.create({"title": "Undated"})

    hits = sql_store.tasks.list(None, {"due_date": (start + timedelta(days=1), start + timedelta(days=2))})
    assert sorted(t.title for t in hits) == ["T1", "T2"]
    assert len(sql_store.tasks.list(None, {"due_date": (None, None)})) == 5


def test_update_and_update_where(sql_store):
    a = sql_store.tasks.create({"title": "A", "assign_to_employee": None})
    employee = sql_store.employees.create({"full_name": "Bob", "email": "b@x.com", "position": "Clerk"})
    sql_store.tasks.update(a.id, {"assign_to_employee": employee.id})
    sql_store.tasks.create({"title": "B", "assign_to_employee": employee.id})

    touched = sql_store.tasks.update_where({"assign_to_employee": employee.id}, {"assign_to_employee": None})

    assert touched == 2
    assert sql_store.tasks.count({"assign_to_employee": None}) == 2
    assert sql_store.tasks.update("missing", {"title": "x"}) is None


def test_deleting_invoice_releases_tasks_and_payments(sql_store):
    invoice = _invoice(sql_store)
    task = sql_store.tasks.create({"title": "Billed", "invoice_id": invoice.id})
    sql_store.payments.create({
        "invoice_id": invoice.id,
        "payment_date": date(2024, 6, 2),
        "amount": 50,
        "method": PaymentMethod.cash,
    })

    assert sql_store.invoices.delete(invoice.id) is True

    assert sql_store.tasks.get(task.id).invoice_id is None
    assert sql_store.payments.list() == []
    assert sql_store.invoices.delete(invoice.id) is False


def test_deleting_case_cascades_hearings(sql_store):
    case = sql_store.legal_cases.create({"case_number": "WP 1/2024"})
    sql_store.hearings.create({"legal_case_id": case.id, "hearing_date": date(2024, 7, 1)})

    assert sql_store.legal_cases.delete(case.id) is True
    assert sql_store.hearings.list() == []


def test_driver_errors_become_store_errors(sql_store):
    _invoice(sql_store, "INV-DUP")
    with pytest.raises(StoreError):
        _invoice(sql_store, "INV-DUP")

    # session is usable again after the rollback
    assert sql_store.invoices.count() == 1

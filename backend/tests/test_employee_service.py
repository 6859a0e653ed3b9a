"""Tests for two-phase employee deletion and customer deletion."""

from datetime import date, timedelta

import pytest

from backoffice.db.schemas import CustomerCreate, EmployeeCreate, EmployeeUpdate, TaskCreate
from backoffice.services.customer_service import CustomerService
from backoffice.services.employee_service import EmployeeService
from backoffice.services.task_service import TaskService
from backoffice.store.base import StoreError
from backoffice.utils.exceptions import PartialOperationError, ReferentialConflictError


@pytest.fixture
def employees(store):
    return EmployeeService(store)


@pytest.fixture
def jane_with_task(store, employees):
    jane = employees.create_employee(
        EmployeeCreate(full_name="Jane Doe", email="jane@x.com", position="Auditor")
    )
    task = TaskService(store).create_task(TaskCreate(
        title="Audit",
        due_date=date.today() - timedelta(days=1),
        assign_to_employee=jane.id,
        billing_amount=1000,
        paid_amount=400,
    ))
    return jane, task


def test_delete_without_confirmation_aborts(store, employees, jane_with_task):
    jane, task = jane_with_task

    with pytest.raises(ReferentialConflictError) as exc:
        employees.delete_employee(jane.id)

    assert exc.value.status_code == 409
    assert exc.value.ids == [task.id]
    assert store.employees.get(jane.id) is not None
    assert store.tasks.get(task.id).assign_to_employee == jane.id


def test_confirmed_delete_unassigns_then_removes(store, employees, jane_with_task):
    jane, task = jane_with_task

    result = employees.delete_employee(jane.id, unassign_tasks=True)

    assert result.success is True
    assert result.unassigned_tasks == 1
    assert store.employees.get(jane.id) is None
    remaining = store.tasks.get(task.id)
    assert remaining is not None
    assert remaining.assign_to_employee is None


def test_delete_employee_without_tasks(employees):
    bob = employees.create_employee(EmployeeCreate(full_name="Bob", email="bob@x.com", position="Clerk"))
    assert employees.delete_employee(bob.id).unassigned_tasks == 0
    assert employees.delete_employee(bob.id) is None


def test_failed_delete_after_unassign_is_partial(store, employees, jane_with_task, monkeypatch):
    jane, task = jane_with_task

    def broken_delete(record_id):
        raise StoreError("connection lost")

    monkeypatch.setattr(store.employees, "delete", broken_delete)

    with pytest.raises(PartialOperationError) as exc:
        employees.delete_employee(jane.id, unassign_tasks=True)

    assert exc.value.completed == ["unassign tasks"]
    assert exc.value.failed == "delete employee"
    assert store.tasks.get(task.id).assign_to_employee is None


def test_update_employee_merges_fields(employees):
    bob = employees.create_employee(EmployeeCreate(full_name="Bob", email="bob@x.com", position="Clerk"))
    updated = employees.update_employee(bob.id, EmployeeUpdate(position="Senior Clerk"))
    assert updated.position == "Senior Clerk"
    assert updated.full_name == "Bob"
    assert employees.update_employee("missing", EmployeeUpdate(position="x")) is None


def test_delete_customer_releases_tasks(store):
    customers = CustomerService(store)
    acme = customers.create_customer(
        CustomerCreate(company_name="Acme", contact_person="Wile", email="wile@acme.com")
    )
    task = TaskService(store).create_task(TaskCreate(title="Audit", assign_to_customer=acme.id))

    assert customers.delete_customer(acme.id) is True
    assert store.tasks.get(task.id).assign_to_customer is None
    assert customers.delete_customer(acme.id) is False

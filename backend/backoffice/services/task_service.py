"""
Task service: CRUD with lifecycle side effects, partial payments and the
completion notification.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from backoffice.core.config import settings
from backoffice.core.logger import logger
from backoffice.db.models import TaskStatus
from backoffice.db.schemas import TaskCreate, TaskResponse, TaskUpdate
from backoffice.services.email_service import EmailService
from backoffice.services.task_lifecycle import (
    apply_write_rules,
    completed_transition,
    with_effective_status,
)
from backoffice.store.base import Store, StoreError
from backoffice.utils.exceptions import OverpaymentError, ValidationFailedError
from backoffice.utils.helpers import utcnow
from backoffice.utils.validators import parse_task_status

# Columns that may not be cleared by an update
_NON_NULLABLE = ("title", "priority", "status", "paid_amount")


class TaskService:
    def __init__(
        self,
        store: Store,
        email_service: Optional[EmailService] = None,
        today: Callable[[], date] = date.today,
        clock: Callable[[], datetime] = utcnow,
        allow_overpayment: Optional[bool] = None,
    ):
        self.store = store
        self.email_service = email_service
        self.today = today
        self.clock = clock
        self.allow_overpayment = (
            settings.ALLOW_OVERPAYMENT if allow_overpayment is None else allow_overpayment
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_tasks(
        self,
        status: Optional[str] = None,
        employee_id: Optional[str] = None,
        customer_id: Optional[str] = None,
        unbilled: bool = False,
    ) -> List[TaskResponse]:
        wanted = self._status_filter(status) if status else None
        where: Dict[str, Any] = {}
        if employee_id:
            where["assign_to_employee"] = employee_id
        if customer_id:
            where["assign_to_customer"] = customer_id
        if unbilled:
            where["invoice_id"] = None

        try:
            tasks = self.store.tasks.list(where)
        except StoreError as e:
            logger.error(f"Failed to list tasks: {e.message}")
            return []

        today = self.today()
        tasks = [with_effective_status(task, today) for task in tasks]
        if wanted is not None:
            tasks = [task for task in tasks if task.status == wanted]
        tasks.sort(key=lambda task: task.created_at, reverse=True)
        return tasks

    def list_unbilled(self, customer_id: Optional[str] = None) -> List[TaskResponse]:
        return self.list_tasks(customer_id=customer_id, unbilled=True)

    def get_task(self, task_id: str) -> Optional[TaskResponse]:
        task = self.store.tasks.get(task_id)
        if task is None:
            return None
        return with_effective_status(task, self.today())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_task(self, data: TaskCreate) -> TaskResponse:
        fields = data.model_dump()
        self._check_references(fields)
        self._check_overpayment(fields.get("billing_amount"), fields.get("paid_amount"))

        fields = apply_write_rules(None, fields, self.clock(), self.today())
        task = self.store.tasks.create(fields)
        logger.info(f"Task created: {task.id} ({task.status.value})")

        if completed_transition(None, task):
            self._notify_completion(task)
        return task

    def update_task(self, task_id: str, data: TaskUpdate) -> Optional[TaskResponse]:
        existing = self.store.tasks.get(task_id)
        if existing is None:
            return None

        changes = data.model_dump(exclude_unset=True)
        for key in _NON_NULLABLE:
            if key in changes and changes[key] is None:
                changes.pop(key)

        self._check_references(changes)
        self._check_overpayment(
            changes.get("billing_amount", existing.billing_amount),
            changes.get("paid_amount", existing.paid_amount),
        )

        changes = apply_write_rules(existing, changes, self.clock(), self.today())
        task = self.store.tasks.update(task_id, changes)
        if task is None:
            return None
        logger.info(f"Task updated: {task.id} ({task.status.value})")

        if completed_transition(existing, task):
            self._notify_completion(task)
        return task

    def delete_task(self, task_id: str) -> bool:
        deleted = self.store.tasks.delete(task_id)
        if deleted:
            logger.info(f"Task deleted: {task_id}")
        return deleted

    def record_task_payment(self, task_id: str, amount: float) -> Optional[TaskResponse]:
        """Add a partial payment to the task's paid amount."""
        task = self.store.tasks.get(task_id)
        if task is None:
            return None
        if amount <= 0:
            raise ValidationFailedError("Payment amount must be greater than zero")

        paid = (task.paid_amount or 0) + amount
        self._check_overpayment(task.billing_amount, paid)

        updated = self.store.tasks.update(task_id, {"paid_amount": paid})
        if updated is None:
            return None
        logger.info(f"Payment of {amount:.2f} recorded on task {task_id}")
        return with_effective_status(updated, self.today())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _status_filter(status: str) -> TaskStatus:
        """Filters accept the same aliases as writes, plus the derived Overdue."""
        try:
            return parse_task_status(status, allow_overdue=True)
        except ValueError as e:
            raise ValidationFailedError(str(e)) from e

    def _check_references(self, fields: Dict[str, Any]) -> None:
        errors = []
        employee_id = fields.get("assign_to_employee")
        if employee_id and self.store.employees.get(employee_id) is None:
            errors.append({"field": "assign_to_employee", "message": f"Employee {employee_id} does not exist"})
        customer_id = fields.get("assign_to_customer")
        if customer_id and self.store.customers.get(customer_id) is None:
            errors.append({"field": "assign_to_customer", "message": f"Customer {customer_id} does not exist"})
        if errors:
            raise ValidationFailedError("Task references unknown records", errors)

    def _check_overpayment(self, billed: Optional[float], paid: Optional[float]) -> None:
        if self.allow_overpayment or billed is None:
            return
        if (paid or 0) > billed:
            raise OverpaymentError(billed, paid or 0)

    def _notify_completion(self, task: TaskResponse) -> None:
        if self.email_service is None or not task.assign_to_customer:
            return
        try:
            customer = self.store.customers.get(task.assign_to_customer)
            if customer is None or not customer.email:
                return
            self.email_service.send_completion_notice(customer.email, task.title)
            logger.info(f"Completion notice sent for task {task.id} to {customer.email}")
        except Exception as e:
            # Notification never fails the write
            logger.warning(f"Completion notice for task {task.id} failed: {str(e)}")

"""
Employee service
"""
from __future__ import annotations

from typing import List, Optional

from backoffice.core.logger import logger
from backoffice.db.schemas import (
    EmployeeCreate,
    EmployeeDeleteResponse,
    EmployeeResponse,
    EmployeeUpdate,
)
from backoffice.store.base import Store, StoreError
from backoffice.utils.exceptions import PartialOperationError, ReferentialConflictError


class EmployeeService:
    def __init__(self, store: Store):
        self.store = store

    def list_employees(self) -> List[EmployeeResponse]:
        try:
            employees = self.store.employees.list()
        except StoreError as e:
            logger.error(f"Failed to list employees: {e.message}")
            return []
        return sorted(employees, key=lambda e: e.created_at, reverse=True)

    def get_employee(self, employee_id: str) -> Optional[EmployeeResponse]:
        return self.store.employees.get(employee_id)

    def create_employee(self, data: EmployeeCreate) -> EmployeeResponse:
        employee = self.store.employees.create(data.model_dump())
        logger.info(f"Employee created: {employee.id}")
        return employee

    def update_employee(self, employee_id: str, data: EmployeeUpdate) -> Optional[EmployeeResponse]:
        changes = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k == "department"
        }
        return self.store.employees.update(employee_id, changes)

    def delete_employee(self, employee_id: str, unassign_tasks: bool = False) -> Optional[EmployeeDeleteResponse]:
        """
        Two-phase delete. Tasks still assigned to the employee block the delete
        unless the caller confirms unassignment; confirmed deletes null the
        task references first and then remove the employee.
        """
        if self.store.employees.get(employee_id) is None:
            return None

        linked = self.store.tasks.list({"assign_to_employee": employee_id})
        if linked and not unassign_tasks:
            raise ReferentialConflictError("Employee", employee_id, "tasks", [t.id for t in linked])

        unassigned = 0
        if linked:
            unassigned = self.store.tasks.update_where(
                {"assign_to_employee": employee_id}, {"assign_to_employee": None}
            )
            logger.info(f"Unassigned {unassigned} tasks from employee {employee_id}")

        try:
            deleted = self.store.employees.delete(employee_id)
        except StoreError as e:
            if not unassigned:
                raise
            raise PartialOperationError(
                "Delete employee", ["unassign tasks"], "delete employee", e.message
            ) from e

        if not deleted:
            if unassigned:
                raise PartialOperationError(
                    "Delete employee", ["unassign tasks"], "delete employee", "employee no longer exists"
                )
            return None

        logger.info(f"Employee deleted: {employee_id}")
        return EmployeeDeleteResponse(
            success=True,
            message="Employee deleted successfully",
            unassigned_tasks=unassigned,
        )

"""
Employee endpoints
"""
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import Response
from typing import List

from backoffice.api.v1.deps import get_csv_service, get_employee_service
from backoffice.db.schemas import (
    EmployeeCreate,
    EmployeeDeleteResponse,
    EmployeeResponse,
    EmployeeUpdate,
    ImportResult,
)
from backoffice.services.csv_service import CsvService
from backoffice.services.employee_service import EmployeeService
from backoffice.utils.exceptions import EntityNotFoundError

router = APIRouter()

# ============================================================================
# CSV
# ============================================================================

@router.get("/export")
def export_employees(csv_service: CsvService = Depends(get_csv_service)):
    """Download all employees as CSV"""
    return Response(
        content=csv_service.export_employees(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="employees.csv"'},
    )


@router.post("/import", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_employees(
    file: UploadFile = File(...),
    csv_service: CsvService = Depends(get_csv_service),
):
    """Import employees from CSV. Nothing is written if any row is invalid."""
    payload = await file.read()
    return csv_service.import_employees(payload.decode("utf-8-sig"))

# ============================================================================
# CRUD
# ============================================================================

@router.get("/", response_model=List[EmployeeResponse])
def list_employees(service: EmployeeService = Depends(get_employee_service)):
    return service.list_employees()


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    employee = service.get_employee(employee_id)
    if not employee:
        raise EntityNotFoundError("Employee", employee_id)
    return employee


@router.post("/", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(data: EmployeeCreate, service: EmployeeService = Depends(get_employee_service)):
    return service.create_employee(data)


@router.patch("/{employee_id}", response_model=EmployeeResponse)
def update_employee(
    employee_id: str,
    data: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),
):
    employee = service.update_employee(employee_id, data)
    if not employee:
        raise EntityNotFoundError("Employee", employee_id)
    return employee


@router.delete("/{employee_id}", response_model=EmployeeDeleteResponse)
def delete_employee(
    employee_id: str,
    unassign_tasks: bool = Query(False, description="Null the employee on assigned tasks before deleting"),
    service: EmployeeService = Depends(get_employee_service),
):
    """
    Delete an employee.

    Returns 409 with the assigned task ids unless `unassign_tasks=true`.
    """
    result = service.delete_employee(employee_id, unassign_tasks=unassign_tasks)
    if result is None:
        raise EntityNotFoundError("Employee", employee_id)
    return result

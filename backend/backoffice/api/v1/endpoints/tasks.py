"""
Task endpoints

Every task returned here carries its effective status (past-due tasks read
as Overdue until completed).
"""
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import Response
from typing import List, Optional

from backoffice.api.v1.deps import get_csv_service, get_task_service
from backoffice.db.schemas import (
    DeleteResponse,
    ImportResult,
    TaskCreate,
    TaskPaymentCreate,
    TaskResponse,
    TaskUpdate,
)
from backoffice.services.csv_service import CsvService
from backoffice.services.task_service import TaskService
from backoffice.utils.exceptions import EntityNotFoundError

router = APIRouter()

# ============================================================================
# CSV
# ============================================================================

@router.get("/export")
def export_tasks(csv_service: CsvService = Depends(get_csv_service)):
    return Response(
        content=csv_service.export_tasks(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="tasks.csv"'},
    )


@router.post("/import", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_tasks(
    file: UploadFile = File(...),
    csv_service: CsvService = Depends(get_csv_service),
):
    """
    Import tasks from CSV.
    Employee and customer columns may hold names (case-insensitive) or ids.
    """
    payload = await file.read()
    return csv_service.import_tasks(payload.decode("utf-8-sig"))

# ============================================================================
# CRUD
# ============================================================================

@router.get("/", response_model=List[TaskResponse])
def list_tasks(
    status: Optional[str] = Query(None, description="Filter by effective status"),
    employee_id: Optional[str] = Query(None, description="Filter by assigned employee"),
    customer_id: Optional[str] = Query(None, description="Filter by customer"),
    unbilled: bool = Query(False, description="Only tasks not yet on an invoice"),
    service: TaskService = Depends(get_task_service),
):
    return service.list_tasks(
        status=status,
        employee_id=employee_id,
        customer_id=customer_id,
        unbilled=unbilled,
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    task = service.get_task(task_id)
    if not task:
        raise EntityNotFoundError("Task", task_id)
    return task


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(data: TaskCreate, service: TaskService = Depends(get_task_service)):
    return service.create_task(data)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, data: TaskUpdate, service: TaskService = Depends(get_task_service)):
    task = service.update_task(task_id, data)
    if not task:
        raise EntityNotFoundError("Task", task_id)
    return task


@router.delete("/{task_id}", response_model=DeleteResponse)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    if not service.delete_task(task_id):
        raise EntityNotFoundError("Task", task_id)
    return {"success": True, "message": "Task deleted successfully"}


@router.post("/{task_id}/payments", response_model=TaskResponse)
def record_task_payment(
    task_id: str,
    data: TaskPaymentCreate,
    service: TaskService = Depends(get_task_service),
):
    """Add a partial payment to the task's paid amount"""
    task = service.record_task_payment(task_id, data.amount)
    if not task:
        raise EntityNotFoundError("Task", task_id)
    return task

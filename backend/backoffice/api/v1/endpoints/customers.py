"""
Customer endpoints
"""
from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import Response
from typing import List

from backoffice.api.v1.deps import get_csv_service, get_customer_service
from backoffice.db.schemas import (
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
    DeleteResponse,
    ImportResult,
)
from backoffice.services.csv_service import CsvService
from backoffice.services.customer_service import CustomerService
from backoffice.utils.exceptions import EntityNotFoundError

router = APIRouter()


@router.get("/export")
def export_customers(csv_service: CsvService = Depends(get_csv_service)):
    return Response(
        content=csv_service.export_customers(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="customers.csv"'},
    )


@router.post("/import", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_customers(
    file: UploadFile = File(...),
    csv_service: CsvService = Depends(get_csv_service),
):
    payload = await file.read()
    return csv_service.import_customers(payload.decode("utf-8-sig"))


@router.get("/", response_model=List[CustomerResponse])
def list_customers(service: CustomerService = Depends(get_customer_service)):
    return service.list_customers()


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: str, service: CustomerService = Depends(get_customer_service)):
    customer = service.get_customer(customer_id)
    if not customer:
        raise EntityNotFoundError("Customer", customer_id)
    return customer


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(data: CustomerCreate, service: CustomerService = Depends(get_customer_service)):
    return service.create_customer(data)


@router.patch("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.update_customer(customer_id, data)
    if not customer:
        raise EntityNotFoundError("Customer", customer_id)
    return customer


@router.delete("/{customer_id}", response_model=DeleteResponse)
def delete_customer(customer_id: str, service: CustomerService = Depends(get_customer_service)):
    """Delete a customer; its tasks and invoices are kept with the reference cleared"""
    if not service.delete_customer(customer_id):
        raise EntityNotFoundError("Customer", customer_id)
    return {"success": True, "message": "Customer deleted successfully"}

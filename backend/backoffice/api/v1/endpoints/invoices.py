"""
Invoice endpoints
"""
from fastapi import APIRouter, Depends, status
from typing import List

from backoffice.api.v1.deps import get_invoice_service
from backoffice.db.schemas import DeleteResponse, InvoiceDetailResponse, InvoiceUpdate
from backoffice.services.invoice_service import InvoiceService
from backoffice.utils.exceptions import EntityNotFoundError

router = APIRouter()


@router.get("/", response_model=List[InvoiceDetailResponse])
def list_invoices(service: InvoiceService = Depends(get_invoice_service)):
    """All invoices, newest first, with their tasks and balance"""
    return service.list_invoices()


@router.get("/{invoice_id}", response_model=InvoiceDetailResponse)
def get_invoice(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    invoice = service.get_invoice(invoice_id)
    if not invoice:
        raise EntityNotFoundError("Invoice", invoice_id)
    return invoice


@router.post(
    "/from-task/{task_id}",
    response_model=InvoiceDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_invoice_from_task(task_id: str, service: InvoiceService = Depends(get_invoice_service)):
    """
    Bill a task: creates an invoice seeded from the task and links the task to it.
    409 when the task is already billed.
    """
    invoice = service.create_from_task(task_id)
    if not invoice:
        raise EntityNotFoundError("Task", task_id)
    return invoice


@router.patch("/{invoice_id}", response_model=InvoiceDetailResponse)
def update_invoice(
    invoice_id: str,
    data: InvoiceUpdate,
    service: InvoiceService = Depends(get_invoice_service),
):
    invoice = service.update_invoice(invoice_id, data)
    if not invoice:
        raise EntityNotFoundError("Invoice", invoice_id)
    return invoice


@router.delete("/{invoice_id}", response_model=DeleteResponse)
def delete_invoice(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    """Delete an invoice; its tasks return to the unbilled pool"""
    if not service.delete_invoice(invoice_id):
        raise EntityNotFoundError("Invoice", invoice_id)
    return {"success": True, "message": "Invoice deleted successfully"}

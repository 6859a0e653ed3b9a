"""
Payment endpoints
"""
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from backoffice.api.v1.deps import get_invoice_service
from backoffice.db.schemas import DeleteResponse, PaymentCreate, PaymentResponse
from backoffice.services.invoice_service import InvoiceService
from backoffice.utils.exceptions import EntityNotFoundError

router = APIRouter()


@router.get("/", response_model=List[PaymentResponse])
def list_payments(
    invoice_id: Optional[str] = Query(None, description="Filter by invoice"),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.list_payments(invoice_id)


@router.post("/", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def record_payment(data: PaymentCreate, service: InvoiceService = Depends(get_invoice_service)):
    """Record a payment and add it to the invoice's paid amount"""
    payment = service.record_payment(data)
    if not payment:
        raise EntityNotFoundError("Invoice", data.invoice_id)
    return payment


@router.delete("/{payment_id}", response_model=DeleteResponse)
def delete_payment(payment_id: str, service: InvoiceService = Depends(get_invoice_service)):
    if not service.delete_payment(payment_id):
        raise EntityNotFoundError("Payment", payment_id)
    return {"success": True, "message": "Payment deleted successfully"}

"""
Invoice and payment service.

Both multi-step writes here are sagas over independently committed store
operations:

  create_from_task  create invoice -> link task     (undo: delete invoice)
  record_payment    create payment -> bump invoice  (undo: delete payment)
  delete_payment    delete payment -> lower invoice (no undo, reported)

When a compensation itself fails the caller gets a PartialOperationError
naming what was left behind.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from backoffice.core.config import settings
from backoffice.core.logger import logger
from backoffice.db.schemas import (
    InvoiceDetailResponse,
    InvoiceResponse,
    InvoiceTaskSummary,
    InvoiceUpdate,
    PaymentCreate,
    PaymentResponse,
)
from backoffice.services.task_lifecycle import with_effective_status
from backoffice.store.base import Store, StoreError
from backoffice.utils.exceptions import (
    ConflictError,
    EntityNotFoundError,
    OverpaymentError,
    PartialOperationError,
)
from backoffice.utils.helpers import epoch_millis, utcnow


class InvoiceService:
    def __init__(
        self,
        store: Store,
        today: Callable[[], date] = date.today,
        clock: Callable[[], datetime] = utcnow,
        allow_overpayment: Optional[bool] = None,
    ):
        self.store = store
        self.today = today
        self.clock = clock
        self.allow_overpayment = (
            settings.ALLOW_OVERPAYMENT if allow_overpayment is None else allow_overpayment
        )

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    def list_invoices(self) -> List[InvoiceDetailResponse]:
        try:
            invoices = self.store.invoices.list()
            customers = {c.id: c.company_name for c in self.store.customers.list()}
        except StoreError as e:
            logger.error(f"Failed to list invoices: {e.message}")
            return []
        invoices.sort(key=lambda inv: (inv.invoice_date, inv.created_at), reverse=True)
        return [self._detail(inv, customers) for inv in invoices]

    def get_invoice(self, invoice_id: str) -> Optional[InvoiceDetailResponse]:
        invoice = self.store.invoices.get(invoice_id)
        if invoice is None:
            return None
        return self._detail(invoice)

    def create_from_task(self, task_id: str) -> Optional[InvoiceDetailResponse]:
        task = self.store.tasks.get(task_id)
        if task is None:
            return None
        if task.invoice_id:
            raise ConflictError(f"Task {task_id} is already billed on invoice {task.invoice_id}")

        invoice = self.store.invoices.create({
            "invoice_number": self._next_invoice_number(),
            "invoice_date": self.today(),
            "customer_id": task.assign_to_customer,
            "total_amount": task.billing_amount or 0,
            "paid_amount": task.paid_amount or 0,
        })
        logger.info(f"Invoice created: {invoice.invoice_number} for task {task_id}")

        try:
            linked = self.store.tasks.update(task_id, {"invoice_id": invoice.id})
        except StoreError as e:
            self._undo_invoice(invoice, e.message)
            raise

        if linked is None:
            self._undo_invoice(invoice, "task no longer exists")
            raise EntityNotFoundError("Task", task_id)

        return self._detail(invoice)

    def update_invoice(self, invoice_id: str, data: InvoiceUpdate) -> Optional[InvoiceDetailResponse]:
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        number = changes.get("invoice_number")
        if number:
            clash = [inv for inv in self.store.invoices.list({"invoice_number": number}) if inv.id != invoice_id]
            if clash:
                raise ConflictError(f"Invoice number {number} is already in use")

        invoice = self.store.invoices.update(invoice_id, changes)
        if invoice is None:
            return None
        return self._detail(invoice)

    def delete_invoice(self, invoice_id: str) -> bool:
        """Billed tasks go back to the unbilled pool; payments go with the invoice."""
        if self.store.invoices.get(invoice_id) is None:
            return False
        released = self.store.tasks.update_where({"invoice_id": invoice_id}, {"invoice_id": None})
        deleted = self.store.invoices.delete(invoice_id)
        if deleted:
            logger.info(f"Invoice deleted: {invoice_id} ({released} tasks released)")
        return deleted

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def list_payments(self, invoice_id: Optional[str] = None) -> List[PaymentResponse]:
        try:
            payments = self.store.payments.list({"invoice_id": invoice_id} if invoice_id else None)
        except StoreError as e:
            logger.error(f"Failed to list payments: {e.message}")
            return []
        return sorted(payments, key=lambda p: (p.payment_date, p.created_at), reverse=True)

    def record_payment(self, data: PaymentCreate) -> Optional[PaymentResponse]:
        invoice = self.store.invoices.get(data.invoice_id)
        if invoice is None:
            return None

        paid = (invoice.paid_amount or 0) + data.amount
        if not self.allow_overpayment and paid > (invoice.total_amount or 0):
            raise OverpaymentError(invoice.total_amount or 0, paid)

        payment = self.store.payments.create(data.model_dump())

        try:
            updated = self.store.invoices.update(invoice.id, {"paid_amount": paid})
        except StoreError as e:
            self._undo_payment(payment, e.message)
            raise

        if updated is None:
            self._undo_payment(payment, "invoice no longer exists")
            return None

        logger.info(f"Payment {payment.id} of {payment.amount:.2f} recorded on invoice {invoice.invoice_number}")
        return payment

    def delete_payment(self, payment_id: str) -> bool:
        payment = self.store.payments.get(payment_id)
        if payment is None:
            return False
        if not self.store.payments.delete(payment_id):
            return False

        try:
            invoice = self.store.invoices.get(payment.invoice_id)
            if invoice is not None:
                paid = max((invoice.paid_amount or 0) - payment.amount, 0)
                self.store.invoices.update(invoice.id, {"paid_amount": paid})
        except StoreError as e:
            raise PartialOperationError(
                "Delete payment", ["delete payment"], "update invoice paid amount", e.message
            ) from e

        logger.info(f"Payment deleted: {payment_id}")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _next_invoice_number(self) -> str:
        base = f"INV-{epoch_millis(self.clock())}"
        candidate = base
        suffix = 1
        while self.store.invoices.list({"invoice_number": candidate}):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _undo_invoice(self, invoice: InvoiceResponse, reason: str) -> None:
        logger.warning(f"Linking invoice {invoice.invoice_number} failed ({reason}); rolling back")
        try:
            self.store.invoices.delete(invoice.id)
        except StoreError as e:
            raise PartialOperationError(
                "Create invoice from task",
                ["create invoice"],
                "link task",
                f"{reason}; invoice {invoice.id} ({invoice.invoice_number}) is orphaned: {e.message}",
            ) from e

    def _undo_payment(self, payment: PaymentResponse, reason: str) -> None:
        logger.warning(f"Updating invoice for payment {payment.id} failed ({reason}); rolling back")
        try:
            self.store.payments.delete(payment.id)
        except StoreError as e:
            raise PartialOperationError(
                "Record payment",
                ["create payment"],
                "update invoice paid amount",
                f"{reason}; payment {payment.id} is orphaned: {e.message}",
            ) from e

    def _detail(self, invoice: InvoiceResponse, customers: Optional[Dict[str, str]] = None) -> InvoiceDetailResponse:
        if customers is not None:
            customer_name = customers.get(invoice.customer_id) if invoice.customer_id else None
        else:
            customer = self.store.customers.get(invoice.customer_id) if invoice.customer_id else None
            customer_name = customer.company_name if customer else None

        today = self.today()
        tasks = [
            InvoiceTaskSummary(
                id=task.id,
                title=task.title,
                billing_amount=task.billing_amount,
                paid_amount=task.paid_amount or 0,
                status=task.status,
            )
            for task in (with_effective_status(t, today) for t in self.store.tasks.list({"invoice_id": invoice.id}))
        ]
        return InvoiceDetailResponse(
            **invoice.model_dump(),
            customer_name=customer_name,
            balance=(invoice.total_amount or 0) - (invoice.paid_amount or 0),
            tasks=tasks,
        )

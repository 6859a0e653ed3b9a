# backoffice/api/v1/deps.py

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from backoffice.db.database import get_db
from backoffice.services.csv_service import CsvService
from backoffice.services.customer_service import CustomerService
from backoffice.services.document_store import DocumentStore, build_document_store
from backoffice.services.email_service import EmailService, email_service
from backoffice.services.employee_service import EmployeeService
from backoffice.services.invoice_service import InvoiceService
from backoffice.services.legal_case_service import LegalCaseService
from backoffice.services.report_service import ReportService
from backoffice.services.task_service import TaskService
from backoffice.store.base import Store
from backoffice.store.sql import SqlStore

# ============================================================================
# Infrastructure
# ============================================================================

def get_store(db: Session = Depends(get_db)) -> Store:
    """
    One SQL-backed store per request, sharing the request's session.
    """
    return SqlStore(db)


@lru_cache()
def get_document_store() -> DocumentStore:
    return build_document_store()


def get_email_service() -> EmailService:
    return email_service

# ============================================================================
# Services
# ============================================================================

def get_employee_service(store: Store = Depends(get_store)) -> EmployeeService:
    return EmployeeService(store)


def get_customer_service(store: Store = Depends(get_store)) -> CustomerService:
    return CustomerService(store)


def get_task_service(
    store: Store = Depends(get_store),
    emails: EmailService = Depends(get_email_service),
) -> TaskService:
    return TaskService(store, email_service=emails)


def get_invoice_service(store: Store = Depends(get_store)) -> InvoiceService:
    return InvoiceService(store)


def get_legal_case_service(
    store: Store = Depends(get_store),
    documents: DocumentStore = Depends(get_document_store),
) -> LegalCaseService:
    return LegalCaseService(store, documents)


def get_report_service(store: Store = Depends(get_store)) -> ReportService:
    return ReportService(store)


def get_csv_service(
    store: Store = Depends(get_store),
    tasks: TaskService = Depends(get_task_service),
) -> CsvService:
    return CsvService(store, tasks)

"""
Pydantic validation schemas
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Any, Optional, List
from datetime import date, datetime

from backoffice.db.models import PaymentMethod, TaskPriority, TaskStatus
from backoffice.utils.validators import (
    blank_to_none,
    parse_payment_method,
    parse_task_priority,
    parse_task_status,
)

# ============================================================================
# Employee Schemas
# ============================================================================

class EmployeeBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    position: str = Field(..., min_length=1, max_length=255)
    department: Optional[str] = None

class EmployeeCreate(EmployeeBase):
    pass

class EmployeeUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = None

class EmployeeResponse(EmployeeBase):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True

class EmployeeDeleteResponse(BaseModel):
    success: bool
    message: str
    unassigned_tasks: int = 0

# ============================================================================
# Customer Schemas
# ============================================================================

class CustomerBase(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_person: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone_number: Optional[str] = None

class CustomerCreate(CustomerBase):
    pass

class CustomerUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_person: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None

class CustomerResponse(CustomerBase):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True

# ============================================================================
# Task Schemas
# ============================================================================

class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[date] = None
    priority: TaskPriority = TaskPriority.medium
    assign_to_employee: Optional[str] = None
    assign_to_customer: Optional[str] = None
    billing_amount: Optional[float] = Field(None, ge=0)
    paid_amount: float = Field(0, ge=0)

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        return parse_task_priority(v)

    @field_validator("assign_to_employee", "assign_to_customer", mode="before")
    @classmethod
    def empty_reference(cls, v):
        return blank_to_none(v)

    @field_validator("paid_amount", mode="before")
    @classmethod
    def default_paid(cls, v):
        return 0 if v is None or v == "" else v

class TaskCreate(TaskBase):
    status: TaskStatus = TaskStatus.open

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return parse_task_status(v)

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assign_to_employee: Optional[str] = None
    assign_to_customer: Optional[str] = None
    billing_amount: Optional[float] = Field(None, ge=0)
    paid_amount: Optional[float] = Field(None, ge=0)

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        return None if v is None else parse_task_priority(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return None if v is None else parse_task_status(v)

    @field_validator("assign_to_employee", "assign_to_customer", mode="before")
    @classmethod
    def empty_reference(cls, v):
        return blank_to_none(v)

class TaskResponse(TaskBase):
    id: str
    status: TaskStatus
    invoice_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class TaskPaymentCreate(BaseModel):
    """Partial payment recorded directly on a task"""
    amount: float = Field(..., gt=0)

# ============================================================================
# Invoice & Payment Schemas
# ============================================================================

class InvoiceUpdate(BaseModel):
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=50)
    invoice_date: Optional[date] = None

class InvoiceResponse(BaseModel):
    id: str
    invoice_number: str
    invoice_date: date
    customer_id: Optional[str] = None
    total_amount: float = 0
    paid_amount: float = 0
    created_at: datetime

    class Config:
        from_attributes = True

class InvoiceTaskSummary(BaseModel):
    id: str
    title: str
    billing_amount: Optional[float] = None
    paid_amount: float = 0
    status: TaskStatus

class InvoiceDetailResponse(InvoiceResponse):
    customer_name: Optional[str] = None
    balance: float = 0
    tasks: List[InvoiceTaskSummary] = []

class PaymentCreate(BaseModel):
    invoice_id: str = Field(..., min_length=1)
    payment_date: date = Field(default_factory=date.today)
    amount: float = Field(..., gt=0)
    method: PaymentMethod
    reference: Optional[str] = None

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        return parse_payment_method(v)

class PaymentResponse(BaseModel):
    id: str
    invoice_id: str
    payment_date: date
    amount: float
    method: PaymentMethod
    reference: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

# ============================================================================
# Legal Case Schemas
# ============================================================================

class LegalCaseBase(BaseModel):
    case_number: str = Field(..., min_length=1, max_length=100)
    court_name: Optional[str] = None
    location: Optional[str] = None
    petitioner_vs_respondent: Optional[str] = None
    summary: Optional[str] = None

class LegalCaseCreate(LegalCaseBase):
    pass

class LegalCaseUpdate(BaseModel):
    case_number: Optional[str] = Field(None, min_length=1, max_length=100)
    court_name: Optional[str] = None
    location: Optional[str] = None
    petitioner_vs_respondent: Optional[str] = None
    summary: Optional[str] = None

class LegalCaseResponse(LegalCaseBase):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True

class HearingCreate(BaseModel):
    hearing_date: date

class HearingResponse(BaseModel):
    id: str
    legal_case_id: str
    hearing_date: date
    pdf_path: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class HearingDetailResponse(HearingResponse):
    pdf_url: Optional[str] = None

class LegalCaseDetailResponse(LegalCaseResponse):
    hearings: List[HearingDetailResponse] = []
    upcoming_hearings: List[HearingDetailResponse] = []
    past_hearings: List[HearingDetailResponse] = []

class DocumentUploadResponse(BaseModel):
    success: bool
    hearing_id: str
    pdf_path: str
    pdf_url: str
    # superseded document that is still in the store after a failed removal
    orphaned_document: Optional[str] = None

# ============================================================================
# Reports & Dashboard
# ============================================================================

class GroupSummary(BaseModel):
    total_billing: float = 0
    total_paid: float = 0
    balance_due: float = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    completion_rate: int = 0

class EmployeeReportRow(GroupSummary):
    employee_id: str
    employee: str

class CustomerReportRow(GroupSummary):
    customer_id: str
    customer: str

class UpcomingHearing(BaseModel):
    id: str
    hearing_date: date
    legal_case_id: str
    case_number: Optional[str] = None
    court_name: Optional[str] = None

class DashboardStats(BaseModel):
    total_employees: int = 0
    total_customers: int = 0
    tasks_in_progress: int = 0
    tasks_completed: int = 0
    tasks_overdue: int = 0
    completion_rate: int = 0
    total_invoices: int = 0
    total_paid: float = 0
    total_outstanding: float = 0
    total_cases: int = 0
    total_hearings: int = 0
    upcoming_hearings: List[UpcomingHearing] = []

# ============================================================================
# Misc
# ============================================================================

class DeleteResponse(BaseModel):
    success: bool
    message: str

class ImportResult(BaseModel):
    success: bool
    imported: int
    ids: List[str] = []

class SendEmailRequest(BaseModel):
    """Body of the completion-email endpoint (field names kept for the web client)"""
    customerEmail: Any = None
    natureOfWork: Any = None

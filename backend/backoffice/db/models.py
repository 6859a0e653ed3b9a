"""
SQLAlchemy ORM Models
"""

from __future__ import annotations

import enum

from sqlalchemy import (
    Column,
    Date,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    TIMESTAMP,
)
from sqlalchemy.orm import relationship

from backoffice.db.database import Base
from backoffice.utils.helpers import generate_uuid, utcnow

# ============================================================================
# Enums
# ============================================================================

class TaskStatus(str, enum.Enum):
    """Task status. Overdue is derived by the lifecycle rules, never set by callers."""
    open = "Open"
    in_progress = "In Progress"
    completed = "Completed"
    overdue = "Overdue"

class TaskPriority(str, enum.Enum):
    """Task priority"""
    low = "Low"
    medium = "Medium"
    high = "High"
    urgent = "Urgent"

class PaymentMethod(str, enum.Enum):
    """Payment methods accepted against an invoice"""
    cash = "Cash"
    bank_transfer = "Bank Transfer"
    upi = "UPI"
    card = "Card"


# ============================================================================
# People
# ============================================================================

class Employee(Base):
    """Employee model"""
    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    position = Column(String(255), nullable=False)
    department = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)


class Customer(Base):
    """Customer (client company) model"""
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)


# ============================================================================
# Work & Billing
# ============================================================================

class Task(Base):
    """Billable unit of work"""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(Date, nullable=True)
    priority = Column(String(20), nullable=False, default=TaskPriority.medium.value)
    status = Column(String(20), nullable=False, default=TaskStatus.open.value)

    assign_to_employee = Column(String(36), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    assign_to_customer = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    invoice_id = Column(String(36), ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True)

    billing_amount = Column(Float, nullable=True)
    paid_amount = Column(Float, nullable=False, default=0)

    completed_at = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    employee = relationship("Employee")
    customer = relationship("Customer")
    invoice = relationship("Invoice", back_populates="tasks")

    __table_args__ = (
        Index("idx_task_employee", "assign_to_employee"),
        Index("idx_task_customer", "assign_to_customer"),
        Index("idx_task_invoice", "invoice_id"),
        Index("idx_task_due_date", "due_date"),
    )


class Invoice(Base):
    """Invoice raised against a customer, seeded from a task"""
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    invoice_number = Column(String(50), unique=True, nullable=False)
    invoice_date = Column(Date, nullable=False)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    total_amount = Column(Float, nullable=False, default=0)
    paid_amount = Column(Float, nullable=False, default=0)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    customer = relationship("Customer")
    tasks = relationship("Task", back_populates="invoice")
    payments = relationship(
        "Payment",
        back_populates="invoice",
        cascade="all, delete-orphan",
    )


class Payment(Base):
    """Payment received against an invoice"""
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    invoice_id = Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    payment_date = Column(Date, nullable=False)
    amount = Column(Float, nullable=False)
    method = Column(String(30), nullable=False)
    reference = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    invoice = relationship("Invoice", back_populates="payments")

    __table_args__ = (
        Index("idx_payment_invoice", "invoice_id"),
    )


# ============================================================================
# Legal Cases
# ============================================================================

class LegalCase(Base):
    """Legal case tracked by the firm"""
    __tablename__ = "legal_cases"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    case_number = Column(String(100), nullable=False)
    court_name = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    petitioner_vs_respondent = Column(Text, nullable=True)
    summary = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    hearings = relationship(
        "Hearing",
        back_populates="legal_case",
        cascade="all, delete-orphan",
        order_by="Hearing.hearing_date",
    )


class Hearing(Base):
    """Hearing date of a legal case, optionally with an attached PDF"""
    __tablename__ = "legal_hearings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    legal_case_id = Column(String(36), ForeignKey("legal_cases.id", ondelete="CASCADE"), nullable=False)
    hearing_date = Column(Date, nullable=False)
    pdf_path = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    legal_case = relationship("LegalCase", back_populates="hearings")

    __table_args__ = (
        Index("idx_hearing_case_date", "legal_case_id", "hearing_date"),
    )

"""
Main API router aggregator
"""
from fastapi import APIRouter

from backoffice.api.v1.endpoints import (
    customers,
    dashboard,
    employees,
    health,
    invoices,
    legal_cases,
    notifications,
    payments,
    reports,
    tasks,
)

api_router = APIRouter()

# Include routers
api_router.include_router(employees.router, prefix="/employees", tags=["Employees"])
api_router.include_router(customers.router, prefix="/customers", tags=["Customers"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["Invoices"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(legal_cases.router, prefix="/legal-cases", tags=["Legal Cases"])
api_router.include_router(legal_cases.hearings_router, prefix="/hearings", tags=["Hearings"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])

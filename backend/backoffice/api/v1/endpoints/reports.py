"""
Employee / customer report endpoints
"""
from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from backoffice.api.v1.deps import get_report_service
from backoffice.db.schemas import CustomerReportRow, EmployeeReportRow
from backoffice.services.report_service import ReportService
from backoffice.utils.exceptions import ValidationFailedError

router = APIRouter()


def _check_range(from_date: Optional[date], to_date: Optional[date]) -> None:
    if from_date and to_date and from_date > to_date:
        raise ValidationFailedError("from_date must not be after to_date")


@router.get("/employees", response_model=List[EmployeeReportRow])
def employee_report(
    from_date: Optional[date] = Query(None, description="Due date lower bound (inclusive)"),
    to_date: Optional[date] = Query(None, description="Due date upper bound (inclusive)"),
    include_idle: bool = Query(False, description="Include employees without tasks"),
    service: ReportService = Depends(get_report_service),
):
    """Billing and completion summary per employee, sorted by name"""
    _check_range(from_date, to_date)
    rows = service.employee_report(from_date, to_date, include_idle)
    return sorted(rows, key=lambda row: row.employee.lower())


@router.get("/customers", response_model=List[CustomerReportRow])
def customer_report(
    from_date: Optional[date] = Query(None, description="Due date lower bound (inclusive)"),
    to_date: Optional[date] = Query(None, description="Due date upper bound (inclusive)"),
    include_idle: bool = Query(False, description="Include customers without tasks"),
    service: ReportService = Depends(get_report_service),
):
    """Billing and completion summary per customer, sorted by company name"""
    _check_range(from_date, to_date)
    rows = service.customer_report(from_date, to_date, include_idle)
    return sorted(rows, key=lambda row: row.customer.lower())

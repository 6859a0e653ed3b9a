"""
Dashboard statistics endpoints for webapp
"""
from fastapi import APIRouter, Depends

from backoffice.api.v1.deps import get_report_service
from backoffice.db import schemas
from backoffice.services.report_service import ReportService

router = APIRouter()


@router.get("/stats", response_model=schemas.DashboardStats)
def get_dashboard_stats(service: ReportService = Depends(get_report_service)):
    """
    Get comprehensive dashboard statistics
    """
    return service.dashboard_stats()

from fastapi import APIRouter, Depends

from ...api.deps import get_admin_user, get_reporting_service
from ...core.security import SessionIdentity
from ...services.reporting_service import ReportingService
from ...schemas.report import DashboardSummary

router = APIRouter(prefix="/reports", tags=["Reports"])

@router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary(
    admin: SessionIdentity = Depends(get_admin_user),
    reporting: ReportingService = Depends(get_reporting_service),
):
    """Today's, upcoming and unique-patient figures for the admin dashboard."""
    return reporting.summary()

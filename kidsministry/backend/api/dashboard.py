from fastapi import APIRouter, Depends

from .auth import require_session
from .dependencies import get_report_service
from ..services.report_service import DashboardSummary, ReportService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"], dependencies=[Depends(require_session)])


@router.get("", response_model=DashboardSummary, summary="Counts, next event/lesson, class distribution and recent messages")
async def get_dashboard(service: ReportService = Depends(get_report_service)):
    return service.dashboard()

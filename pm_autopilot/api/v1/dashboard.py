"""
Dashboard endpoint.
"""

from fastapi import APIRouter, Depends

from pm_autopilot.api.deps import get_current_session, get_dashboard_service
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.services.dashboard_service import DashboardService, DashboardStats

router = APIRouter(prefix="/dashboard")


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    session: AuthSession = Depends(get_current_session),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStats:
    """Counts shown on the dashboard header."""
    return await dashboard_service.stats(session)

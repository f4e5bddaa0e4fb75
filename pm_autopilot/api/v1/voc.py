"""
Customer feedback analysis endpoint.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from pm_autopilot.api.deps import get_current_session, get_voc_analysis_service
from pm_autopilot.core.logging import get_logger
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.services.voc_analysis_service import VOCAnalysisResult, VOCAnalysisService

logger = get_logger(__name__)

router = APIRouter(prefix="/voc")


class AnalyzeRequest(BaseModel):
    """Spreadsheet to analyze."""

    spreadsheet_url: str = Field(..., description="Shared Google Sheets link")


class AnalyzeResponse(VOCAnalysisResult):
    message: str


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_feedback(
    request: AnalyzeRequest,
    session: AuthSession = Depends(get_current_session),
    voc_service: VOCAnalysisService = Depends(get_voc_analysis_service),
) -> AnalyzeResponse:
    """
    Analyze the feedback in a shared spreadsheet.

    Creates or refreshes the feedback source and derives task candidates
    from the recommended features.
    """
    result = await voc_service.analyze(session, request.spreadsheet_url)
    return AnalyzeResponse(
        **result.model_dump(),
        message=(
            f"Analyzed {result.feedback_count} feedback entries "
            f"and created {len(result.tasks)} tasks."
        ),
    )

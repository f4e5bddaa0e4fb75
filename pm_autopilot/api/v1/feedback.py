"""
Feedback source endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from pm_autopilot.api.deps import get_current_session, get_feedback_service
from pm_autopilot.core.constants import FeedbackSourceStatus
from pm_autopilot.core.exceptions import InvalidInputError
from pm_autopilot.domain.feedback import FeedbackSource
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.services.feedback_service import FeedbackService

router = APIRouter(prefix="/feedback-sources")


class CreateFeedbackSourceRequest(BaseModel):
    """Register a spreadsheet as a feedback source."""

    name: str
    source_url: str
    description: Optional[str] = None


class FeedbackSourceStatusRequest(BaseModel):
    status: FeedbackSourceStatus


class FeedbackSourceListResponse(BaseModel):
    sources: list[FeedbackSource] = Field(default_factory=list)
    total: int


@router.get("", response_model=FeedbackSourceListResponse)
async def list_feedback_sources(
    status_filter: str = Query(default="active", alias="status", description="Status or 'all'"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AuthSession = Depends(get_current_session),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackSourceListResponse:
    """List feedback sources, active ones by default."""
    if status_filter == "all":
        source_status = None
    else:
        try:
            source_status = FeedbackSourceStatus(status_filter)
        except ValueError as e:
            raise InvalidInputError(f"Unknown status '{status_filter}'", field="status") from e

    sources = await feedback_service.list_sources(
        session, status=source_status, limit=limit, offset=offset
    )
    return FeedbackSourceListResponse(sources=sources, total=len(sources))


@router.post("", response_model=FeedbackSource, status_code=status.HTTP_201_CREATED)
async def create_feedback_source(
    request: CreateFeedbackSourceRequest,
    session: AuthSession = Depends(get_current_session),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackSource:
    """Register a feedback source."""
    return await feedback_service.create_source(
        session, request.name, request.source_url, request.description
    )


@router.get("/{source_id}", response_model=FeedbackSource)
async def get_feedback_source(
    source_id: str,
    session: AuthSession = Depends(get_current_session),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackSource:
    """Get a feedback source."""
    return await feedback_service.get_source(session, source_id)


@router.patch("/{source_id}/status", response_model=FeedbackSource)
async def update_feedback_source_status(
    source_id: str,
    request: FeedbackSourceStatusRequest,
    session: AuthSession = Depends(get_current_session),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackSource:
    """Activate, deactivate or archive a feedback source."""
    return await feedback_service.update_status(session, source_id, request.status)

"""
Service launch endpoints.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel, Field

from pm_autopilot.api.deps import get_current_session, get_launch_service
from pm_autopilot.core.constants import LaunchStatus
from pm_autopilot.domain.launch import ServiceLaunch
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.services.launch_service import LaunchContentResult, LaunchService

router = APIRouter(prefix="/launches")


class LaunchContentRequest(BaseModel):
    content_type: str = Field(..., description="Content label, e.g. FAQ or 배너 메시지")


class LaunchStatusRequest(BaseModel):
    status: LaunchStatus


@router.get("/{launch_id}", response_model=ServiceLaunch)
async def get_launch(
    launch_id: str,
    session: AuthSession = Depends(get_current_session),
    launch_service: LaunchService = Depends(get_launch_service),
) -> ServiceLaunch:
    """Get a service launch."""
    return await launch_service.get_launch(session, launch_id)


@router.put("/{launch_id}/images/{slot}", response_model=ServiceLaunch)
async def upload_launch_image(
    launch_id: str,
    slot: int,
    file: UploadFile = File(...),
    session: AuthSession = Depends(get_current_session),
    launch_service: LaunchService = Depends(get_launch_service),
) -> ServiceLaunch:
    """Upload an image into slot 0, 1 or 2, replacing any previous one."""
    data = await file.read()
    return await launch_service.upload_image(
        session, launch_id, slot, file.filename or "", data
    )


@router.post("/{launch_id}/content", response_model=LaunchContentResult)
async def generate_launch_content(
    launch_id: str,
    request: LaunchContentRequest,
    session: AuthSession = Depends(get_current_session),
    launch_service: LaunchService = Depends(get_launch_service),
) -> LaunchContentResult:
    """Generate one kind of launch content from the PRD and images."""
    return await launch_service.generate_content(session, launch_id, request.content_type)


@router.patch("/{launch_id}/status", response_model=ServiceLaunch)
async def update_launch_status(
    launch_id: str,
    request: LaunchStatusRequest,
    session: AuthSession = Depends(get_current_session),
    launch_service: LaunchService = Depends(get_launch_service),
) -> ServiceLaunch:
    """Move a launch forward to ready or launched."""
    return await launch_service.update_status(session, launch_id, request.status)

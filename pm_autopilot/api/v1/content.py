"""
Content asset endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from pm_autopilot.api.deps import get_content_service, get_current_session
from pm_autopilot.core.constants import ContentAssetType, DocumentStatus, TargetChannel
from pm_autopilot.domain.content import ContentAsset, ContentAssetWithDetails
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.services.content_service import ContentService

router = APIRouter(prefix="/content-assets")


class CreateContentAssetRequest(BaseModel):
    type: ContentAssetType
    title: str
    content: Optional[str] = None
    task_id: Optional[str] = None
    prd_id: Optional[str] = None
    target_channel: Optional[TargetChannel] = None


class GenerateContentAssetRequest(BaseModel):
    """Generate an asset of one type from a PRD."""

    prd_id: str
    type: ContentAssetType
    target_channel: Optional[TargetChannel] = None


class ContentAssetStatusRequest(BaseModel):
    status: DocumentStatus


@router.get("", response_model=list[ContentAssetWithDetails])
async def list_content_assets(
    asset_type: Optional[ContentAssetType] = Query(default=None, alias="type"),
    status_filter: Optional[DocumentStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AuthSession = Depends(get_current_session),
    content_service: ContentService = Depends(get_content_service),
) -> list[ContentAssetWithDetails]:
    """List content assets with their task and PRD."""
    return await content_service.list_assets(
        session, asset_type=asset_type, status=status_filter, limit=limit, offset=offset
    )


@router.post("", response_model=ContentAsset, status_code=status.HTTP_201_CREATED)
async def create_content_asset(
    request: CreateContentAssetRequest,
    session: AuthSession = Depends(get_current_session),
    content_service: ContentService = Depends(get_content_service),
) -> ContentAsset:
    """Create a content asset by hand."""
    return await content_service.create_asset(
        session,
        asset_type=request.type,
        title=request.title,
        content=request.content,
        task_id=request.task_id,
        prd_id=request.prd_id,
        target_channel=request.target_channel,
    )


@router.post("/generate", response_model=ContentAsset, status_code=status.HTTP_201_CREATED)
async def generate_content_asset(
    request: GenerateContentAssetRequest,
    session: AuthSession = Depends(get_current_session),
    content_service: ContentService = Depends(get_content_service),
) -> ContentAsset:
    """Generate a content asset from a PRD."""
    return await content_service.generate_asset(
        session, request.prd_id, request.type, target_channel=request.target_channel
    )


@router.get("/{asset_id}", response_model=ContentAsset)
async def get_content_asset(
    asset_id: str,
    session: AuthSession = Depends(get_current_session),
    content_service: ContentService = Depends(get_content_service),
) -> ContentAsset:
    """Get a content asset."""
    return await content_service.get_asset(session, asset_id)


@router.patch("/{asset_id}/status", response_model=ContentAsset)
async def update_content_asset_status(
    asset_id: str,
    request: ContentAssetStatusRequest,
    session: AuthSession = Depends(get_current_session),
    content_service: ContentService = Depends(get_content_service),
) -> ContentAsset:
    """Move a content asset forward in its review lifecycle."""
    return await content_service.update_status(session, asset_id, request.status)

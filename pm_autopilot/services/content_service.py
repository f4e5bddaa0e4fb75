"""
Content asset management and generation.
"""

from __future__ import annotations

from typing import Any, Optional

from pm_autopilot.core.config import settings
from pm_autopilot.core.constants import (
    DOCUMENT_STATUS_ORDER,
    ContentAssetType,
    DocumentStatus,
    TargetChannel,
)
from pm_autopilot.core.exceptions import (
    ContentAssetNotFoundError,
    InvalidInputError,
    PRDNotFoundError,
)
from pm_autopilot.core.logging import get_logger
from pm_autopilot.core.security import generate_id
from pm_autopilot.domain.content import ContentAsset, ContentAssetWithDetails
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.llm.gemini_client import LLMClient
from pm_autopilot.prompts.assembler import build_content_prompt, get_style_catalog
from pm_autopilot.services.transitions import check_forward_transition

logger = get_logger(__name__)


class ContentService:
    """Manages generated content assets (FAQ, banners, notifications, guides)."""

    def __init__(
        self,
        content_repository: Any,
        task_repository: Any,
        prd_repository: Any,
        llm_client: LLMClient,
        launch_repository: Optional[Any] = None,
    ) -> None:
        self.content_repository = content_repository
        self.task_repository = task_repository
        self.prd_repository = prd_repository
        self.llm_client = llm_client
        self.launch_repository = launch_repository

    async def list_assets(
        self,
        session: AuthSession,
        asset_type: Optional[ContentAssetType] = None,
        status: Optional[DocumentStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ContentAssetWithDetails]:
        """List assets, newest first, each joined with its task and PRD."""
        filters: dict[str, Any] = {}
        if asset_type is not None:
            filters["type"] = asset_type
        if status is not None:
            filters["status"] = status

        assets = await self.content_repository.list(filters or None, limit=limit, offset=offset)

        tasks: dict[str, Any] = {}
        prds: dict[str, Any] = {}
        results = []
        for asset in assets:
            if asset.task_id and asset.task_id not in tasks:
                tasks[asset.task_id] = await self.task_repository.get(asset.task_id)
            if asset.prd_id and asset.prd_id not in prds:
                prds[asset.prd_id] = await self.prd_repository.get(asset.prd_id)
            results.append(
                ContentAssetWithDetails(
                    **asset.model_dump(exclude={"word_count"}),
                    task=tasks.get(asset.task_id) if asset.task_id else None,
                    prd=prds.get(asset.prd_id) if asset.prd_id else None,
                )
            )
        return results

    async def get_asset(self, session: AuthSession, asset_id: str) -> ContentAsset:
        asset = await self.content_repository.get(asset_id)
        if asset is None:
            raise ContentAssetNotFoundError(asset_id)
        return asset

    async def create_asset(
        self,
        session: AuthSession,
        asset_type: ContentAssetType,
        title: str,
        content: Optional[str] = None,
        task_id: Optional[str] = None,
        prd_id: Optional[str] = None,
        target_channel: Optional[TargetChannel] = None,
    ) -> ContentAsset:
        """
        Create a content asset.

        Raises:
            InvalidInputError: If the title is blank
        """
        if not (title or "").strip():
            raise InvalidInputError("Title is required", field="title")

        asset = ContentAsset(
            id=generate_id("content_asset"),
            created_by=session.user_id,
            type=asset_type,
            title=title.strip(),
            content=content,
            task_id=task_id,
            prd_id=prd_id,
            target_channel=target_channel,
        )
        await self.content_repository.save(asset)

        logger.info("Content asset created", asset_id=asset.id, type=asset.type.value)
        return asset

    async def update_status(
        self,
        session: AuthSession,
        asset_id: str,
        status: DocumentStatus,
    ) -> ContentAsset:
        """
        Move an asset forward through draft, review, approved and published.

        Raises:
            InvalidStatusTransitionError: If the move goes backwards
        """
        asset = await self.get_asset(session, asset_id)
        check_forward_transition("ContentAsset", DOCUMENT_STATUS_ORDER, asset.status, status)

        updated = await self.content_repository.update_fields(asset_id, status=status)
        if updated is None:
            raise ContentAssetNotFoundError(asset_id)

        logger.info("Content asset status updated", asset_id=asset_id, status=status.value)
        return updated

    async def generate_asset(
        self,
        session: AuthSession,
        prd_id: str,
        asset_type: ContentAssetType,
        target_channel: Optional[TargetChannel] = None,
    ) -> ContentAsset:
        """
        Generate a content asset from a PRD.

        Images uploaded to the PRD's launch, if any, are referenced in the
        prompt.

        Raises:
            PRDNotFoundError: If the PRD does not exist
            UpstreamServiceError: If the model call fails
        """
        prd = await self.prd_repository.get(prd_id)
        if prd is None:
            raise PRDNotFoundError(prd_id)

        image_urls: list[str] = []
        if self.launch_repository is not None:
            launch = await self.launch_repository.get_by_prd(prd_id)
            if launch is not None:
                image_urls = launch.image_urls

        style = get_style_catalog().get(asset_type.value)
        label = style.label if style else asset_type.value

        text = await self.llm_client.generate(
            build_content_prompt(prd, label, image_urls), settings.gemini.content_max_tokens
        )

        asset = ContentAsset(
            id=generate_id("content_asset"),
            created_by=session.user_id,
            type=asset_type,
            title=f"{prd.title} - {label}",
            content=text,
            task_id=prd.task_id,
            prd_id=prd.id,
            target_channel=target_channel,
        )
        await self.content_repository.save(asset)

        logger.info(
            "Content asset generated",
            asset_id=asset.id,
            prd_id=prd_id,
            type=asset_type.value,
            word_count=asset.word_count,
        )
        return asset

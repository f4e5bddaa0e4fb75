"""
Service launch preparation: images and generated launch content.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Any

from pydantic import BaseModel, Field

from pm_autopilot.core.config import settings
from pm_autopilot.core.constants import LAUNCH_IMAGE_SLOTS, LAUNCH_STATUS_ORDER, LaunchStatus
from pm_autopilot.core.exceptions import (
    InvalidInputError,
    PRDNotFoundError,
    ServiceLaunchNotFoundError,
)
from pm_autopilot.core.logging import get_logger
from pm_autopilot.core.security import generate_id
from pm_autopilot.domain.launch import ServiceLaunch
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.llm.gemini_client import LLMClient
from pm_autopilot.prompts.assembler import build_content_prompt
from pm_autopilot.services.transitions import check_forward_transition
from pm_autopilot.storage.image_storage import LocalImageStorage

logger = get_logger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}


class LaunchContentResult(BaseModel):
    """Generated launch text and the launch it was merged into."""

    content_type: str
    content: str
    launch: ServiceLaunch = Field(..., description="Launch after the merge")


class LaunchService:
    """Manages the one launch record that belongs to each PRD."""

    def __init__(
        self,
        launch_repository: Any,
        prd_repository: Any,
        storage: LocalImageStorage,
        llm_client: LLMClient,
    ) -> None:
        self.launch_repository = launch_repository
        self.prd_repository = prd_repository
        self.storage = storage
        self.llm_client = llm_client

    async def get_launch(self, session: AuthSession, launch_id: str) -> ServiceLaunch:
        launch = await self.launch_repository.get(launch_id)
        if launch is None:
            raise ServiceLaunchNotFoundError(launch_id)
        return launch

    async def get_or_create(self, session: AuthSession, prd_id: str) -> ServiceLaunch:
        """
        Get the PRD's launch, creating it in ``preparing`` if there is none.

        Raises:
            PRDNotFoundError: If the PRD does not exist
        """
        if not await self.prd_repository.exists(prd_id):
            raise PRDNotFoundError(prd_id)

        launch = await self.launch_repository.get_by_prd(prd_id)
        if launch is not None:
            return launch

        launch = ServiceLaunch(
            id=generate_id("service_launch"),
            created_by=session.user_id,
            prd_id=prd_id,
            status=LaunchStatus.PREPARING,
        )
        await self.launch_repository.save(launch)

        logger.info("Service launch created", launch_id=launch.id, prd_id=prd_id)
        return launch

    async def upload_image(
        self,
        session: AuthSession,
        launch_id: str,
        slot: int,
        filename: str,
        data: bytes,
    ) -> ServiceLaunch:
        """
        Store an image in one of the launch's three slots.

        The object key is ``<launch_id>_image_<slot+1>.<ext>``; uploading to a
        filled slot replaces the image.

        Raises:
            InvalidInputError: On a bad slot, file type, or size
            ServiceLaunchNotFoundError: If the launch does not exist
            StorageError: If the image cannot be stored
        """
        if not 0 <= slot < LAUNCH_IMAGE_SLOTS:
            raise InvalidInputError(
                f"Image slot must be between 0 and {LAUNCH_IMAGE_SLOTS - 1}", field="slot"
            )

        extension = PurePath(filename or "").suffix.lstrip(".").lower()
        if extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise InvalidInputError(
                f"Unsupported image type '{extension or filename}'", field="file"
            )
        if not data:
            raise InvalidInputError("Image file is empty", field="file")
        if len(data) > settings.storage.max_upload_mb * 1024 * 1024:
            raise InvalidInputError(
                f"Image exceeds {settings.storage.max_upload_mb} MB", field="file"
            )

        launch = await self.get_launch(session, launch_id)
        key = f"{launch.id}_image_{slot + 1}.{extension}"
        url = await self.storage.upload(key, data)

        updated = await self.launch_repository.update_fields(
            launch.id, **{ServiceLaunch.image_field(slot): url}
        )
        if updated is None:
            raise ServiceLaunchNotFoundError(launch_id)

        logger.info("Launch image uploaded", launch_id=launch_id, slot=slot, key=key)
        return updated

    async def generate_content(
        self,
        session: AuthSession,
        launch_id: str,
        content_type: str,
    ) -> LaunchContentResult:
        """
        Generate one kind of launch content and store it under its label.

        The stored record is read again after generation so content produced
        concurrently for other labels is kept.

        Raises:
            InvalidInputError: If the content type is blank
            ServiceLaunchNotFoundError: If the launch does not exist
            PRDNotFoundError: If the launch's PRD no longer exists
            UpstreamServiceError: If the model call fails
        """
        content_type = (content_type or "").strip()
        if not content_type:
            raise InvalidInputError("Content type is required", field="content_type")

        launch = await self.get_launch(session, launch_id)
        prd = await self.prd_repository.get(launch.prd_id)
        if prd is None:
            raise PRDNotFoundError(launch.prd_id)

        text = await self.llm_client.generate(
            build_content_prompt(prd, content_type, launch.image_urls),
            settings.gemini.content_max_tokens,
        )

        current = await self.get_launch(session, launch_id)
        merged = {**current.generated_content, content_type: text}
        updated = await self.launch_repository.update_fields(launch_id, generated_content=merged)
        if updated is None:
            raise ServiceLaunchNotFoundError(launch_id)

        logger.info(
            "Launch content generated",
            launch_id=launch_id,
            content_type=content_type,
            chars=len(text),
        )
        return LaunchContentResult(content_type=content_type, content=text, launch=updated)

    async def update_status(
        self,
        session: AuthSession,
        launch_id: str,
        status: LaunchStatus,
    ) -> ServiceLaunch:
        """
        Move a launch forward through preparing, ready and launched.

        Raises:
            InvalidStatusTransitionError: If the move goes backwards
        """
        launch = await self.get_launch(session, launch_id)
        check_forward_transition("ServiceLaunch", LAUNCH_STATUS_ORDER, launch.status, status)

        updated = await self.launch_repository.update_fields(launch_id, status=status)
        if updated is None:
            raise ServiceLaunchNotFoundError(launch_id)

        logger.info("Launch status updated", launch_id=launch_id, status=status.value)
        return updated

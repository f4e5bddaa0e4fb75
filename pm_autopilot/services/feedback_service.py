"""
Feedback source management.
"""

from __future__ import annotations

from typing import Optional

from pm_autopilot.core.constants import FeedbackSourceStatus
from pm_autopilot.core.exceptions import FeedbackSourceNotFoundError, InvalidInputError
from pm_autopilot.core.logging import get_logger
from pm_autopilot.core.security import generate_id
from pm_autopilot.domain.feedback import FeedbackSource
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.ingestion.sheet_parser import extract_spreadsheet_id
from pm_autopilot.repositories.base import BaseRepository

logger = get_logger(__name__)


class FeedbackService:
    """Registers and lists feedback sources."""

    def __init__(self, feedback_repository: BaseRepository[FeedbackSource]) -> None:
        self.feedback_repository = feedback_repository

    async def list_sources(
        self,
        session: AuthSession,
        status: Optional[FeedbackSourceStatus] = FeedbackSourceStatus.ACTIVE,
        limit: int = 100,
        offset: int = 0,
    ) -> list[FeedbackSource]:
        """List sources, newest first; ``status=None`` lists every status."""
        filters = {"status": status} if status is not None else None
        return await self.feedback_repository.list(filters, limit=limit, offset=offset)

    async def get_source(self, session: AuthSession, source_id: str) -> FeedbackSource:
        source = await self.feedback_repository.get(source_id)
        if source is None:
            raise FeedbackSourceNotFoundError(source_id)
        return source

    async def create_source(
        self,
        session: AuthSession,
        name: str,
        source_url: str,
        description: Optional[str] = None,
    ) -> FeedbackSource:
        """
        Register a spreadsheet as a feedback source.

        Raises:
            InvalidInputError: If the name is blank or the URL is already registered
            InvalidSourceError: If the URL is not a spreadsheet link
        """
        if not (name or "").strip():
            raise InvalidInputError("Name is required", field="name")
        source_url = (source_url or "").strip()
        extract_spreadsheet_id(source_url)
        if await self.feedback_repository.get_by_url(source_url) is not None:
            raise InvalidInputError(
                "A feedback source is already registered for this URL", field="source_url"
            )

        source = FeedbackSource(
            id=generate_id("feedback_source"),
            created_by=session.user_id,
            name=name.strip(),
            source_url=source_url,
            description=description,
        )
        await self.feedback_repository.save(source)

        logger.info("Feedback source created", source_id=source.id, user_id=session.user_id)
        return source

    async def update_status(
        self,
        session: AuthSession,
        source_id: str,
        status: FeedbackSourceStatus,
    ) -> FeedbackSource:
        """Set a source's status; sources are archived rather than deleted."""
        updated = await self.feedback_repository.update_fields(source_id, status=status)
        if updated is None:
            raise FeedbackSourceNotFoundError(source_id)

        logger.info("Feedback source status updated", source_id=source_id, status=status.value)
        return updated

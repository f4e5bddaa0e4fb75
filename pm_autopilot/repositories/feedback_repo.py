"""
Feedback source repository.
"""

from __future__ import annotations

from typing import Optional

from pm_autopilot.domain.feedback import FeedbackSource
from pm_autopilot.repositories.memory import InMemoryRepository
from pm_autopilot.repositories.postgres import PostgresRepository


class InMemoryFeedbackSourceRepository(InMemoryRepository[FeedbackSource]):
    """In-memory feedback source repository for development/testing."""

    model_type = FeedbackSource
    entity_name = "Feedback source"

    async def get_by_url(self, source_url: str) -> Optional[FeedbackSource]:
        """Get the source registered for a spreadsheet URL."""
        matches = await self.list({"source_url": source_url}, limit=1)
        return matches[0] if matches else None


class PostgresFeedbackSourceRepository(PostgresRepository[FeedbackSource]):
    """PostgreSQL feedback source repository."""

    model_type = FeedbackSource
    table = "feedback_sources"

    async def get_by_url(self, source_url: str) -> Optional[FeedbackSource]:
        """Get the source registered for a spreadsheet URL."""
        matches = await self.list({"source_url": source_url}, limit=1)
        return matches[0] if matches else None

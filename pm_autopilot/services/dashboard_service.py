"""
Dashboard summary counts.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from pm_autopilot.core.constants import FeedbackSourceStatus, TaskStatus
from pm_autopilot.domain.user import AuthSession


class DashboardStats(BaseModel):
    """Headline numbers for the dashboard."""

    active_feedback_sources: int
    total_tasks: int
    completed_tasks: int
    content_assets: int
    prds: int


class DashboardService:
    """Computes dashboard counts. Each call re-queries the store."""

    def __init__(
        self,
        feedback_repository: Any,
        task_repository: Any,
        content_repository: Any,
        prd_repository: Any,
    ) -> None:
        self.feedback_repository = feedback_repository
        self.task_repository = task_repository
        self.content_repository = content_repository
        self.prd_repository = prd_repository

    async def stats(self, session: AuthSession) -> DashboardStats:
        return DashboardStats(
            active_feedback_sources=await self.feedback_repository.count(
                {"status": FeedbackSourceStatus.ACTIVE}
            ),
            total_tasks=await self.task_repository.count(),
            completed_tasks=await self.task_repository.count({"status": TaskStatus.COMPLETED}),
            content_assets=await self.content_repository.count(),
            prds=await self.prd_repository.count(),
        )

"""
Task candidate listing, ranking and workflow.
"""

from __future__ import annotations

import math
from typing import Any, Optional

import pydantic
from pydantic import BaseModel, Field

from pm_autopilot.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, TaskPriority, TaskStatus
from pm_autopilot.core.exceptions import InvalidInputError, TaskNotFoundError
from pm_autopilot.core.logging import get_logger
from pm_autopilot.core.security import generate_id
from pm_autopilot.domain.task import TaskCandidate
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.repositories.base import BaseRepository
from pm_autopilot.services.ranking import rank_tasks
from pm_autopilot.services.transitions import check_task_transition

logger = get_logger(__name__)


class TaskPage(BaseModel):
    """One page of tasks, newest first."""

    items: list[TaskCandidate] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)


class TaskService:
    """Manages task candidates."""

    def __init__(self, task_repository: BaseRepository[TaskCandidate]) -> None:
        self.task_repository = task_repository

    async def list_tasks(
        self,
        session: AuthSession,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        status: Optional[TaskStatus] = None,
    ) -> TaskPage:
        """
        List tasks one page at a time.

        Raises:
            InvalidInputError: If the page or page size is out of range
        """
        if page < 1:
            raise InvalidInputError("Page must be 1 or greater", field="page")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise InvalidInputError(
                f"Page size must be between 1 and {MAX_PAGE_SIZE}", field="page_size"
            )

        filters = {"status": status} if status is not None else None
        total = await self.task_repository.count(filters)
        items = await self.task_repository.list(
            filters, limit=page_size, offset=(page - 1) * page_size
        )
        return TaskPage(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size),
        )

    async def list_ranked(
        self,
        session: AuthSession,
        status: Optional[TaskStatus] = None,
    ) -> list[TaskCandidate]:
        """All tasks ordered by priority score, lowest (most urgent) first."""
        filters = {"status": status} if status is not None else None
        total = await self.task_repository.count(filters)
        tasks = await self.task_repository.list(filters, limit=max(total, 1))
        return rank_tasks(tasks)

    async def get_task(self, session: AuthSession, task_id: str) -> TaskCandidate:
        task = await self.task_repository.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def create_task(
        self,
        session: AuthSession,
        title: str,
        description: Optional[str] = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        source_feedback_id: Optional[str] = None,
        **scores: Any,
    ) -> TaskCandidate:
        """
        Create a task by hand.

        Args:
            scores: ``frequency_score``, ``impact_score``, ``development_cost``
                and ``effect_score``

        Raises:
            InvalidInputError: If the title is blank or a score is out of range
        """
        if not (title or "").strip():
            raise InvalidInputError("Title is required", field="title")

        try:
            task = TaskCandidate(
                id=generate_id("task"),
                created_by=session.user_id,
                title=title.strip(),
                description=description,
                priority=priority,
                source_feedback_id=source_feedback_id,
                **scores,
            )
        except pydantic.ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            raise InvalidInputError(error["msg"], field=field) from e

        await self.task_repository.save(task)
        logger.info("Task created", task_id=task.id, user_id=session.user_id)
        return task

    async def update_status(
        self,
        session: AuthSession,
        task_id: str,
        status: TaskStatus,
    ) -> TaskCandidate:
        """
        Move a task through its workflow.

        Raises:
            TaskNotFoundError: If the task does not exist
            InvalidStatusTransitionError: If the move is not allowed
        """
        task = await self.get_task(session, task_id)
        check_task_transition(task.status, status)

        updated = await self.task_repository.update_fields(task_id, status=status)
        if updated is None:
            raise TaskNotFoundError(task_id)

        logger.info(
            "Task status updated",
            task_id=task_id,
            from_status=task.status.value,
            to_status=status.value,
        )
        return updated

"""
Task candidate endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from pm_autopilot.api.deps import get_current_session, get_task_service
from pm_autopilot.core.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SCORE_MAX,
    SCORE_MIN,
    TaskPriority,
    TaskStatus,
)
from pm_autopilot.domain.task import TaskCandidate
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.services.task_service import TaskPage, TaskService

router = APIRouter(prefix="/tasks")


class CreateTaskRequest(BaseModel):
    """Create a task by hand."""

    title: str
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    source_feedback_id: Optional[str] = None
    frequency_score: Optional[int] = Field(default=None, ge=0)
    impact_score: Optional[int] = Field(default=None, ge=0)
    development_cost: Optional[int] = Field(default=None, ge=SCORE_MIN, le=SCORE_MAX)
    effect_score: Optional[int] = Field(default=None, ge=SCORE_MIN, le=SCORE_MAX)


class TaskStatusRequest(BaseModel):
    status: TaskStatus


@router.get("", response_model=TaskPage)
async def list_tasks(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    session: AuthSession = Depends(get_current_session),
    task_service: TaskService = Depends(get_task_service),
) -> TaskPage:
    """List tasks page by page, newest first."""
    return await task_service.list_tasks(session, page, page_size, status=status_filter)


@router.get("/ranked", response_model=list[TaskCandidate])
async def list_ranked_tasks(
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    session: AuthSession = Depends(get_current_session),
    task_service: TaskService = Depends(get_task_service),
) -> list[TaskCandidate]:
    """List tasks by priority score, most urgent first."""
    return await task_service.list_ranked(session, status=status_filter)


@router.post("", response_model=TaskCandidate, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: CreateTaskRequest,
    session: AuthSession = Depends(get_current_session),
    task_service: TaskService = Depends(get_task_service),
) -> TaskCandidate:
    """Create a task candidate."""
    return await task_service.create_task(
        session,
        title=request.title,
        description=request.description,
        priority=request.priority,
        source_feedback_id=request.source_feedback_id,
        frequency_score=request.frequency_score,
        impact_score=request.impact_score,
        development_cost=request.development_cost,
        effect_score=request.effect_score,
    )


@router.get("/{task_id}", response_model=TaskCandidate)
async def get_task(
    task_id: str,
    session: AuthSession = Depends(get_current_session),
    task_service: TaskService = Depends(get_task_service),
) -> TaskCandidate:
    """Get a task candidate."""
    return await task_service.get_task(session, task_id)


@router.patch("/{task_id}/status", response_model=TaskCandidate)
async def update_task_status(
    task_id: str,
    request: TaskStatusRequest,
    session: AuthSession = Depends(get_current_session),
    task_service: TaskService = Depends(get_task_service),
) -> TaskCandidate:
    """Approve, start, complete or reject a task."""
    return await task_service.update_status(session, task_id, request.status)

"""
Unit tests for the task service.
"""

import pytest

from pm_autopilot.core.constants import TaskStatus
from pm_autopilot.core.exceptions import (
    InvalidInputError,
    InvalidStatusTransitionError,
    TaskNotFoundError,
)
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.repositories import InMemoryTaskRepository
from pm_autopilot.services.task_service import TaskService


@pytest.fixture
def task_service() -> TaskService:
    return TaskService(InMemoryTaskRepository())


@pytest.mark.asyncio
async def test_create_and_get(task_service: TaskService, session: AuthSession) -> None:
    task = await task_service.create_task(
        session, "  Faster login  ", description="SSO", development_cost=2, effect_score=1
    )

    assert task.id.startswith("task_")
    assert task.title == "Faster login"
    assert task.created_by == session.user_id
    assert task.status == TaskStatus.PENDING

    fetched = await task_service.get_task(session, task.id)
    assert fetched.priority_score == 2


@pytest.mark.asyncio
async def test_create_requires_title(task_service: TaskService, session: AuthSession) -> None:
    with pytest.raises(InvalidInputError):
        await task_service.create_task(session, "   ")


@pytest.mark.asyncio
async def test_create_rejects_out_of_range_score(
    task_service: TaskService, session: AuthSession
) -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        await task_service.create_task(session, "T", effect_score=5)
    assert exc_info.value.details["field"] == "effect_score"


@pytest.mark.asyncio
async def test_get_missing(task_service: TaskService, session: AuthSession) -> None:
    with pytest.raises(TaskNotFoundError):
        await task_service.get_task(session, "task_missing")


@pytest.mark.asyncio
async def test_pagination(task_service: TaskService, session: AuthSession) -> None:
    for i in range(5):
        await task_service.create_task(session, f"Task {i}")

    first = await task_service.list_tasks(session, page=1, page_size=2)
    last = await task_service.list_tasks(session, page=3, page_size=2)

    assert first.total == 5
    assert first.total_pages == 3
    assert len(first.items) == 2
    assert len(last.items) == 1
    ids = {t.id for t in first.items} | {t.id for t in last.items}
    assert len(ids) == 3


@pytest.mark.asyncio
async def test_empty_page(task_service: TaskService, session: AuthSession) -> None:
    page = await task_service.list_tasks(session)
    assert page.total == 0
    assert page.total_pages == 0
    assert page.items == []


@pytest.mark.asyncio
@pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (1, 101)])
async def test_invalid_paging(
    task_service: TaskService, session: AuthSession, page: int, page_size: int
) -> None:
    with pytest.raises(InvalidInputError):
        await task_service.list_tasks(session, page=page, page_size=page_size)


@pytest.mark.asyncio
async def test_list_ranked(task_service: TaskService, session: AuthSession) -> None:
    worst = await task_service.create_task(session, "worst", development_cost=3, effect_score=3)
    best = await task_service.create_task(session, "best", development_cost=1, effect_score=1)
    middle = await task_service.create_task(session, "middle", development_cost=2, effect_score=2)

    ranked = await task_service.list_ranked(session)
    assert [t.id for t in ranked] == [best.id, middle.id, worst.id]


@pytest.mark.asyncio
async def test_list_ranked_by_status(task_service: TaskService, session: AuthSession) -> None:
    approved = await task_service.create_task(session, "approved")
    await task_service.create_task(session, "pending")
    await task_service.update_status(session, approved.id, TaskStatus.APPROVED)

    ranked = await task_service.list_ranked(session, status=TaskStatus.APPROVED)
    assert [t.id for t in ranked] == [approved.id]


@pytest.mark.asyncio
async def test_workflow_forward(task_service: TaskService, session: AuthSession) -> None:
    task = await task_service.create_task(session, "T")
    for status in [TaskStatus.APPROVED, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]:
        task = await task_service.update_status(session, task.id, status)
    assert task.status == TaskStatus.COMPLETED


@pytest.mark.asyncio
async def test_reject_from_open_status(task_service: TaskService, session: AuthSession) -> None:
    task = await task_service.create_task(session, "T")
    await task_service.update_status(session, task.id, TaskStatus.IN_PROGRESS)
    rejected = await task_service.update_status(session, task.id, TaskStatus.REJECTED)
    assert rejected.status == TaskStatus.REJECTED


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path",
    [
        [TaskStatus.APPROVED, TaskStatus.PENDING],
        [TaskStatus.COMPLETED, TaskStatus.REJECTED],
        [TaskStatus.REJECTED, TaskStatus.APPROVED],
    ],
)
async def test_disallowed_transitions(
    task_service: TaskService, session: AuthSession, path: list[TaskStatus]
) -> None:
    task = await task_service.create_task(session, "T")
    *allowed, disallowed = path
    for status in allowed:
        await task_service.update_status(session, task.id, status)

    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        await task_service.update_status(session, task.id, disallowed)
    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
async def test_status_update_refreshes_timestamp(
    task_service: TaskService, session: AuthSession
) -> None:
    task = await task_service.create_task(session, "T")
    updated = await task_service.update_status(session, task.id, TaskStatus.APPROVED)
    assert updated.updated_at >= task.updated_at

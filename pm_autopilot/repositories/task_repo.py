"""
Task candidate repository.
"""

from __future__ import annotations

from pm_autopilot.domain.task import TaskCandidate
from pm_autopilot.repositories.memory import InMemoryRepository
from pm_autopilot.repositories.postgres import PostgresRepository


class InMemoryTaskRepository(InMemoryRepository[TaskCandidate]):
    """In-memory task repository for development/testing."""

    model_type = TaskCandidate
    entity_name = "Task"


class PostgresTaskRepository(PostgresRepository[TaskCandidate]):
    """PostgreSQL task repository."""

    model_type = TaskCandidate
    table = "task_candidates"

"""
PRD draft repository.
"""

from __future__ import annotations

from pm_autopilot.domain.prd import PRDDraft
from pm_autopilot.repositories.memory import InMemoryRepository
from pm_autopilot.repositories.postgres import PostgresRepository


class InMemoryPRDRepository(InMemoryRepository[PRDDraft]):
    """In-memory PRD repository for development/testing."""

    model_type = PRDDraft
    entity_name = "PRD"


class PostgresPRDRepository(PostgresRepository[PRDDraft]):
    """PostgreSQL PRD repository."""

    model_type = PRDDraft
    table = "prd_drafts"
    json_columns = frozenset({"metadata"})

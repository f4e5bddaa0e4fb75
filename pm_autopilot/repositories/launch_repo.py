"""
Service launch repository.
"""

from __future__ import annotations

from typing import Optional

from pm_autopilot.domain.launch import ServiceLaunch
from pm_autopilot.repositories.memory import InMemoryRepository
from pm_autopilot.repositories.postgres import PostgresRepository


class InMemoryServiceLaunchRepository(InMemoryRepository[ServiceLaunch]):
    """In-memory service launch repository for development/testing."""

    model_type = ServiceLaunch
    entity_name = "Service launch"

    async def get_by_prd(self, prd_id: str) -> Optional[ServiceLaunch]:
        """Get the launch belonging to a PRD."""
        matches = await self.list({"prd_id": prd_id}, limit=1)
        return matches[0] if matches else None


class PostgresServiceLaunchRepository(PostgresRepository[ServiceLaunch]):
    """PostgreSQL service launch repository."""

    model_type = ServiceLaunch
    table = "service_launches"
    json_columns = frozenset({"generated_content"})

    async def get_by_prd(self, prd_id: str) -> Optional[ServiceLaunch]:
        """Get the launch belonging to a PRD."""
        row = await self._fetchrow(
            f"SELECT * FROM {self.table} WHERE prd_id = $1 LIMIT 1", prd_id
        )
        return self._row_to_model(row) if row else None

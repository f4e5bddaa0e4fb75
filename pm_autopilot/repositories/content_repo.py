"""
Content asset repository.
"""

from __future__ import annotations

from pm_autopilot.domain.content import ContentAsset
from pm_autopilot.repositories.memory import InMemoryRepository
from pm_autopilot.repositories.postgres import PostgresRepository


class InMemoryContentAssetRepository(InMemoryRepository[ContentAsset]):
    """In-memory content asset repository for development/testing."""

    model_type = ContentAsset
    entity_name = "Content asset"


class PostgresContentAssetRepository(PostgresRepository[ContentAsset]):
    """PostgreSQL content asset repository."""

    model_type = ContentAsset
    table = "content_assets"

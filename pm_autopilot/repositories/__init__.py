"""
Repository implementations for data access.
"""

from pm_autopilot.repositories.base import BaseRepository
from pm_autopilot.repositories.content_repo import (
    InMemoryContentAssetRepository,
    PostgresContentAssetRepository,
)
from pm_autopilot.repositories.feedback_repo import (
    InMemoryFeedbackSourceRepository,
    PostgresFeedbackSourceRepository,
)
from pm_autopilot.repositories.launch_repo import (
    InMemoryServiceLaunchRepository,
    PostgresServiceLaunchRepository,
)
from pm_autopilot.repositories.memory import InMemoryRepository
from pm_autopilot.repositories.postgres import PostgresRepository
from pm_autopilot.repositories.prd_repo import InMemoryPRDRepository, PostgresPRDRepository
from pm_autopilot.repositories.task_repo import InMemoryTaskRepository, PostgresTaskRepository
from pm_autopilot.repositories.user_repo import InMemoryUserRepository, PostgresUserRepository

__all__ = [
    "BaseRepository",
    "InMemoryRepository",
    "PostgresRepository",
    "InMemoryFeedbackSourceRepository",
    "PostgresFeedbackSourceRepository",
    "InMemoryTaskRepository",
    "PostgresTaskRepository",
    "InMemoryPRDRepository",
    "PostgresPRDRepository",
    "InMemoryContentAssetRepository",
    "PostgresContentAssetRepository",
    "InMemoryServiceLaunchRepository",
    "PostgresServiceLaunchRepository",
    "InMemoryUserRepository",
    "PostgresUserRepository",
]

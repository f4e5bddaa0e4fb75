"""
API dependencies for dependency injection.
"""

from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pm_autopilot.core.exceptions import AuthenticationError
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.ingestion.sheet_reader import SheetReader
from pm_autopilot.llm.gemini_client import GeminiClient, LLMClient
from pm_autopilot.repositories import (
    InMemoryContentAssetRepository,
    InMemoryFeedbackSourceRepository,
    InMemoryPRDRepository,
    InMemoryServiceLaunchRepository,
    InMemoryTaskRepository,
    InMemoryUserRepository,
    PostgresContentAssetRepository,
    PostgresFeedbackSourceRepository,
    PostgresPRDRepository,
    PostgresServiceLaunchRepository,
    PostgresTaskRepository,
    PostgresUserRepository,
)
from pm_autopilot.services import (
    AuthService,
    ContentService,
    DashboardService,
    FeedbackService,
    LaunchService,
    PRDService,
    TaskService,
    VOCAnalysisService,
)
from pm_autopilot.storage.image_storage import LocalImageStorage


class ServiceContainer:
    """
    Container for all application services.
    Provides singleton instances of services.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self) -> None:
        self._initialized = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize(
        self,
        pool: Optional[Any] = None,
        llm_client: Optional[LLMClient] = None,
        sheet_reader: Optional[SheetReader] = None,
        storage: Optional[LocalImageStorage] = None,
    ) -> None:
        """
        Initialize all services.

        Args:
            pool: asyncpg pool; in-memory repositories are used without one
            llm_client: Generative model client (defaults to Gemini)
            sheet_reader: Spreadsheet reader
            storage: Image storage
        """
        if self._initialized:
            return

        # External boundaries
        self._llm_client = llm_client or GeminiClient()
        self._sheet_reader = sheet_reader or SheetReader()
        self._storage = storage or LocalImageStorage()

        # Repositories
        if pool is not None:
            self._feedback_repository: Any = PostgresFeedbackSourceRepository(pool)
            self._task_repository: Any = PostgresTaskRepository(pool)
            self._prd_repository: Any = PostgresPRDRepository(pool)
            self._content_repository: Any = PostgresContentAssetRepository(pool)
            self._launch_repository: Any = PostgresServiceLaunchRepository(pool)
            self._user_repository: Any = PostgresUserRepository(pool)
        else:
            self._feedback_repository = InMemoryFeedbackSourceRepository()
            self._task_repository = InMemoryTaskRepository()
            self._prd_repository = InMemoryPRDRepository()
            self._content_repository = InMemoryContentAssetRepository()
            self._launch_repository = InMemoryServiceLaunchRepository()
            self._user_repository = InMemoryUserRepository()

        # Services
        self._auth_service = AuthService(self._user_repository)
        self._feedback_service = FeedbackService(self._feedback_repository)
        self._voc_analysis_service = VOCAnalysisService(
            sheet_reader=self._sheet_reader,
            llm_client=self._llm_client,
            feedback_repository=self._feedback_repository,
            task_repository=self._task_repository,
        )
        self._task_service = TaskService(self._task_repository)
        self._prd_service = PRDService(
            prd_repository=self._prd_repository,
            task_repository=self._task_repository,
            llm_client=self._llm_client,
        )
        self._content_service = ContentService(
            content_repository=self._content_repository,
            task_repository=self._task_repository,
            prd_repository=self._prd_repository,
            llm_client=self._llm_client,
            launch_repository=self._launch_repository,
        )
        self._launch_service = LaunchService(
            launch_repository=self._launch_repository,
            prd_repository=self._prd_repository,
            storage=self._storage,
            llm_client=self._llm_client,
        )
        self._dashboard_service = DashboardService(
            feedback_repository=self._feedback_repository,
            task_repository=self._task_repository,
            content_repository=self._content_repository,
            prd_repository=self._prd_repository,
        )

        self._initialized = True

    async def close(self) -> None:
        """Close outbound HTTP clients."""
        if not self._initialized:
            return
        await self._llm_client.close()
        await self._sheet_reader.close()

    @property
    def auth_service(self) -> AuthService:
        """Get the auth service."""
        self.initialize()
        return self._auth_service

    @property
    def feedback_service(self) -> FeedbackService:
        """Get the feedback source service."""
        self.initialize()
        return self._feedback_service

    @property
    def voc_analysis_service(self) -> VOCAnalysisService:
        """Get the VOC analysis service."""
        self.initialize()
        return self._voc_analysis_service

    @property
    def task_service(self) -> TaskService:
        """Get the task service."""
        self.initialize()
        return self._task_service

    @property
    def prd_service(self) -> PRDService:
        """Get the PRD service."""
        self.initialize()
        return self._prd_service

    @property
    def content_service(self) -> ContentService:
        """Get the content service."""
        self.initialize()
        return self._content_service

    @property
    def launch_service(self) -> LaunchService:
        """Get the launch service."""
        self.initialize()
        return self._launch_service

    @property
    def dashboard_service(self) -> DashboardService:
        """Get the dashboard service."""
        self.initialize()
        return self._dashboard_service

    @property
    def storage(self) -> LocalImageStorage:
        """Get the image storage."""
        self.initialize()
        return self._storage


# Singleton container instance
container = ServiceContainer.get_instance()

bearer_scheme = HTTPBearer(auto_error=False)


# Dependency functions for FastAPI
def get_container() -> ServiceContainer:
    """Get the service container instance."""
    return container


def get_auth_service(services: ServiceContainer = Depends(get_container)) -> AuthService:
    """Get the auth service instance."""
    return services.auth_service


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthSession:
    """Resolve the bearer token into the caller's session."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return await auth_service.resolve(credentials.credentials)


def get_feedback_service(services: ServiceContainer = Depends(get_container)) -> FeedbackService:
    """Get the feedback source service instance."""
    return services.feedback_service


def get_voc_analysis_service(
    services: ServiceContainer = Depends(get_container),
) -> VOCAnalysisService:
    """Get the VOC analysis service instance."""
    return services.voc_analysis_service


def get_task_service(services: ServiceContainer = Depends(get_container)) -> TaskService:
    """Get the task service instance."""
    return services.task_service


def get_prd_service(services: ServiceContainer = Depends(get_container)) -> PRDService:
    """Get the PRD service instance."""
    return services.prd_service


def get_content_service(services: ServiceContainer = Depends(get_container)) -> ContentService:
    """Get the content service instance."""
    return services.content_service


def get_launch_service(services: ServiceContainer = Depends(get_container)) -> LaunchService:
    """Get the launch service instance."""
    return services.launch_service


def get_dashboard_service(
    services: ServiceContainer = Depends(get_container),
) -> DashboardService:
    """Get the dashboard service instance."""
    return services.dashboard_service

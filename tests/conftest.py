"""
Pytest configuration and fixtures.
"""

from datetime import timedelta
from pathlib import Path
from typing import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from pm_autopilot.api.deps import ServiceContainer, get_container
from pm_autopilot.domain.base import utc_now
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.ingestion.sheet_reader import SheetReader
from pm_autopilot.main import app
from pm_autopilot.storage.image_storage import LocalImageStorage

from tests.fakes import FakeLLMClient, FakeSheetServer


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    """Fake generative model."""
    return FakeLLMClient()


@pytest.fixture
def sheet_server() -> FakeSheetServer:
    """Fake spreadsheet export server."""
    return FakeSheetServer()


@pytest.fixture
def sheet_reader(sheet_server: FakeSheetServer) -> SheetReader:
    """Sheet reader wired to the fake export server."""
    return SheetReader(transport=httpx.MockTransport(sheet_server))


@pytest.fixture
def image_storage(tmp_path: Path) -> LocalImageStorage:
    """Image storage in a temporary directory."""
    return LocalImageStorage(
        root=str(tmp_path / "storage"),
        bucket="service-images",
        public_base_url="http://test/storage",
    )


@pytest.fixture
def container(
    fake_llm: FakeLLMClient,
    sheet_reader: SheetReader,
    image_storage: LocalImageStorage,
) -> ServiceContainer:
    """Fresh service container with in-memory repositories and fakes."""
    services = ServiceContainer()
    services.initialize(llm_client=fake_llm, sheet_reader=sheet_reader, storage=image_storage)
    return services


@pytest.fixture
def session() -> AuthSession:
    """An authenticated caller."""
    return AuthSession(
        user_id="user_test123456",
        email="pm@example.com",
        expires_at=utc_now() + timedelta(hours=1),
    )


@pytest.fixture
async def async_client(container: ServiceContainer) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    app.dependency_overrides[get_container] = lambda: container
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(container: ServiceContainer) -> dict[str, str]:
    """Bearer header for a freshly signed-up user."""
    await container.auth_service.sign_up("pm@example.com", "secret-password")
    token, _ = await container.auth_service.sign_in("pm@example.com", "secret-password")
    return {"Authorization": f"Bearer {token}"}

"""
Unit tests for content asset management and generation.
"""

import pytest

from pm_autopilot.api.deps import ServiceContainer
from pm_autopilot.core.constants import ContentAssetType, DocumentStatus, TargetChannel
from pm_autopilot.core.exceptions import (
    ContentAssetNotFoundError,
    InvalidInputError,
    InvalidStatusTransitionError,
    PRDNotFoundError,
)
from pm_autopilot.domain.user import AuthSession
from tests.fakes import FakeLLMClient

PRD_TEXT = "[SECTION:solution]\nPaginate the history query.\n[/SECTION]"


@pytest.fixture
async def prd(container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession):
    task = await container.task_service.create_task(session, "Crash fix")
    fake_llm.queue(PRD_TEXT)
    return await container.prd_service.generate_from_task(session, task.id)


@pytest.mark.asyncio
async def test_create_asset(container: ServiceContainer, session: AuthSession) -> None:
    asset = await container.content_service.create_asset(
        session,
        ContentAssetType.BANNER,
        " Spring sale ",
        content="Save 20%",
        target_channel=TargetChannel.APP_POPUP,
    )

    assert asset.id.startswith("asset_")
    assert asset.title == "Spring sale"
    assert asset.status == DocumentStatus.DRAFT
    assert asset.word_count == len("Save 20%")

    fetched = await container.content_service.get_asset(session, asset.id)
    assert fetched.target_channel == TargetChannel.APP_POPUP


@pytest.mark.asyncio
async def test_create_asset_requires_title(
    container: ServiceContainer, session: AuthSession
) -> None:
    with pytest.raises(InvalidInputError):
        await container.content_service.create_asset(session, ContentAssetType.FAQ, "")


@pytest.mark.asyncio
async def test_word_count_without_content(
    container: ServiceContainer, session: AuthSession
) -> None:
    asset = await container.content_service.create_asset(session, ContentAssetType.FAQ, "Empty")
    assert asset.word_count == 0


@pytest.mark.asyncio
async def test_generate_asset(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession, prd
) -> None:
    fake_llm.queue("Q: Why did it crash?\nA: Fixed now.")

    asset = await container.content_service.generate_asset(
        session, prd.id, ContentAssetType.FAQ, TargetChannel.CUSTOMER_CENTER
    )

    assert asset.type == ContentAssetType.FAQ
    assert asset.title == "Crash fix - FAQ"
    assert asset.content == "Q: Why did it crash?\nA: Fixed now."
    assert asset.prd_id == prd.id
    assert asset.task_id == prd.task_id
    assert asset.target_channel == TargetChannel.CUSTOMER_CENTER

    prompt, max_tokens = fake_llm.calls[-1]
    assert "Solution: Paginate the history query." in prompt
    assert "Service images: Not provided" in prompt
    assert max_tokens == 4096


@pytest.mark.asyncio
async def test_generate_asset_uses_launch_images(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession, prd
) -> None:
    launch = await container.launch_service.get_or_create(session, prd.id)
    await container.launch_service.upload_image(session, launch.id, 1, "shot.png", b"\x89PNG")

    await container.content_service.generate_asset(session, prd.id, ContentAssetType.BANNER)

    assert (
        f"Service image 1: http://test/storage/service-images/{launch.id}_image_2.png"
        in fake_llm.last_prompt
    )


@pytest.mark.asyncio
async def test_generate_asset_unknown_prd(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    with pytest.raises(PRDNotFoundError):
        await container.content_service.generate_asset(session, "prd_missing", ContentAssetType.FAQ)
    assert fake_llm.calls == []


@pytest.mark.asyncio
async def test_list_joins_task_and_prd(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession, prd
) -> None:
    await container.content_service.generate_asset(session, prd.id, ContentAssetType.FAQ)
    await container.content_service.create_asset(session, ContentAssetType.BANNER, "Standalone")

    assets = await container.content_service.list_assets(session)
    by_title = {asset.title: asset for asset in assets}

    joined = by_title["Crash fix - FAQ"]
    assert joined.prd is not None and joined.prd.id == prd.id
    assert joined.task is not None and joined.task.title == "Crash fix"

    standalone = by_title["Standalone"]
    assert standalone.prd is None
    assert standalone.task is None


@pytest.mark.asyncio
async def test_list_filters(container: ServiceContainer, session: AuthSession) -> None:
    faq = await container.content_service.create_asset(session, ContentAssetType.FAQ, "FAQ")
    await container.content_service.create_asset(session, ContentAssetType.BANNER, "Banner")
    await container.content_service.update_status(session, faq.id, DocumentStatus.REVIEW)

    by_type = await container.content_service.list_assets(session, asset_type=ContentAssetType.FAQ)
    by_status = await container.content_service.list_assets(
        session, status=DocumentStatus.DRAFT
    )

    assert [a.title for a in by_type] == ["FAQ"]
    assert [a.title for a in by_status] == ["Banner"]


@pytest.mark.asyncio
async def test_status_transitions(container: ServiceContainer, session: AuthSession) -> None:
    asset = await container.content_service.create_asset(session, ContentAssetType.FAQ, "FAQ")

    published = await container.content_service.update_status(
        session, asset.id, DocumentStatus.PUBLISHED
    )
    assert published.status == DocumentStatus.PUBLISHED

    with pytest.raises(InvalidStatusTransitionError):
        await container.content_service.update_status(session, asset.id, DocumentStatus.DRAFT)
    with pytest.raises(ContentAssetNotFoundError):
        await container.content_service.update_status(
            session, "asset_missing", DocumentStatus.REVIEW
        )

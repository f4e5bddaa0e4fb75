"""
Unit tests for PRD generation, editing and chat.
"""

import pytest

from pm_autopilot.api.deps import ServiceContainer
from pm_autopilot.core.constants import CHAT_FALLBACK_RESPONSE, DocumentStatus, MessageRole
from pm_autopilot.core.exceptions import (
    InvalidInputError,
    InvalidStatusTransitionError,
    PRDNotFoundError,
    TaskNotFoundError,
)
from pm_autopilot.domain.prd import ChatMessage, PRDDraft
from pm_autopilot.domain.user import AuthSession
from tests.fakes import FakeLLMClient

DELIMITED_PRD = """Here is the PRD.

[SECTION:background]
Users abandon payments after crashes.
[/SECTION]

[SECTION:problem]
The history screen crashes on open.
[/SECTION]

[SECTION:solution]
Paginate the history query.
[/SECTION]
"""

HEADING_PRD = """## 1. Background
Users abandon payments after crashes.

## 2. Problem
The history screen crashes on open.

## Edge Cases: empty history
"""


async def make_prd(container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession) -> PRDDraft:
    task = await container.task_service.create_task(
        session, "Crash fix", description="Fix history crash", development_cost=1, effect_score=1
    )
    fake_llm.queue(DELIMITED_PRD)
    return await container.prd_service.generate_from_task(session, task.id)


@pytest.mark.asyncio
async def test_generate_from_delimited_response(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)

    assert prd.title == "Crash fix"
    assert prd.status == DocumentStatus.DRAFT
    assert prd.version == 1
    assert prd.background == "Users abandon payments after crashes."
    assert prd.problem == "The history screen crashes on open."
    assert prd.solution == "Paginate the history query."
    assert prd.ux_requirements is None
    assert prd.edge_cases is None
    assert prd.metadata["raw_text"] == DELIMITED_PRD
    assert prd.metadata["extraction_strategy"] == "delimited"
    assert prd.metadata["extraction_confident"] is True

    prompt, max_tokens = fake_llm.calls[-1]
    assert "- Title: Crash fix" in prompt
    assert "- Effect score: 1 (good)" in prompt
    assert max_tokens == 4096


@pytest.mark.asyncio
async def test_generate_from_headings_is_not_confident(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    task = await container.task_service.create_task(session, "Crash fix")
    fake_llm.queue(HEADING_PRD)

    prd = await container.prd_service.generate_from_task(session, task.id)

    assert prd.background == "Users abandon payments after crashes."
    assert prd.problem == "The history screen crashes on open."
    assert prd.edge_cases == "empty history"
    assert prd.solution is None
    assert prd.metadata["extraction_strategy"] == "headings"
    assert prd.metadata["extraction_confident"] is False


@pytest.mark.asyncio
async def test_generate_keeps_raw_text_when_nothing_parses(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    task = await container.task_service.create_task(session, "Crash fix")
    fake_llm.queue("I could not write this PRD.")

    prd = await container.prd_service.generate_from_task(session, task.id)

    assert all(value is None for value in prd.sections().values())
    assert prd.metadata["raw_text"] == "I could not write this PRD."
    assert prd.metadata["extraction_strategy"] == "none"


@pytest.mark.asyncio
async def test_generate_unknown_task(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    with pytest.raises(TaskNotFoundError):
        await container.prd_service.generate_from_task(session, "task_missing")
    assert fake_llm.calls == []


@pytest.mark.asyncio
async def test_save_prd(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)

    saved = await container.prd_service.save_prd(
        session,
        prd.id,
        title=" Crash fix v2 ",
        sections={"solution": "Stream the history in pages."},
        output_url="https://wiki.example.com/prd/1",
    )

    assert saved.title == "Crash fix v2"
    assert saved.solution == "Stream the history in pages."
    assert saved.background == prd.background
    assert saved.output_url == "https://wiki.example.com/prd/1"
    assert saved.version == 1


@pytest.mark.asyncio
async def test_save_prd_without_changes_returns_current(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)
    saved = await container.prd_service.save_prd(session, prd.id)
    assert saved.id == prd.id
    assert saved.title == prd.title


@pytest.mark.asyncio
async def test_save_prd_rejects_bad_input(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)

    with pytest.raises(InvalidInputError):
        await container.prd_service.save_prd(session, prd.id, title="  ")
    with pytest.raises(InvalidInputError):
        await container.prd_service.save_prd(session, prd.id, sections={"appendix": "x"})
    with pytest.raises(PRDNotFoundError):
        await container.prd_service.save_prd(session, "prd_missing", title="x")


@pytest.mark.asyncio
async def test_status_moves_forward_only(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)

    approved = await container.prd_service.update_status(session, prd.id, DocumentStatus.APPROVED)
    assert approved.status == DocumentStatus.APPROVED

    same = await container.prd_service.update_status(session, prd.id, DocumentStatus.APPROVED)
    assert same.status == DocumentStatus.APPROVED

    with pytest.raises(InvalidStatusTransitionError):
        await container.prd_service.update_status(session, prd.id, DocumentStatus.REVIEW)


@pytest.mark.asyncio
async def test_chat_applies_updated_sections(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)
    fake_llm.queue(
        "I tightened the problem statement.\n"
        "[UPDATED_SECTION:problem]\nOpening history crashes for users with 1000+ payments.\n"
        "[/UPDATED_SECTION]"
    )
    history = [
        ChatMessage(role=MessageRole.USER, content="Who is affected?"),
        ChatMessage(role=MessageRole.ASSISTANT, content="Heavy users."),
    ]

    result = await container.prd_service.chat(
        session, prd.id, "Make the problem more specific", history
    )

    assert result.response == "I tightened the problem statement."
    assert result.updated_sections == {
        "problem": "Opening history crashes for users with 1000+ payments."
    }
    assert result.applied_sections == ["problem"]
    assert result.prd.problem == "Opening history crashes for users with 1000+ payments."

    stored = await container.prd_service.get_prd(session, prd.id)
    assert stored.problem == result.prd.problem
    assert stored.background == prd.background

    prompt, max_tokens = fake_llm.calls[-1]
    assert "User: Who is affected?\nAssistant: Heavy users." in prompt
    assert "Make the problem more specific" in prompt
    assert max_tokens == 2048


@pytest.mark.asyncio
async def test_chat_without_apply_leaves_prd(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)
    fake_llm.queue("Sure.\n[UPDATED_SECTION:solution]\nCache it.\n[/UPDATED_SECTION]")

    result = await container.prd_service.chat(session, prd.id, "Ideas?", apply_updates=False)

    assert result.updated_sections == {"solution": "Cache it."}
    assert result.applied_sections == []
    stored = await container.prd_service.get_prd(session, prd.id)
    assert stored.solution == prd.solution


@pytest.mark.asyncio
async def test_chat_ignores_plain_headings(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)
    fake_llm.queue("## Solution\nConsider caching.")

    result = await container.prd_service.chat(session, prd.id, "Thoughts on the solution?")

    assert result.updated_sections == {}
    assert result.response == "## Solution\nConsider caching."


@pytest.mark.asyncio
async def test_chat_only_sections_uses_fallback_response(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)
    fake_llm.queue("[UPDATED_SECTION:edge_cases]\nOffline mode.\n[/UPDATED_SECTION]")

    result = await container.prd_service.chat(session, prd.id, "Add edge cases")

    assert result.response == CHAT_FALLBACK_RESPONSE
    assert result.applied_sections == ["edge_cases"]


@pytest.mark.asyncio
async def test_chat_requires_message(
    container: ServiceContainer, fake_llm: FakeLLMClient, session: AuthSession
) -> None:
    prd = await make_prd(container, fake_llm, session)
    with pytest.raises(InvalidInputError):
        await container.prd_service.chat(session, prd.id, "   ")

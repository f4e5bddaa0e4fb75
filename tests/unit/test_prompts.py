"""
Unit tests for prompt assembly.
"""

from pathlib import Path

import pytest

from pm_autopilot.core.constants import NOT_PROVIDED, MessageRole, TaskPriority
from pm_autopilot.core.exceptions import ConfigurationError
from pm_autopilot.domain import ChatMessage, FeedbackEntry, PRDDraft, TaskCandidate
from pm_autopilot.prompts.assembler import (
    ContentStyleCatalog,
    build_content_prompt,
    build_prd_chat_prompt,
    build_prd_generation_prompt,
    build_voc_analysis_prompt,
    get_style_catalog,
)


@pytest.fixture
def prd() -> PRDDraft:
    return PRDDraft(
        id="prd_1",
        title="Instant transfers",
        background="Transfers are slow",
        problem=None,
        solution="Real-time settlement",
    )


class TestVocAnalysisPrompt:
    def test_numbers_entries_with_dates(self) -> None:
        entries = [
            FeedbackEntry(date="2024-01-01", feedback="App crashes on launch"),
            FeedbackEntry(date="", feedback="Need dark mode please"),
        ]
        prompt = build_voc_analysis_prompt(entries, max_features=3)

        assert "1. [2024-01-01] App crashes on launch" in prompt
        assert f"2. [{NOT_PROVIDED}] Need dark mode please" in prompt
        assert "recommended_features" in prompt
        assert "Recommend the 3 features" in prompt

    def test_is_deterministic(self) -> None:
        entries = [FeedbackEntry(date="d", feedback="Something is broken")]
        assert build_voc_analysis_prompt(entries, 5) == build_voc_analysis_prompt(entries, 5)


class TestPrdGenerationPrompt:
    def test_absent_fields_use_placeholder(self) -> None:
        task = TaskCandidate(id="task_1", title="Faster login", priority=TaskPriority.HIGH)
        prompt = build_prd_generation_prompt(task)

        assert "Title: Faster login" in prompt
        assert f"Description: {NOT_PROVIDED}" in prompt
        assert f"Development cost (man-months): {NOT_PROVIDED}" in prompt
        assert "Priority: high" in prompt

    def test_requests_delimited_sections(self) -> None:
        task = TaskCandidate(id="task_1", title="T", development_cost=2, effect_score=1)
        prompt = build_prd_generation_prompt(task)

        for name in ["background", "problem", "solution", "ux_requirements", "edge_cases"]:
            assert f"[SECTION:{name}]" in prompt
        assert "Effect score: 1 (good)" in prompt


class TestPrdChatPrompt:
    def test_includes_prd_history_and_request(self, prd: PRDDraft) -> None:
        history = [
            ChatMessage(role=MessageRole.USER, content="Is the problem clear?"),
            ChatMessage(role=MessageRole.ASSISTANT, content="It is missing."),
        ]
        prompt = build_prd_chat_prompt(prd, "Write the problem section", history)

        assert "Title: Instant transfers" in prompt
        assert f"Problem: {NOT_PROVIDED}" in prompt
        assert "User: Is the problem clear?" in prompt
        assert "Assistant: It is missing." in prompt
        assert "Write the problem section" in prompt
        assert "[UPDATED_SECTION:background]" in prompt

    def test_empty_history_placeholder(self, prd: PRDDraft) -> None:
        prompt = build_prd_chat_prompt(prd, "Hello")
        assert f"Conversation so far:\n{NOT_PROVIDED}" in prompt


class TestContentPrompt:
    def test_known_style_and_images(self, prd: PRDDraft) -> None:
        prompt = build_content_prompt(
            prd, "배너 메시지", ["http://img/1.png", "http://img/2.png"]
        )

        assert "copywriter for mobile app marketing banners" in prompt
        assert "Service image 1: http://img/1.png" in prompt
        assert "Service image 2: http://img/2.png" in prompt
        assert "Service image 3" not in prompt

    def test_lookup_by_alias_is_case_insensitive(self) -> None:
        catalog = get_style_catalog()
        assert catalog.get("BANNER").label == "배너 메시지"
        assert catalog.get("faq").label == "FAQ"
        assert catalog.get("guide").label == "고객센터 설명자료"

    def test_unknown_type_gets_generic_guidance(self, prd: PRDDraft) -> None:
        prompt = build_content_prompt(prd, "Press release")

        assert prompt.startswith("You are an expert writer of Press release content.")
        assert f"Service images: {NOT_PROVIDED}" in prompt

    def test_custom_catalog_file(self, tmp_path: Path, prd: PRDDraft) -> None:
        path = tmp_path / "styles.yaml"
        path.write_text(
            "memo:\n  label: Memo\n  aliases: [note]\n  guidance: Write a short memo.\n",
            encoding="utf-8",
        )
        catalog = ContentStyleCatalog.from_yaml(path)

        assert catalog.labels == ["Memo"]
        assert build_content_prompt(prd, "note", catalog=catalog).startswith("Write a short memo.")

    def test_missing_catalog_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            ContentStyleCatalog.from_yaml(tmp_path / "missing.yaml")

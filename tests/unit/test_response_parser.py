"""
Unit tests for model response parsing.
"""

from pm_autopilot.llm.response_parser import (
    STRATEGY_DELIMITED,
    STRATEGY_HEADINGS,
    STRATEGY_NONE,
    extract_sections,
    extract_structured,
)


class TestExtractSections:
    """Tests for PRD section extraction."""

    def test_updated_section_block(self) -> None:
        text = "[UPDATED_SECTION:background]X[/UPDATED_SECTION]"
        result = extract_sections(text)

        assert result.sections == {"background": "X"}
        assert "UPDATED_SECTION" not in result.display_text
        assert result.display_text == ""
        assert result.strategy == STRATEGY_DELIMITED
        assert result.confident is True

    def test_section_blocks_with_surrounding_text(self) -> None:
        text = (
            "Here is the draft.\n"
            "[SECTION:background]\nUsers churn at checkout.\n[/SECTION]\n"
            "[SECTION:solution]\nOne-tap payment.\n[/SECTION]\n"
            "Let me know what to change."
        )
        result = extract_sections(text)

        assert result.sections == {
            "background": "Users churn at checkout.",
            "solution": "One-tap payment.",
        }
        assert result.display_text.startswith("Here is the draft.")
        assert result.display_text.endswith("Let me know what to change.")
        assert "[SECTION" not in result.display_text

    def test_missing_sections_are_omitted(self) -> None:
        result = extract_sections("[SECTION:problem]Slow transfers[/SECTION]")
        assert set(result.sections) == {"problem"}

    def test_unknown_section_names_ignored(self) -> None:
        result = extract_sections("[SECTION:appendix]extra[/SECTION]", allow_heuristics=False)
        assert result.sections == {}
        assert result.strategy == STRATEGY_NONE

    def test_heading_fallback_is_not_confident(self) -> None:
        text = (
            "**배경 (Background):**\n"
            "- Customers complain about transfer delays\n\n"
            "## Problem\n"
            "Transfers take over a minute.\n\n"
            "3. 해결방안: Move to instant settlement\n\n"
            "### UX Requirements\n"
            "Show a progress indicator.\n\n"
            "**Edge Cases**\n"
            "Bank maintenance windows.\n"
        )
        result = extract_sections(text)

        assert result.strategy == STRATEGY_HEADINGS
        assert result.confident is False
        assert result.sections["background"] == "- Customers complain about transfer delays"
        assert result.sections["problem"] == "Transfers take over a minute."
        assert result.sections["solution"] == "Move to instant settlement"
        assert result.sections["ux_requirements"] == "Show a progress indicator."
        assert result.sections["edge_cases"] == "Bank maintenance windows."

    def test_prose_starting_with_keyword_stays_in_body(self) -> None:
        text = (
            "**Background:**\n"
            "Users abandon checkout.\n"
            "Problem reports doubled last month\n"
            "Problem areas include: payment retries\n"
            "**Problem:**\n"
            "Checkout is slow."
        )
        result = extract_sections(text)

        assert result.strategy == STRATEGY_HEADINGS
        assert result.sections == {
            "background": (
                "Users abandon checkout.\n"
                "Problem reports doubled last month\n"
                "Problem areas include: payment retries"
            ),
            "problem": "Checkout is slow.",
        }

    def test_bare_keyword_with_colon_is_heading(self) -> None:
        result = extract_sections("Background:\nLegacy flow.\nSolution: Add caching")

        assert result.sections == {"background": "Legacy flow.", "solution": "Add caching"}

    def test_heuristics_disabled(self) -> None:
        text = "## Background\nSomething happened."
        result = extract_sections(text, allow_heuristics=False)

        assert result.sections == {}
        assert result.display_text == "## Background\nSomething happened."

    def test_plain_answer_has_no_sections(self) -> None:
        result = extract_sections("The solution section already covers retries.")
        assert result.sections == {}
        assert result.display_text == "The solution section already covers retries."

    def test_empty_input(self) -> None:
        result = extract_sections("")
        assert result.sections == {}
        assert result.display_text == ""


class TestExtractStructured:
    """Tests for JSON extraction."""

    def test_json_embedded_in_prose(self) -> None:
        text = 'Analysis done.\n```json\n{"categories": [], "recommended_features": [{"title": "A"}]}\n```\nThanks.'
        result = extract_structured(text)

        assert result.ok
        assert result.error is None
        assert result.data["recommended_features"][0]["title"] == "A"

    def test_braces_inside_strings(self) -> None:
        text = 'x {"title": "use {curly} braces", "n": 1} y {"second": true}'
        result = extract_structured(text)
        assert result.data == {"title": "use {curly} braces", "n": 1}

    def test_escaped_quotes_inside_strings(self) -> None:
        result = extract_structured('{"quote": "he said \\"hi}\\"", "ok": true}')
        assert result.data == {"quote": 'he said "hi}"', "ok": True}

    def test_malformed_json_does_not_raise(self) -> None:
        result = extract_structured('Result: {"categories": [1, 2,, ]}')
        assert result.data is None
        assert result.error is not None
        assert not result.ok

    def test_no_json(self) -> None:
        result = extract_structured("No structured output here.")
        assert result.data is None
        assert "No JSON object" in result.error

    def test_unbalanced_opening_brace_then_valid_object(self) -> None:
        result = extract_structured('{ broken and then {"a": 1}')
        assert result.data == {"a": 1}

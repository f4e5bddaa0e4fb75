"""
Parsing of free-form model responses.

Two extractors:

- ``extract_sections`` pulls PRD sections out of generated text. Delimited
  ``[SECTION:name]`` / ``[UPDATED_SECTION:name]`` blocks are trusted; when
  none are present a heading-keyword heuristic is tried and the result is
  flagged as not confident.
- ``extract_structured`` pulls the first JSON object out of text.

Neither raises on malformed input: the raw text stays usable by the caller.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from pm_autopilot.core.constants import PRD_SECTION_KEYWORDS, PRD_SECTIONS

DELIMITED_SECTION_PATTERN = re.compile(
    r"\[(?:UPDATED_)?SECTION:(\w+)\](.*?)\[/(?:UPDATED_)?SECTION\]",
    re.DOTALL,
)

# Leading markdown decoration on a heading line: #, *, -, >, numbering
HEADING_PREFIX_PATTERN = re.compile(r"^[\s#*>\-_]*(?:\d+[.)]\s*)?[\s*_]*")
# Markdown heading, bold wrapping or list numbering at the start of a line
HEADING_MARKUP_PATTERN = re.compile(r"^\s*(?:#+|\*\*|__|\d+[.)])")
HEADING_MAX_LENGTH = 60

STRATEGY_DELIMITED = "delimited"
STRATEGY_HEADINGS = "headings"
STRATEGY_NONE = "none"


@dataclass
class SectionExtraction:
    """Result of section extraction."""

    sections: dict[str, str] = field(default_factory=dict)
    display_text: str = ""
    strategy: str = STRATEGY_NONE
    confident: bool = False


@dataclass
class StructuredExtraction:
    """Result of structured-data extraction."""

    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data is not None


def extract_sections(text: str, allow_heuristics: bool = True) -> SectionExtraction:
    """
    Extract PRD sections from model output.

    Args:
        text: Raw model output
        allow_heuristics: Fall back to heading keywords when no delimited
            blocks are found

    Returns:
        Sections found (absent ones omitted), the text with delimited blocks
        removed, the strategy used and whether the result is trustworthy
    """
    text = text or ""
    sections: dict[str, str] = {}
    for match in DELIMITED_SECTION_PATTERN.finditer(text):
        name = match.group(1).lower()
        if name in PRD_SECTIONS:
            sections[name] = match.group(2).strip()

    display_text = DELIMITED_SECTION_PATTERN.sub("", text).strip()

    if sections:
        return SectionExtraction(
            sections=sections,
            display_text=display_text,
            strategy=STRATEGY_DELIMITED,
            confident=True,
        )

    if allow_heuristics:
        sections = _extract_by_headings(text)
        if sections:
            return SectionExtraction(
                sections=sections,
                display_text=display_text,
                strategy=STRATEGY_HEADINGS,
                confident=False,
            )

    return SectionExtraction(display_text=display_text)


def _match_heading(line: str) -> Optional[tuple[str, str]]:
    """
    Match a line against the section heading keywords.

    A line counts as a heading when it carries heading markup, or when it is
    just the keyword followed by a colon. Prose that merely starts with a
    keyword stays body text.

    Returns:
        ``(section_name, trailing_text)`` for a heading line, where the
        trailing text is anything after a colon on the same line
    """
    stripped = HEADING_PREFIX_PATTERN.sub("", line).strip()
    if not stripped:
        return None

    marked = bool(HEADING_MARKUP_PATTERN.match(line))
    head, sep, rest = stripped.partition(":")
    if not sep and not marked:
        return None
    head = head.strip().strip("*_").strip()
    if not sep and len(stripped) > HEADING_MAX_LENGTH:
        return None
    if sep and len(head) > HEADING_MAX_LENGTH:
        return None

    lowered = head.lower()
    for name in PRD_SECTIONS:
        for keyword in PRD_SECTION_KEYWORDS[name]:
            if marked and lowered.startswith(keyword):
                return name, rest.strip().strip("*_").strip()
            # Unmarked "Keyword:" lines must name the section and nothing more
            if lowered == keyword or lowered.startswith(f"{keyword} ("):
                return name, rest.strip().strip("*_").strip()
    return None


def _extract_by_headings(text: str) -> dict[str, str]:
    sections: dict[str, list[str]] = {}
    current: Optional[str] = None

    for line in text.splitlines():
        heading = _match_heading(line)
        if heading is not None and heading[0] not in sections:
            current, trailing = heading
            sections[current] = [trailing] if trailing else []
            continue
        if current is not None:
            sections[current].append(line)

    result = {}
    for name, lines in sections.items():
        content = "\n".join(lines).strip()
        if content:
            result[name] = content
    return result


def _find_json_object(text: str) -> Optional[str]:
    """Return the first balanced top-level ``{...}`` span, respecting strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def extract_structured(text: str) -> StructuredExtraction:
    """
    Extract the first JSON object embedded in text.

    Returns:
        The parsed object, or an error description when no object is found
        or it does not parse
    """
    candidate = _find_json_object(text or "")
    if candidate is None:
        return StructuredExtraction(error="No JSON object found in response")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        return StructuredExtraction(error=f"Invalid JSON: {e.msg}")

    if not isinstance(data, dict):
        return StructuredExtraction(error="JSON value is not an object")
    return StructuredExtraction(data=data)

"""
Prompt builders for analysis, PRD generation, PRD chat and content generation.

Builders are pure: the same inputs always produce the same prompt text.
Absent optional values are rendered as an explicit placeholder so the model
never sees an empty field.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from pm_autopilot.core.config import settings
from pm_autopilot.core.constants import (
    EFFECT_LABELS,
    NOT_PROVIDED,
    PRD_SECTION_TITLES,
    PRD_SECTIONS,
    MessageRole,
)
from pm_autopilot.core.exceptions import ConfigurationError
from pm_autopilot.core.logging import get_logger
from pm_autopilot.domain.feedback import FeedbackEntry
from pm_autopilot.domain.prd import ChatMessage, PRDDraft
from pm_autopilot.domain.task import TaskCandidate

logger = get_logger(__name__)

DEFAULT_STYLES_PATH = Path(__file__).parent / "content_styles.yaml"

SECTION_GUIDANCE = {
    "background": "The current situation and why this feature is needed now.",
    "problem": "The concrete problem to solve and the user's pain points.",
    "solution": "The proposed solution and how it addresses the problem.",
    "ux_requirements": "User experience requirements, interactions, accessibility and usability.",
    "edge_cases": "Exceptional situations, error handling and fallbacks, performance and security concerns.",
}


def _value(value: Any) -> str:
    """Render an optional value, substituting the placeholder when absent."""
    if value is None:
        return NOT_PROVIDED
    if isinstance(value, str):
        return value.strip() or NOT_PROVIDED
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def _prd_block(prd: PRDDraft) -> str:
    lines = [f"Title: {_value(prd.title)}"]
    for name in PRD_SECTIONS:
        lines.append(f"{PRD_SECTION_TITLES[name]}: {_value(getattr(prd, name))}")
    return "\n".join(lines)


# =============================================================================
# Content style guidance
# =============================================================================


@dataclass(frozen=True)
class ContentStyle:
    """Writing guidance for one content type."""

    key: str
    label: str
    guidance: str
    aliases: tuple[str, ...] = ()


class ContentStyleCatalog:
    """
    Content style guidance loaded from YAML.

    Lookup is by slug, label or alias, ignoring case. Unknown content types
    get a generic instruction that names the requested label.
    """

    def __init__(self, styles: dict[str, ContentStyle]) -> None:
        self._styles = styles
        self._index: dict[str, ContentStyle] = {}
        for style in styles.values():
            self._index[style.key.lower()] = style
            self._index[style.label.lower()] = style
            for alias in style.aliases:
                self._index.setdefault(alias.lower(), style)

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "ContentStyleCatalog":
        """
        Load the catalog from a YAML file.

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        path = Path(path or DEFAULT_STYLES_PATH)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load content styles", path=str(path), error=str(e))
            raise ConfigurationError(
                f"Content style guidance could not be loaded from {path}"
            ) from e

        styles: dict[str, ContentStyle] = {}
        for key, entry in data.items():
            styles[key] = ContentStyle(
                key=key,
                label=entry.get("label", key),
                guidance=entry["guidance"].strip(),
                aliases=tuple(entry.get("aliases", [])),
            )

        logger.debug("Loaded content styles", path=str(path), count=len(styles))
        return cls(styles)

    def get(self, content_type: str) -> Optional[ContentStyle]:
        """Find the style for a content type, if one is defined."""
        return self._index.get(content_type.strip().lower())

    def guidance_for(self, content_type: str) -> str:
        """Writing guidance for a content type, generic when unknown."""
        style = self.get(content_type)
        if style is None:
            return f"You are an expert writer of {content_type} content."
        return style.guidance

    @property
    def labels(self) -> list[str]:
        """Display labels of all defined styles."""
        return [style.label for style in self._styles.values()]


@lru_cache
def get_style_catalog() -> ContentStyleCatalog:
    """Get the cached style catalog from the configured path."""
    path = Path(settings.content_styles_path) if settings.content_styles_path else None
    return ContentStyleCatalog.from_yaml(path)


# =============================================================================
# Builders
# =============================================================================


def build_voc_analysis_prompt(
    entries: Sequence[FeedbackEntry],
    max_features: Optional[int] = None,
) -> str:
    """
    Build the feedback analysis prompt.

    Lists every entry as ``<n>. [<date>] <feedback>`` and asks for a JSON
    object with ``categories`` and ``recommended_features``.
    """
    max_features = max_features or settings.sheets.max_recommended_features
    feedback_lines = "\n".join(
        f"{index}. [{_value(entry.date)}] {entry.feedback}"
        for index, entry in enumerate(entries, start=1)
    )

    return f"""The following is customer feedback collected from our users:

{feedback_lines}

Analyze the feedback above and:
1. Group complaints and requests into categories.
2. Estimate how often each category occurs and how important it is.
3. Propose feature improvements, best first.

Rate every proposed feature with:
- development_cost: 1 to 3 man-months (1 is cheapest)
- effect_score: 1 (good), 2 (moderate) or 3 (low); lower means more effective
- priority_score: development_cost multiplied by effect_score (lower is more urgent)

Reply with a JSON object of this shape:
{{
  "categories": [
    {{"name": "category name", "count": 0, "importance": "high|medium|low"}}
  ],
  "recommended_features": [
    {{
      "title": "feature name",
      "description": "what the feature does",
      "development_cost": 1,
      "effect_score": 1,
      "priority_score": 1,
      "related_feedback_count": 0,
      "category": "related category"
    }}
  ]
}}

Recommend the {max_features} features with the lowest priority_score.
Base every recommendation on the actual feedback and keep it specific and practical.
"""


def build_prd_generation_prompt(task: TaskCandidate) -> str:
    """
    Build the PRD generation prompt for a task.

    The model is asked to wrap each section in ``[SECTION:<name>]`` blocks.
    """
    effect = EFFECT_LABELS.get(task.effect_score) if task.effect_score is not None else None
    section_specs = "\n\n".join(
        f"[SECTION:{name}]\n{PRD_SECTION_TITLES[name]}: {SECTION_GUIDANCE[name]}\n[/SECTION]"
        for name in PRD_SECTIONS
    )

    return f"""Write a detailed PRD (Product Requirements Document) for the following task.

Task:
- Title: {_value(task.title)}
- Description: {_value(task.description)}
- Priority: {_value(task.priority)}
- Development cost (man-months): {_value(task.development_cost)}
- Effect score: {_value(task.effect_score)} ({_value(effect)})
- Frequency score: {_value(task.frequency_score)}
- Impact score: {_value(task.impact_score)}

Write every section, each wrapped exactly like this:

{section_specs}

Replace the description inside each block with the section content.
Keep it concrete enough for the team to start building from it.
"""


def build_prd_chat_prompt(
    prd: PRDDraft,
    user_message: str,
    history: Sequence[ChatMessage] = (),
) -> str:
    """
    Build the PRD refinement chat prompt.

    Section rewrites must come back as ``[UPDATED_SECTION:<name>]`` blocks.
    """
    if history:
        conversation = "\n".join(
            f"{'User' if message.role == MessageRole.USER else 'Assistant'}: {message.content}"
            for message in history
        )
    else:
        conversation = NOT_PROVIDED

    section_names = ", ".join(PRD_SECTIONS)

    return f"""You help product managers improve a PRD (Product Requirements Document).

Current PRD:
{_prd_block(prd)}

Conversation so far:
{conversation}

User request:
{user_message.strip()}

Depending on the request, answer the question, suggest improvements, or rewrite sections.
Always explain your answer in plain prose.
When a section must change, also return its full new text in a block like:

[UPDATED_SECTION:background]
new background text
[/UPDATED_SECTION]

Valid section names: {section_names}. Only include blocks for sections that change.
"""


def build_content_prompt(
    prd: PRDDraft,
    content_type: str,
    image_urls: Sequence[str] = (),
    catalog: Optional[ContentStyleCatalog] = None,
) -> str:
    """Build the prompt for one piece of launch or support content."""
    catalog = catalog or get_style_catalog()
    guidance = catalog.guidance_for(content_type)

    if image_urls:
        images = "\n".join(
            f"Service image {index}: {url}" for index, url in enumerate(image_urls, start=1)
        )
    else:
        images = f"Service images: {NOT_PROVIDED}"

    return f"""{guidance}

Write a {content_type} based on the following PRD:

{_prd_block(prd)}

{images}

Combine the information above into a high-quality {content_type} ready to publish.
"""

"""
PRD draft domain model and chat messages.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from pm_autopilot.core.constants import PRD_SECTIONS, DocumentStatus, MessageRole
from pm_autopilot.domain.base import Record, utc_now


class PRDDraft(Record):
    """A versioned product requirements document tied to at most one task."""

    task_id: Optional[str] = Field(default=None, description="Source task candidate")
    title: str = Field(..., description="Document title")

    background: Optional[str] = Field(default=None)
    problem: Optional[str] = Field(default=None)
    solution: Optional[str] = Field(default=None)
    ux_requirements: Optional[str] = Field(default=None)
    edge_cases: Optional[str] = Field(default=None)

    status: DocumentStatus = Field(default=DocumentStatus.DRAFT)
    version: int = Field(default=1, ge=1)
    output_url: Optional[str] = Field(default=None)

    metadata: dict[str, Any] = Field(default_factory=dict)

    def sections(self) -> dict[str, Optional[str]]:
        """Return the five document sections keyed by name."""
        return {name: getattr(self, name) for name in PRD_SECTIONS}

    def apply_sections(self, updates: dict[str, str]) -> list[str]:
        """
        Overwrite the named sections.

        Unknown section names are ignored.

        Returns:
            Names of the sections that were changed
        """
        changed = []
        for name, content in updates.items():
            if name in PRD_SECTIONS and getattr(self, name) != content:
                setattr(self, name, content)
                changed.append(name)
        if changed:
            self.touch()
        return changed


class ChatMessage(BaseModel):
    """A message in a PRD refinement conversation."""

    role: MessageRole = Field(..., description="Who wrote the message")
    content: str = Field(..., description="Message text")
    timestamp: datetime = Field(default_factory=utc_now)

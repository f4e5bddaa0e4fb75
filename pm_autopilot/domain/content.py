"""
Content asset domain models.
"""

from typing import Optional

from pydantic import Field, computed_field

from pm_autopilot.core.constants import ContentAssetType, DocumentStatus, TargetChannel
from pm_autopilot.domain.base import Record
from pm_autopilot.domain.prd import PRDDraft
from pm_autopilot.domain.task import TaskCandidate


class ContentAsset(Record):
    """A generated artifact (FAQ, banner, notification, guide, announcement)."""

    task_id: Optional[str] = Field(default=None)
    prd_id: Optional[str] = Field(default=None)

    type: ContentAssetType = Field(..., description="Kind of asset")
    title: str = Field(..., description="Asset title")
    content: Optional[str] = Field(default=None, description="Asset body text")
    target_channel: Optional[TargetChannel] = Field(default=None)

    status: DocumentStatus = Field(default=DocumentStatus.DRAFT)
    output_url: Optional[str] = Field(default=None)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def word_count(self) -> int:
        """Length of the content in characters."""
        return len(self.content or "")


class ContentAssetWithDetails(ContentAsset):
    """Content asset joined with its task and PRD for listing."""

    task: Optional[TaskCandidate] = Field(default=None)
    prd: Optional[PRDDraft] = Field(default=None)

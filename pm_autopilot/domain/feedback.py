"""
Feedback domain models: ingested VOC rows and their sources.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pm_autopilot.core.constants import FeedbackSourceStatus
from pm_autopilot.domain.base import Record


class FeedbackEntry(BaseModel):
    """A single customer feedback row taken from a spreadsheet."""

    date: str = Field(default="", description="Date column as written in the sheet")
    feedback: str = Field(..., description="Feedback text")


class FeedbackSource(Record):
    """A named, URL-addressed origin of customer feedback."""

    name: str = Field(..., description="Display name")
    source_url: str = Field(..., description="Spreadsheet link")
    description: Optional[str] = Field(default=None)
    status: FeedbackSourceStatus = Field(default=FeedbackSourceStatus.ACTIVE)
    last_analyzed_at: Optional[datetime] = Field(default=None)

    feedback_count: int = Field(default=0, ge=0, description="Rows ingested by the last analysis")
    last_analysis: Optional[str] = Field(
        default=None, description="Raw analysis text from the last run"
    )

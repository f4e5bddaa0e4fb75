"""
Task candidate domain model.
"""

from typing import Optional

from pydantic import Field, computed_field

from pm_autopilot.core.constants import SCORE_MAX, SCORE_MIN, TaskPriority, TaskStatus
from pm_autopilot.domain.base import Record


def compute_priority_score(development_cost: Optional[int], effect_score: Optional[int]) -> int:
    """Cost times effect with each absent factor treated as 1; lower is better."""
    return (development_cost or 1) * (effect_score or 1)


class TaskCandidate(Record):
    """A proposed improvement item derived from feedback."""

    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(default=None)
    source_feedback_id: Optional[str] = Field(default=None, description="Originating feedback source")

    frequency_score: Optional[int] = Field(default=None, ge=0)
    impact_score: Optional[int] = Field(default=None, ge=0)
    development_cost: Optional[int] = Field(
        default=None, ge=SCORE_MIN, le=SCORE_MAX, description="Estimated man-months (1-3)"
    )
    effect_score: Optional[int] = Field(
        default=None, ge=SCORE_MIN, le=SCORE_MAX, description="Expected effect (1 best - 3 worst)"
    )

    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    status: TaskStatus = Field(default=TaskStatus.PENDING)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_score(self) -> int:
        """Frequency plus impact, absent scores counted as zero."""
        return (self.frequency_score or 0) + (self.impact_score or 0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def priority_score(self) -> int:
        """Cost times effect; lower ranks first."""
        return compute_priority_score(self.development_cost, self.effect_score)

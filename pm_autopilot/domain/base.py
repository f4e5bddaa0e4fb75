"""
Shared base for persisted domain records.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """A persisted record with a surrogate id, creator and timestamps."""

    id: str = Field(..., description="Surrogate identifier")
    created_by: Optional[str] = Field(default=None, description="Creator user ID")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def touch(self) -> None:
        """Refresh the update timestamp."""
        self.updated_at = utc_now()

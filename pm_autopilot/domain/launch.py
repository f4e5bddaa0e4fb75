"""
Service launch domain model.
"""

from typing import Optional

from pydantic import Field

from pm_autopilot.core.constants import LAUNCH_IMAGE_SLOTS, LaunchStatus
from pm_autopilot.domain.base import Record


class ServiceLaunch(Record):
    """Images and generated marketing/support content for one PRD."""

    prd_id: str = Field(..., description="PRD this launch belongs to")
    image_1_url: Optional[str] = Field(default=None)
    image_2_url: Optional[str] = Field(default=None)
    image_3_url: Optional[str] = Field(default=None)
    generated_content: dict[str, str] = Field(
        default_factory=dict, description="Generated text keyed by content-type label"
    )
    status: LaunchStatus = Field(default=LaunchStatus.PREPARING)

    @staticmethod
    def image_field(slot: int) -> str:
        """Attribute name holding the image URL for a 0-based slot."""
        if not 0 <= slot < LAUNCH_IMAGE_SLOTS:
            raise ValueError(f"image slot must be between 0 and {LAUNCH_IMAGE_SLOTS - 1}")
        return f"image_{slot + 1}_url"

    @property
    def image_urls(self) -> list[str]:
        """Uploaded image URLs in slot order, skipping empty slots."""
        urls = [getattr(self, self.image_field(slot)) for slot in range(LAUNCH_IMAGE_SLOTS)]
        return [url for url in urls if url]

"""
Object storage for uploaded launch images.
"""

from pm_autopilot.storage.image_storage import LocalImageStorage

__all__ = ["LocalImageStorage"]

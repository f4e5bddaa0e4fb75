"""
API v1 routers.
"""

from pm_autopilot.api.v1 import auth, content, dashboard, feedback, health, launches, prds, tasks, voc

__all__ = ["auth", "content", "dashboard", "feedback", "health", "launches", "prds", "tasks", "voc"]

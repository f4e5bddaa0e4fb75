"""
Domain models.
"""

from pm_autopilot.domain.base import Record, utc_now
from pm_autopilot.domain.content import ContentAsset, ContentAssetWithDetails
from pm_autopilot.domain.feedback import FeedbackEntry, FeedbackSource
from pm_autopilot.domain.launch import ServiceLaunch
from pm_autopilot.domain.prd import ChatMessage, PRDDraft
from pm_autopilot.domain.task import TaskCandidate, compute_priority_score
from pm_autopilot.domain.user import AuthSession, User

__all__ = [
    "AuthSession",
    "ChatMessage",
    "ContentAsset",
    "ContentAssetWithDetails",
    "FeedbackEntry",
    "FeedbackSource",
    "PRDDraft",
    "Record",
    "ServiceLaunch",
    "TaskCandidate",
    "User",
    "compute_priority_score",
    "utc_now",
]

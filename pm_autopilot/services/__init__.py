"""
Application services.
"""

from pm_autopilot.services.auth_service import AuthService
from pm_autopilot.services.content_service import ContentService
from pm_autopilot.services.dashboard_service import DashboardService, DashboardStats
from pm_autopilot.services.feedback_service import FeedbackService
from pm_autopilot.services.launch_service import LaunchContentResult, LaunchService
from pm_autopilot.services.prd_service import PRDChatResult, PRDService
from pm_autopilot.services.task_service import TaskPage, TaskService
from pm_autopilot.services.voc_analysis_service import VOCAnalysisResult, VOCAnalysisService

__all__ = [
    "AuthService",
    "ContentService",
    "DashboardService",
    "DashboardStats",
    "FeedbackService",
    "LaunchContentResult",
    "LaunchService",
    "PRDChatResult",
    "PRDService",
    "TaskPage",
    "TaskService",
    "VOCAnalysisResult",
    "VOCAnalysisService",
]

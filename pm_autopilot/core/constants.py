"""
System-wide constants for PM Autopilot.
"""

from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class FeedbackSourceStatus(str, Enum):
    """Lifecycle of a feedback source."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class TaskPriority(str, Enum):
    """Priority tier of a task candidate."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    """Workflow status of a task candidate."""

    PENDING = "pending"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class DocumentStatus(str, Enum):
    """Lifecycle shared by PRD drafts and content assets."""

    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    PUBLISHED = "published"


class LaunchStatus(str, Enum):
    """Lifecycle of a service launch."""

    PREPARING = "preparing"
    READY = "ready"
    LAUNCHED = "launched"


class ContentAssetType(str, Enum):
    """Kinds of generated content assets."""

    FAQ = "faq"
    BANNER = "banner"
    NOTIFICATION = "notification"
    GUIDE = "guide"
    ANNOUNCEMENT = "announcement"


class TargetChannel(str, Enum):
    """Channels a content asset can be published to."""

    SLACK = "slack"
    CONFLUENCE = "confluence"
    BLOG = "blog"
    CUSTOMER_CENTER = "customer_center"
    APP_POPUP = "app_popup"


class MessageRole(str, Enum):
    """Roles in a PRD chat conversation."""

    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# Status ordering
# =============================================================================

# Forward-only lifecycles: a status may only move to a later position.
DOCUMENT_STATUS_ORDER = [
    DocumentStatus.DRAFT,
    DocumentStatus.REVIEW,
    DocumentStatus.APPROVED,
    DocumentStatus.PUBLISHED,
]

LAUNCH_STATUS_ORDER = [
    LaunchStatus.PREPARING,
    LaunchStatus.READY,
    LaunchStatus.LAUNCHED,
]

TASK_STATUS_ORDER = [
    TaskStatus.PENDING,
    TaskStatus.APPROVED,
    TaskStatus.IN_PROGRESS,
    TaskStatus.COMPLETED,
]

TASK_TERMINAL_STATUSES = {TaskStatus.COMPLETED, TaskStatus.REJECTED}


# =============================================================================
# PRD sections
# =============================================================================

PRD_SECTIONS = ["background", "problem", "solution", "ux_requirements", "edge_cases"]

PRD_SECTION_TITLES = {
    "background": "Background",
    "problem": "Problem",
    "solution": "Solution",
    "ux_requirements": "UX Requirements",
    "edge_cases": "Edge Cases",
}

# Heading keywords recognised by the heuristic section extractor
PRD_SECTION_KEYWORDS = {
    "background": ["배경", "background"],
    "problem": ["문제 정의", "문제", "problem"],
    "solution": ["해결방안", "해결 방안", "solution"],
    "ux_requirements": ["ux 요구사항", "ux requirements", "ux requirement"],
    "edge_cases": ["엣지 케이스", "edge cases", "edge case"],
}


# =============================================================================
# API Constants
# =============================================================================

API_VERSION = "v1"
API_PREFIX = f"/api/{API_VERSION}"

# Default pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# =============================================================================
# Domain Constants
# =============================================================================

NOT_PROVIDED = "Not provided"

LAUNCH_IMAGE_SLOTS = 3

SCORE_MIN = 1
SCORE_MAX = 3

# Effect score labels (1 is the strongest effect)
EFFECT_LABELS = {1: "good", 2: "moderate", 3: "low"}

CHAT_FALLBACK_RESPONSE = "The response was generated."

ACCESS_DENIED_HINT = (
    'Share the spreadsheet with "Anyone with the link" and paste the link of '
    "the exact sheet tab (including its gid)."
)

# Identifier prefixes
ID_PREFIXES = {
    "feedback_source": "src",
    "task": "task",
    "prd": "prd",
    "content_asset": "asset",
    "service_launch": "launch",
    "user": "user",
}

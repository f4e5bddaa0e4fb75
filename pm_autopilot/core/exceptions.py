"""
Custom exception hierarchy for PM Autopilot.
Provides structured error handling with proper HTTP status codes.
"""

from typing import Any, Optional

from pm_autopilot.core.constants import ACCESS_DENIED_HINT


class PMAutopilotError(Exception):
    """Base exception for all PM Autopilot errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Configuration Errors (500)
# =============================================================================


class ConfigurationError(PMAutopilotError):
    """Error in application configuration."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
            status_code=500,
        )


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(PMAutopilotError):
    """Request validation failed."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details=details,
            status_code=400,
        )


class InvalidInputError(ValidationError):
    """A required field is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message=message, details=details)
        self.code = "INVALID_INPUT"


class InvalidSourceError(InvalidInputError):
    """The feedback source URL is not a recognised spreadsheet link."""

    def __init__(self, url: str) -> None:
        super().__init__(
            message="The URL is not a valid Google Spreadsheets link",
            field="spreadsheet_url",
        )
        self.details["url"] = url
        self.code = "INVALID_SOURCE"


# =============================================================================
# Authentication and Access Errors (401, 403)
# =============================================================================


class AuthenticationError(PMAutopilotError):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            message=message,
            code="AUTHENTICATION_REQUIRED",
            status_code=401,
        )


class AccessDeniedError(PMAutopilotError):
    """The source document is private or not shared."""

    def __init__(self, message: str, hint: str = ACCESS_DENIED_HINT) -> None:
        super().__init__(
            message=message,
            code="ACCESS_DENIED",
            details={"hint": hint},
            status_code=403,
        )


# =============================================================================
# Not Found Errors (404)
# =============================================================================


class NotFoundError(PMAutopilotError):
    """Requested resource not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        msg = message or f"{resource_type} not found"
        if resource_id:
            msg = f"{resource_type} with ID '{resource_id}' not found"

        super().__init__(
            message=msg,
            code="NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
            status_code=404,
        )


class FeedbackSourceNotFoundError(NotFoundError):
    """Feedback source not found."""

    def __init__(self, source_id: str) -> None:
        super().__init__(resource_type="FeedbackSource", resource_id=source_id)
        self.code = "FEEDBACK_SOURCE_NOT_FOUND"


class TaskNotFoundError(NotFoundError):
    """Task candidate not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(resource_type="TaskCandidate", resource_id=task_id)
        self.code = "TASK_NOT_FOUND"


class PRDNotFoundError(NotFoundError):
    """PRD draft not found."""

    def __init__(self, prd_id: str) -> None:
        super().__init__(resource_type="PRDDraft", resource_id=prd_id)
        self.code = "PRD_NOT_FOUND"


class ContentAssetNotFoundError(NotFoundError):
    """Content asset not found."""

    def __init__(self, asset_id: str) -> None:
        super().__init__(resource_type="ContentAsset", resource_id=asset_id)
        self.code = "CONTENT_ASSET_NOT_FOUND"


class ServiceLaunchNotFoundError(NotFoundError):
    """Service launch not found."""

    def __init__(self, launch_id: str) -> None:
        super().__init__(resource_type="ServiceLaunch", resource_id=launch_id)
        self.code = "SERVICE_LAUNCH_NOT_FOUND"


# =============================================================================
# External Service Errors (502)
# =============================================================================


class UpstreamServiceError(PMAutopilotError):
    """Error communicating with an upstream service."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"{service_name} error: {message}",
            code="UPSTREAM_SERVICE_ERROR",
            details={"service": service_name, **(details or {})},
            status_code=502,
        )


class GeminiError(UpstreamServiceError):
    """Error communicating with the Gemini API."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Gemini", message=message, details=details)
        self.code = "GEMINI_ERROR"


class SpreadsheetFetchError(UpstreamServiceError):
    """The spreadsheet export could not be fetched."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Google Sheets", message=message, details=details)
        self.code = "SPREADSHEET_FETCH_ERROR"


class DatabaseError(UpstreamServiceError):
    """Error communicating with database."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Database", message=message, details=details)
        self.code = "DATABASE_ERROR"


class StorageError(UpstreamServiceError):
    """Error writing to object storage."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Storage", message=message, details=details)
        self.code = "STORAGE_ERROR"


# =============================================================================
# Business Logic Errors (422)
# =============================================================================


class BusinessLogicError(PMAutopilotError):
    """Business logic validation failed."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="BUSINESS_LOGIC_ERROR",
            details=details,
            status_code=422,
        )


class EmptyResultError(BusinessLogicError):
    """No usable rows were extracted from the source."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message=message, details=details)
        self.code = "EMPTY_RESULT"


class InvalidStatusTransitionError(BusinessLogicError):
    """A status change would move a record backwards or out of a terminal state."""

    def __init__(self, resource_type: str, current: str, requested: str) -> None:
        super().__init__(
            message=f"{resource_type} cannot move from '{current}' to '{requested}'",
            details={
                "resource_type": resource_type,
                "current_status": current,
                "requested_status": requested,
            },
        )
        self.code = "INVALID_STATUS_TRANSITION"

"""quota-gate exception hierarchy.

Every error a client can see carries a machine-readable ``code`` and the HTTP
status it maps to. Programmer errors (an unknown membership tier or content
type) are plain ``ValueError`` and live outside this hierarchy.
"""

from typing import Any, Optional

QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
UNAUTHORIZED = "UNAUTHORIZED"
NETWORK_ERROR = "NETWORK_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

ERROR_MESSAGES = {
    QUOTA_EXCEEDED: "You have reached your content limit. Please upgrade your membership.",
    NOT_FOUND: "The requested resource was not found",
    VALIDATION_ERROR: "Validation failed",
    UNAUTHORIZED: "Authentication required",
    NETWORK_ERROR: "Unable to connect to the server. Please check your internet connection.",
    UNKNOWN_ERROR: "An unexpected error occurred. Please try again.",
}


class QuotaGateError(Exception):
    """Base exception for all quota-gate errors."""

    status_code = 500

    def __init__(
        self,
        message: str = "",
        code: str = UNKNOWN_ERROR,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message or ERROR_MESSAGES.get(code, "")
        self.code = code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"error": error}


class ValidationError(QuotaGateError):
    """Raised when request input is malformed."""

    status_code = 400

    def __init__(self, fields: dict[str, str], message: str = ""):
        self.fields = fields
        super().__init__(message, code=VALIDATION_ERROR, details={"fields": fields})


class UnauthorizedError(QuotaGateError):
    """Raised when no valid authenticated user can be resolved."""

    status_code = 401

    def __init__(self, message: str = ""):
        super().__init__(message, code=UNAUTHORIZED)


class QuotaExceededError(QuotaGateError):
    """Raised when a fresh item is requested with the tier quota exhausted."""

    status_code = 403

    def __init__(self, current_usage: int, limit: int, membership_type: str, message: str = ""):
        self.current_usage = current_usage
        self.limit = limit
        self.membership_type = membership_type
        super().__init__(
            message,
            code=QUOTA_EXCEEDED,
            details={
                "currentUsage": current_usage,
                "limit": limit,
                "membershipType": membership_type,
            },
        )


class NotFoundError(QuotaGateError):
    """Raised when a resource has no backing document."""

    status_code = 404

    def __init__(self, resource: str = "", message: str = ""):
        self.resource = resource
        super().__init__(
            message or (f"{resource} not found" if resource else ""),
            code=NOT_FOUND,
            details={"resource": resource} if resource else None,
        )


class ArticleNotFoundError(NotFoundError):
    def __init__(self, message: str = ""):
        super().__init__("Article", message)


class VideoNotFoundError(NotFoundError):
    def __init__(self, message: str = ""):
        super().__init__("Video", message)


class StoreUnavailableError(QuotaGateError):
    """Raised when the backing store fails or times out. Safe to retry manually."""

    status_code = 503

    def __init__(self, message: str = "A storage error occurred. Please try again."):
        super().__init__(message, code=UNKNOWN_ERROR)


class UsageConflictError(StoreUnavailableError):
    """Raised when a grant keeps losing compare-and-swap races."""

    def __init__(self, message: str = "Usage record is busy. Please try again."):
        super().__init__(message)

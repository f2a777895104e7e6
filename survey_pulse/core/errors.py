"""Error Hierarchy — typed, categorized exceptions for all Survey Pulse failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation errors (400-level) are returned to the caller, never converted to success
    - Upstream errors (503) propagate; they are never replaced by placeholder data
    - IntegrityAnomaly is NOT an exception: it is reported and excluded, never raised

Design Decisions:
    - Single hierarchy with SurveyPulseError base: FastAPI global handler catches all
      (uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    survey_id: str | None = None
    user_id: str | None = None
    question_index: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class SurveyPulseError(Exception):
    """Base exception for all Survey Pulse errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "survey_id": self.context.survey_id,
                    "user_id": self.context.user_id,
                    "question_index": self.context.question_index,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidInputError(SurveyPulseError):
    """Malformed id, out-of-range question index, or wrong-typed answer value."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class MissingRequiredError(SurveyPulseError):
    """One or more required questions were left unanswered."""
    def __init__(self, missing_indices: list[int], context: ErrorContext | None = None):
        super().__init__(
            "Missing answers for required question(s) at index "
            f"{', '.join(str(i) for i in missing_indices)}",
            "MISSING_REQUIRED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.missing_indices = missing_indices


class ResourceNotFoundError(SurveyPulseError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateSubmissionError(SurveyPulseError):
    """A response already exists for this (user, survey) pair."""
    def __init__(self, user_id: str, survey_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_id = user_id
        ctx.survey_id = survey_id
        super().__init__(
            f"User '{user_id}' has already responded to survey '{survey_id}'",
            "DUPLICATE_SUBMISSION", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


class ResourceConflictError(SurveyPulseError):
    """Unique attribute already taken (e.g. a directory email)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESOURCE_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class UpstreamUnavailableError(SurveyPulseError):
    """Repository or definition store failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Upstream {operation} failed: {message}",
            "UPSTREAM_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class QueryTimeoutError(SurveyPulseError):
    """A repository-backed operation exceeded the caller's timeout."""
    def __init__(self, operation: str, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"{operation} did not complete within {timeout_seconds}s",
            "QUERY_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


# ─── Non-fatal anomalies ────────────────────────────────────────

@dataclass(frozen=True)
class IntegrityAnomaly:
    """A response referencing a survey that no longer resolves."""
    response_id: str
    survey_id: str
    user_id: str
    code: str = "INTEGRITY_ANOMALY"

    def to_log_extra(self) -> dict:
        return {
            "error_code": self.code,
            "response_id": self.response_id,
            "survey_id": self.survey_id,
            "user_id": self.user_id,
        }

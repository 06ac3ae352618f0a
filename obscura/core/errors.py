"""Error Hierarchy — typed, categorized exceptions for all Obscura failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST error envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ObscuraError base: FastAPI global handler catches all
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
    MIGRATION = "migration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    story_id: int | None = None
    debug_info: dict[str, Any] | None = None


@dataclass(frozen=True)
class FieldViolation:
    """A single failed field rule on an inbound request."""
    field: str
    message: str
    type: str = "value_error"


class ObscuraError(Exception):
    """Base exception for all Obscura errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class StoryValidationError(ObscuraError):
    """One or more request fields failed validation."""
    def __init__(
        self, violations: list[FieldViolation], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Invalid request data", "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.violations = violations

    def to_response(self) -> dict:
        return _with_details(super().to_response(), self.violations)


class MalformedRequestError(ObscuraError):
    """Request body or path parameter could not be decoded."""
    def __init__(
        self,
        message: str,
        violations: list[FieldViolation] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "MALFORMED_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.violations = violations or []

    def to_response(self) -> dict:
        return _with_details(super().to_response(), self.violations)


class StoryNotFoundError(ObscuraError):
    """Requested story does not exist."""
    def __init__(self, story_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.story_id = story_id
        super().__init__(
            f"Story not found with id: {story_id}",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.story_id = story_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ObscuraError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class MigrationError(ObscuraError):
    """Schema migration could not be applied."""
    def __init__(
        self, message: str, revision: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Migration failed: {message}",
            "MIGRATION_ERROR", ErrorCategory.MIGRATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.revision = revision


def _with_details(response: dict, violations: list[FieldViolation]) -> dict:
    response["error"]["details"] = [
        {"field": v.field, "message": v.message, "type": v.type}
        for v in violations
    ]
    return response

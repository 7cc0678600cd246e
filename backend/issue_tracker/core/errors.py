"""Error Hierarchy — typed, categorized exceptions for every issue-tracker failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) never reach the store; server errors (500-level) come from it
    - message is the short, stable text returned to the client verbatim
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with IssueTrackerError base: one global handler renders all of them
    - Builders report validation failures as booleans; routes raise these errors
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
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    project: str | None = None
    issue_id: str | None = None
    debug_info: dict[str, Any] | None = None


class IssueTrackerError(Exception):
    """Base exception for all issue-tracker errors."""

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

    def to_log_extra(self) -> dict:
        """Fields attached to the log record for this error."""
        return {
            "error_code": self.code,
            "project": self.context.project,
            "issue_id": self.context.issue_id,
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class MissingRequiredInputError(IssueTrackerError):
    """A create-required field is absent."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "missing input data", "MISSING_REQUIRED_INPUT",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )


class InvalidInputError(IssueTrackerError):
    """A present field fails its type, length or format rule."""
    def __init__(
        self, message: str = "invalid input data",
        field: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_INPUT",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class InvalidQueryError(InvalidInputError):
    """A filter or identifier fails its rule."""
    def __init__(self, field: str | None = None, context: ErrorContext | None = None):
        super().__init__("invalid query", field, context)
        self.code = "INVALID_QUERY"


class EmptyUpdateError(IssueTrackerError):
    """Update payload carries nothing to change."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "no updated field sent", "EMPTY_UPDATE",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )


class MissingIdentifierError(IssueTrackerError):
    """Update or delete issued without an issue id."""
    def __init__(self, message: str = "no id sent", context: ErrorContext | None = None):
        super().__init__(
            message, "MISSING_IDENTIFIER",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )


# ─── Server Errors (500-level) ──────────────────────────────────

class PersistenceFailureError(IssueTrackerError):
    """Store operation failed or affected no document where one was expected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "PERSISTENCE_FAILURE",
            ErrorCategory.DATABASE, ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(IssueTrackerError):
    """Database operation failed (raised by infrastructure, translated by routes)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation

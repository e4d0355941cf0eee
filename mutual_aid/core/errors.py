"""Error Hierarchy — typed, categorized exceptions for all help request failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are client errors, never retried; infrastructure
      errors (500-level) are critical
    - to_response() produces the REST envelope consumed by api/error_handlers.py
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with MutualAidError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: structured diagnostics (record id, transition pair,
      field name) without coupling to the logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    help_request_id: str | None = None
    user_id: str | None = None
    field: str | None = None
    from_status: str | None = None
    to_status: str | None = None
    debug_info: dict[str, Any] | None = None


class MutualAidError(Exception):
    """Base exception for all help request errors."""

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
                "context": {
                    "help_request_id": self.context.help_request_id,
                    "field": self.context.field,
                    "from": self.context.from_status,
                    "to": self.context.to_status,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(MutualAidError):
    """Malformed input that passed the transport schema (e.g. empty article list)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class InvalidTransitionError(MutualAidError):
    """Requested status change is not an edge of the status model."""
    def __init__(
        self, from_status: str, to_status: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.from_status = from_status
        ctx.to_status = to_status
        super().__init__(
            f"Cannot move help request from '{from_status}' to '{to_status}'",
            "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.from_status = from_status
        self.to_status = to_status


class OwnershipError(MutualAidError):
    """Caller is neither the requester nor the assigned helper required by the change."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class HelpRequestClosedError(MutualAidError):
    """Content edit attempted on a help request in a terminal status."""
    def __init__(self, status: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.from_status = status
        super().__init__(
            f"Help request is {status} and can no longer be edited",
            "HELP_REQUEST_CLOSED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )


class ResourceNotFoundError(MutualAidError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class AuthError(MutualAidError):
    """Request carries no valid principal."""
    def __init__(self, message: str = "Not authenticated", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ConcurrencyError(MutualAidError):
    """Concurrent modification kept winning the optimistic version check."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(MutualAidError):
    """Store operation failed or a record invariant was violated before write."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation

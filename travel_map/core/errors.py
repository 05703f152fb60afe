"""Error Hierarchy — typed, categorized exceptions for all travel map failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST error envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TravelMapError base: one global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TravelMapError(Exception):
    """Base exception for all travel map errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: list | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        error = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.details:
            error["details"] = self.details
        return {"error": error}


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidRequestError(TravelMapError):
    """Request is well-formed JSON but semantically invalid."""
    def __init__(
        self, message: str, field: str | None = None,
        details: list | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400, details,
        )
        self.field = field


class UnauthorizedError(TravelMapError):
    """No valid session for an endpoint that requires one."""
    def __init__(
        self, message: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(TravelMapError):
    """Caller is signed in but may not act on the resource."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(TravelMapError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class AlreadyLikedError(TravelMapError):
    """The caller already liked this post or comment."""
    def __init__(self, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"Already liked this {target}",
            "ALREADY_LIKED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.target = target


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TravelMapError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class StorageError(TravelMapError):
    """Object storage request failed."""
    def __init__(
        self, message: str, status_code: int | None = None,
        details: list | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Storage request failed: {message}",
            "STORAGE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 500, details,
        )
        self.status_code = status_code
        self.reason = message

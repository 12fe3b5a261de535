"""Error Hierarchy — typed, categorized exceptions for all calftrack failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error handler
    - No internal details leaked in user-facing messages (causes go to debug_info)

Design Decisions:
    - Single hierarchy with CalftrackError base: FastAPI global handler catches all
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    REFERENTIAL = "referential"
    CONFLICT = "conflict"
    TRANSACTION = "transaction"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_type: str | None = None
    resource_id: str | None = None
    field: str | None = None
    details: list[dict[str, Any]] | None = None
    debug_info: dict[str, Any] | None = None


class CalftrackError(Exception):
    """Base exception for all calftrack errors."""

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
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.context.field is not None:
            error["field"] = self.context.field
        if self.context.details:
            error["details"] = self.context.details
        if self.context.resource_type is not None:
            error["resource"] = {
                "type": self.context.resource_type,
                "id": self.context.resource_id,
            }
        return {"error": error}


# ─── Domain Errors (400-level) ──────────────────────────────────

class FieldValidationError(CalftrackError):
    """Input rejected before any write: missing field, bad enum, bad date."""
    def __init__(
        self, message: str, field: str, value: Any = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field = field
        ctx.details = [{"field": field, "message": message, "value": _printable(value)}]
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field
        self.value = value


class BusinessRuleError(CalftrackError):
    """Request is well-formed but violates a domain rule."""
    def __init__(self, message: str, code: str = "BUSINESS_RULE_VIOLATED",
                 context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class ForbiddenActionError(CalftrackError):
    """Acting ranch is not allowed to perform this action."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN_ACTION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 403,
        )


class ResourceNotFoundError(CalftrackError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: Any,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = str(resource_id)
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(CalftrackError):
    """Unique constraint violated (duplicate ranch name, breed, seller)."""
    def __init__(
        self, message: str, field: str | None = None, value: Any = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field = field
        if field is not None:
            ctx.details = [{"field": field, "value": _printable(value)}]
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.field = field
        self.value = value


class ReferentialIntegrityError(CalftrackError):
    """Foreign key violated (reference to a ranch/calf/load that is gone)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "REFERENTIAL_INTEGRITY", ErrorCategory.REFERENTIAL,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class TransactionFailedError(CalftrackError):
    """A unit of work was rolled back; the underlying cause is attached."""
    def __init__(
        self, operation: str, cause: BaseException,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.debug_info = {
            "operation": operation,
            "cause_type": type(cause).__name__,
            "cause": str(cause),
        }
        super().__init__(
            f"Transaction '{operation}' failed and was rolled back",
            "TRANSACTION_FAILED", ErrorCategory.TRANSACTION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation
        self.__cause__ = cause


class DatabaseError(CalftrackError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


def _printable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)

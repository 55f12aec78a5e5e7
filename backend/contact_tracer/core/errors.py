"""Error Hierarchy: typed, categorized exceptions for all contact-tracing failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - All core errors are recoverable: raised to the immediate caller, never fatal
    - Core raises, never logs; messaging is the caller's concern, keyed off `code`
    - to_response() produces the REST envelope used by the API shell

Design Decisions:
    - Single hierarchy with TracerError base: one FastAPI handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: entity/field details travel with the error, no logging coupling
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
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity_kind: str | None = None
    entity_id: int | None = None
    field_name: str | None = None
    debug_info: dict[str, Any] | None = None


class TracerError(Exception):
    """Base exception for all contact tracer errors."""

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
                    "entity_kind": self.context.entity_kind,
                    "entity_id": self.context.entity_id,
                    "field": self.context.field_name,
                },
            }
        }


# ─── Registry / Index Errors ────────────────────────────────────

class EntityNotFoundError(TracerError):
    """No matching Person/Location for the given id or value."""
    def __init__(
        self, entity_kind: str, entity_id: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity_kind = entity_kind
        ctx.entity_id = entity_id
        target = f"{entity_kind} {entity_id}" if entity_id is not None else entity_kind
        super().__init__(
            f"{target} not found",
            "ENTITY_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.entity_kind = entity_kind
        self.entity_id = entity_id


class DuplicateEntityError(TracerError):
    """Add/edit would leave two equal or same-identity entries in a registry."""
    def __init__(
        self, entity_kind: str, entity_id: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity_kind = entity_kind
        ctx.entity_id = entity_id
        super().__init__(
            f"This {entity_kind} already exists",
            "DUPLICATE_ENTITY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.entity_kind = entity_kind


class VisitNotFoundError(TracerError):
    """No visit matches the given (person, location, date) triple."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Visit not found",
            "VISIT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class DuplicateVisitError(TracerError):
    """Visit with the same (person, location, date) triple already exists."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "This visit already exists",
            "DUPLICATE_VISIT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Exposure Resolution Errors ─────────────────────────────────

class PersonNotInfectedError(TracerError):
    """Location generation requested for a person who is not infected."""
    def __init__(self, person_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity_kind = "person"
        ctx.entity_id = person_id
        super().__init__(
            "This person is not infected",
            "PERSON_NOT_INFECTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 422,
        )
        self.person_id = person_id


class PersonHasNoVisitsError(TracerError):
    """Infected person has no recorded visits to trace."""
    def __init__(self, person_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity_kind = "person"
        ctx.entity_id = person_id
        super().__init__(
            "This person is not associated with any visits",
            "PERSON_HAS_NO_VISITS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 422,
        )
        self.person_id = person_id


class NoLocationsGivenError(TracerError):
    """Exposure resolution called with an empty location list."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "At least one location id is required",
            "NO_LOCATIONS_GIVEN", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Boundary Validation Errors ─────────────────────────────────

class MissingFieldError(TracerError):
    """A required record field is absent or null."""
    def __init__(self, field_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field_name = field_name
        super().__init__(
            f"Visit's {field_name} field is missing!",
            "MISSING_FIELD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field_name = field_name


class InvalidFormatError(TracerError):
    """A record field is present but its value violates the field constraints."""
    def __init__(
        self, field_name: str, constraint: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field_name = field_name
        super().__init__(
            constraint,
            "INVALID_FORMAT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field_name = field_name


class InvalidIndexError(TracerError):
    """An id field is not a positive one-based decimal index."""
    def __init__(
        self, field_name: str, raw_value: object, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field_name = field_name
        super().__init__(
            f"Invalid index for {field_name}: {raw_value!r}",
            "INVALID_INDEX", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field_name = field_name


# ─── Command History Errors ─────────────────────────────────────

class NothingToUndoError(TracerError):
    """Undo requested with an empty history."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No more commands to undo",
            "NOTHING_TO_UNDO", ErrorCategory.CONFLICT,
            ErrorSeverity.INFO, context, 409,
        )


class NothingToRedoError(TracerError):
    """Redo requested with nothing undone."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No more commands to redo",
            "NOTHING_TO_REDO", ErrorCategory.CONFLICT,
            ErrorSeverity.INFO, context, 409,
        )

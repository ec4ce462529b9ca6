"""
Domain exceptions for the showcase backend.

Services raise these; centralized handlers in main.py turn them into JSON
error bodies. The authentication module raises them too so it stays usable
outside HTTP (init_db.py, the moderation console).

Every exception carries a correlation ID and an optional machine-readable
code that ends up in the error body.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        code: Optional machine-readable error code.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    code: str | None = None

    def __init__(
        self,
        message: str,
        correlation_id: str | None = None,
        code: str | None = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    code = "not_found"


class PermissionDeniedException(DomainException):
    """Raised when user lacks required permissions."""

    code = "permission_denied"


class ValidationException(DomainException):
    """Raised when input validation fails."""

    code = "validation_error"


class ConflictException(DomainException):
    """Raised when operation conflicts with existing data."""

    code = "conflict"


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    code = "not_authenticated"


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    code = "business_rule"


# Specific exceptions for domain entities


class IdeaNotFoundException(NotFoundException):
    """Idea not found."""

    def __init__(self, idea_id: int) -> None:
        super().__init__(f"Idea {idea_id} not found")
        self.idea_id = idea_id


class IdeaFileNotFoundException(NotFoundException):
    """Idea file not found."""

    def __init__(self, file_id: int) -> None:
        super().__init__(f"File {file_id} not found")
        self.file_id = file_id


class EventNotFoundException(NotFoundException):
    """Event not found."""

    def __init__(self, event_id: int) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class InsufficientPermissionsException(PermissionDeniedException):
    """User doesn't have sufficient permissions."""

    pass


class InvalidCategoryException(ValidationException):
    """Category label is not one of the known categories."""

    code = "invalid_category"

    def __init__(self, category: str) -> None:
        super().__init__(f"Unknown category: {category}")
        self.category = category


class InvalidStatusTransitionException(ConflictException):
    """Raised when moderation tries to move an idea that is not awaiting review."""

    code = "invalid_status_transition"

    def __init__(self, idea_id: int, current: str, requested: str) -> None:
        super().__init__(
            f"Idea {idea_id} is {current}; only submitted ideas can become {requested}"
        )
        self.idea_id = idea_id
        self.current = current
        self.requested = requested

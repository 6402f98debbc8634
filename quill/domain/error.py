"""Domain layer errors.

Every failure the comment engine reports is one of four kinds. The interface
layer maps each kind to a stable HTTP status.
"""


class DomainError(Exception):
    """Base domain error."""

    kind = "domain_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a post or comment is absent or soft-deleted."""

    kind = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ForbiddenError(DomainError):
    """Raised when the caller may not perform the operation."""

    kind = "forbidden"


class ConflictError(DomainError):
    """Raised when the request conflicts with existing state."""

    kind = "conflict"


class ValidationError(DomainError):
    """Raised when input breaks a domain rule (length, depth, edit window)."""

    kind = "validation_error"

"""Domain exceptions raised by services and translated to HTTP at the router boundary."""


class DomainError(Exception):
    """Base class for expected, user-facing failures."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    code = "NOT_FOUND"


class PermissionDeniedError(DomainError):
    code = "FORBIDDEN"


class ConflictError(DomainError):
    """A uniqueness rule would be violated (room number, bed number, email...)."""

    code = "CONFLICT"


class DuplicateEnquiryError(ConflictError):
    """Same phone already enquired within the duplicate window."""

    code = "DUPLICATE_ENQUIRY"


class InvalidOperationError(DomainError):
    code = "INVALID_OPERATION"


class UpstreamServiceError(DomainError):
    """An integration (image host, mail provider) failed."""

    code = "UPSTREAM_ERROR"

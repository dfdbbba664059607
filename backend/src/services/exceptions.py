"""
Shared exceptions for service layer operations.

Every service error carries the HTTP status it maps to. The API layer renders
all of them with the same error envelope, so routers can let them propagate.
"""


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a resource is missing or not owned by the caller."""

    status_code = 404


class UnauthorizedError(ServiceError):
    """Raised when credentials or tokens are missing, invalid, or stale."""

    status_code = 401


class ConflictError(ServiceError):
    """Raised when a unique key (email, tag name) is already taken."""

    status_code = 409


class InvalidRequestError(ServiceError):
    """Raised when a request is well-formed but cannot be honored in the current state."""

    status_code = 400


class MailDeliveryError(ServiceError):
    """Raised when an outgoing email could not be handed to the SMTP server."""

    status_code = 503

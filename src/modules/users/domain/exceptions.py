"""User domain exceptions.

Rendered by ``domain_exception_handler`` in core/interfaces/http/exceptions.py.
"""

from fastapi import status

from src.core.domain.exceptions import DomainException, EntityNotFoundError


class UserNotFoundError(EntityNotFoundError):
    """Raised when user is not found."""

    def __init__(self, user_id: int | None = None) -> None:
        super().__init__("User", user_id)


class InvalidOrExpiredTokenError(DomainException):
    """Raised when a magic link token cannot be redeemed.

    Unknown, already used and expired tokens are indistinguishable to callers.
    """

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_OR_EXPIRED_TOKEN"

    def __init__(self) -> None:
        super().__init__("Invalid or expired magic link")


class MagicLinkTokenMissingError(DomainException):
    """Raised when the verify request carries no token."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "TOKEN_REQUIRED"

    def __init__(self) -> None:
        super().__init__("Token is required")


class NotifierUnavailableError(DomainException):
    """Raised by a notifier that could not deliver a magic link.

    Never reaches the client: issuance degrades to logging the link.
    """

    http_status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "NOTIFIER_UNAVAILABLE"

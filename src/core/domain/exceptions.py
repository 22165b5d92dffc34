"""Base domain exceptions.

Every domain exception derives from DomainException and declares its HTTP
rendering through the ``http_status_code`` and ``error_code`` class attributes.
"""

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain errors."""

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)


class EntityNotFoundError(DomainException):
    """Raised when an entity is not found."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: int | str | None = None):
        message = f"{entity_type} not found"
        if entity_id is not None:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(message)


class ValidationError(DomainException):
    """Raised when validation fails."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"


class CredentialMissingError(DomainException):
    """Raised when a protected request carries no bearer credential."""

    http_status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "CREDENTIAL_MISSING"

    def __init__(self) -> None:
        super().__init__("Access token required")


class InvalidOrExpiredCredentialError(DomainException):
    """Raised when a session credential fails verification.

    Bad signature, malformed token and expiry all share one message.
    """

    http_status_code = status.HTTP_403_FORBIDDEN
    error_code = "INVALID_OR_EXPIRED_CREDENTIAL"

    def __init__(self) -> None:
        super().__init__("Invalid or expired token")

"""Bearer-credential authentication dependencies."""

from fastapi import Depends, Request
from loguru import logger

from src.core.application.security import AuthContext
from src.core.domain.exceptions import (
    CredentialMissingError,
    InvalidOrExpiredCredentialError,
)
from src.core.domain.ports.token import TokenService
from src.core.infrastructure.security.jwt import get_token_service


def extract_bearer_token(request: Request) -> str | None:
    """Return the credential from ``Authorization: Bearer <token>``, if any."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def authenticate_token(token: str, token_service: TokenService) -> AuthContext:
    """Verify a session credential and build the request's ``AuthContext``."""
    claims = token_service.verify_access_token(token)
    try:
        user_id = int(claims.subject)
    except ValueError:
        raise InvalidOrExpiredCredentialError()
    return AuthContext(user_id=user_id, email=claims.email)


async def get_current_auth(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> AuthContext:
    """Required auth: 401 without a credential, 403 with a bad one."""
    token = extract_bearer_token(request)
    if token is None:
        raise CredentialMissingError()
    return authenticate_token(token, token_service)


async def get_optional_auth(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> AuthContext | None:
    """Optional auth: any failure leaves the request unauthenticated."""
    token = extract_bearer_token(request)
    if token is None:
        return None
    try:
        return authenticate_token(token, token_service)
    except InvalidOrExpiredCredentialError as exc:
        logger.debug(f"Optional auth ignored a bad credential: {exc.message}")
        return None


async def get_current_user_id_from_auth(
    auth: AuthContext = Depends(get_current_auth),
) -> int:
    return auth.user_id

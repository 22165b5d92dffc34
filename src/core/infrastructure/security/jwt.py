"""JWT session credential handling."""

from datetime import UTC, datetime, timedelta

import jwt
from loguru import logger
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from src.core.config import settings
from src.core.domain.exceptions import InvalidOrExpiredCredentialError
from src.core.domain.ports.token import AccessTokenClaims

ACCESS_TOKEN_TYPE = "access"


class TokenPayload(BaseModel):
    """JWT payload structure."""

    sub: str = Field(..., min_length=1, description="Subject (identity id)")
    email: str = Field(..., min_length=1, description="Identity email")
    iat: int = Field(..., description="Issued-at timestamp", gt=0)
    exp: int = Field(..., description="Expiry timestamp", gt=0)
    type: str = Field(..., description="Token type")

    def is_access_token(self) -> bool:
        return self.type == ACCESS_TOKEN_TYPE


class JWTTokenService:
    """Mints and verifies HMAC-signed session credentials."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24,
    ):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = timedelta(minutes=expire_minutes)

    @property
    def access_token_ttl(self) -> timedelta:
        return self._ttl

    def create_access_token(
        self,
        subject: str,
        extra_claims: dict[str, object] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed access token for ``subject``."""
        now = datetime.now(UTC)
        expire = now + (expires_delta if expires_delta is not None else self._ttl)

        to_encode: dict[str, object] = {}
        if extra_claims:
            to_encode.update(extra_claims)
        to_encode.update(
            {
                "sub": str(subject),
                "iat": int(now.timestamp()),
                "exp": expire,
                "type": ACCESS_TOKEN_TYPE,
            }
        )
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        """Decode and validate an access token.

        Raises:
            InvalidOrExpiredCredentialError: bad signature, malformed token,
                wrong token type, missing claims or expiry.
        """
        try:
            raw = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
            payload = TokenPayload.model_validate(raw)
        except jwt.ExpiredSignatureError:
            logger.debug("Access token has expired")
            raise InvalidOrExpiredCredentialError()
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid access token: {e}")
            raise InvalidOrExpiredCredentialError()
        except PydanticValidationError as e:
            logger.debug(f"Malformed access token payload: {e.error_count()} errors")
            raise InvalidOrExpiredCredentialError()

        if not payload.is_access_token():
            logger.debug(f"Rejected token of type {payload.type!r}")
            raise InvalidOrExpiredCredentialError()

        return AccessTokenClaims(
            subject=payload.sub,
            email=payload.email,
            issued_at=payload.iat,
            expires_at=payload.exp,
        )


def get_token_service() -> JWTTokenService:
    """Build the token service from settings."""
    return JWTTokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )

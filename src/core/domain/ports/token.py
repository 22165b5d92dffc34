"""Token service port."""

from datetime import timedelta
from typing import Protocol

from pydantic import BaseModel, Field


class AccessTokenClaims(BaseModel):
    """Verified claims of a session credential."""

    subject: str = Field(..., description="Identity id")
    email: str = Field(..., description="Identity email")
    issued_at: int = Field(..., description="Issued-at timestamp")
    expires_at: int = Field(..., description="Expiry timestamp")


class TokenService(Protocol):
    @property
    def access_token_ttl(self) -> timedelta: ...

    def create_access_token(
        self, subject: str, extra_claims: dict[str, object] | None = None
    ) -> str: ...

    def verify_access_token(self, token: str) -> AccessTokenClaims: ...

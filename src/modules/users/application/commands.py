"""User application commands."""

from pydantic import BaseModel, EmailStr, Field, field_validator


class RequestMagicLinkCommand(BaseModel):
    """Request a magic link for sign-in."""

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class RedeemMagicLinkCommand(BaseModel):
    """Redeem a magic link token to start a session."""

    token: str = Field(..., min_length=1)


class UpdateProfileCommand(BaseModel):
    """Update user profile."""

    user_id: int
    display_name: str | None = None

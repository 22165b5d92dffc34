"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RequestMagicLinkRequest(BaseModel):
    """Request a magic link."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "user@example.com"}}
    )

    email: EmailStr = Field(..., description="Email address")

    @field_validator("email", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class MagicLinkResponse(BaseModel):
    """Magic link issuance result."""

    success: bool = True
    message: str = "Magic link sent to your email"
    magic_link: str | None = Field(
        None, description="Raw link, only returned outside production"
    )


class AuthUserResponse(BaseModel):
    """Public identity fields."""

    id: int = Field(..., description="User ID")
    email: EmailStr = Field(..., description="Email")
    display_name: str | None = Field(None, description="Display name")


class VerifyTokenResponse(BaseModel):
    """Session issued by redeeming a magic link."""

    success: bool = True
    user: AuthUserResponse
    token: str = Field(..., description="JWT session credential")
    token_type: str = "bearer"
    expires_at: datetime = Field(..., description="Credential expiry")


class CurrentUserResponse(BaseModel):
    """Identity carried by the presented credential."""

    id: int
    email: EmailStr


class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Logged out successfully"


class UserProfileResponse(BaseModel):
    """User profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="User ID")
    email: EmailStr = Field(..., description="Email")
    display_name: str | None = Field(None, description="Display name")
    created_at: datetime = Field(..., description="Created at")
    updated_at: datetime = Field(..., description="Updated at")


class UpdateProfileRequest(BaseModel):
    """Update user profile request."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"display_name": "Jane Doe"}}
    )

    display_name: str = Field(
        ..., min_length=2, max_length=100, description="Display name"
    )

    @field_validator("display_name", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class UserStatsResponse(BaseModel):
    """Spending statistics of the current user."""

    total_expenses: int
    total_amount: float
    average_amount: float
    categories_used: int
    monthly_total: float

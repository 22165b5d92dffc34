"""User database models."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlmodel import Field

from src.core.infrastructure.database.base_model import BaseModel


class UserModel(BaseModel, table=True):
    """User database model."""

    __tablename__ = "users"

    email: str = Field(sa_type=String(255), index=True, nullable=False, unique=True)
    display_name: str | None = Field(default=None, sa_type=String(100), nullable=True)
    last_login_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        nullable=True,
    )


class MagicLinkModel(BaseModel, table=True):
    """Magic link database model."""

    __tablename__ = "auth_magic_links"

    email: str = Field(sa_type=String(255), index=True, nullable=False)
    token: str = Field(sa_type=String(255), index=True, nullable=False, unique=True)
    expires_at: datetime = Field(
        sa_type=DateTime(timezone=True),
        nullable=False,
    )
    is_used: bool = Field(default=False, nullable=False)
    used_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        nullable=True,
    )

"""Base SQLModel for all database models."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from src.core.domain.base_entity import utc_now


class BaseModel(SQLModel):
    """Base model with common columns.

    Timestamps are timezone-aware UTC, matching ``domain/base_entity.py``.
    ``is_deleted`` implements soft deletion; queries filter it out.
    """

    model_config = {"arbitrary_types_allowed": True}

    id: int | None = Field(default=None, primary_key=True)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
    )

    is_deleted: bool = Field(default=False, nullable=False)

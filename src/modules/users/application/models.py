"""User application data models."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel

from src.modules.users.domain.entities import MagicLink, User


class UserData(BaseModel):
    """User profile view."""

    id: int
    email: str
    display_name: str | None = None
    created_at: datetime
    updated_at: datetime


class UserStatsData(BaseModel):
    """Aggregate spending figures for one user."""

    total_expenses: int
    total_amount: float
    average_amount: float
    categories_used: int
    monthly_total: float


@dataclass(frozen=True)
class IssuedMagicLink:
    """Result of issuing a magic link.

    ``exposed_link`` carries the raw link only where the operating mode allows
    echoing it back to the caller.
    """

    magic_link: MagicLink
    link: str
    delivered: bool
    exposed_link: str | None


@dataclass(frozen=True)
class RedeemedSession:
    """Identity and session credential produced by a redemption."""

    user: User
    access_token: str
    expires_at: datetime
    is_new_user: bool

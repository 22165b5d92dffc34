"""User domain entities."""

from datetime import datetime, timedelta

from pydantic import EmailStr, Field

from src.core.domain.aggregate_root import AggregateRoot
from src.core.domain.base_entity import utc_now


class User(AggregateRoot):
    """User aggregate root.

    Created lazily the first time a magic link for its email is redeemed.
    """

    email: EmailStr = Field(..., description="User email")
    display_name: str | None = Field(default=None, description="Display name")
    last_login_at: datetime | None = Field(default=None, description="Last login")

    def record_login(self, now: datetime | None = None) -> None:
        self.last_login_at = now or utc_now()
        self._update_timestamp()

    def update_profile(self, display_name: str | None = None) -> list[str]:
        """Apply profile changes and return the names of fields that changed."""
        updated_fields: list[str] = []

        if display_name is not None and display_name != self.display_name:
            self.display_name = display_name
            updated_fields.append("display_name")

        if updated_fields:
            self._update_timestamp()
            from src.modules.users.domain.events import UserProfileUpdatedEvent

            self.add_domain_event(
                UserProfileUpdatedEvent(
                    user_id=self.id,
                    updated_fields=updated_fields,
                )
            )

        return updated_fields


class MagicLink(AggregateRoot):
    """Single-use, time-bounded sign-in token.

    ``Issued -> Redeemed`` happens at most once; ``Expired`` is derived from
    ``expires_at``. Both end states are terminal.
    """

    email: EmailStr = Field(..., description="Target email")
    token: str = Field(..., description="Random token value")
    expires_at: datetime = Field(..., description="Expiry time")
    is_used: bool = Field(default=False, description="Redeemed flag")
    used_at: datetime | None = Field(default=None, description="Redemption time")

    @classmethod
    def issue(
        cls,
        email: str,
        token: str,
        ttl: timedelta,
        now: datetime | None = None,
    ) -> "MagicLink":
        issued_at = now or utc_now()
        return cls(
            email=email,
            token=token,
            expires_at=issued_at + ttl,
            created_at=issued_at,
            updated_at=issued_at,
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expires_at

    def is_redeemable(self, now: datetime | None = None) -> bool:
        return not self.is_used and not self.is_deleted and not self.is_expired(now)

    def mark_as_used(self, now: datetime | None = None) -> None:
        current = now or utc_now()
        self.is_used = True
        self.used_at = current
        self.updated_at = current

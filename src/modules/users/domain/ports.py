"""User module ports."""

from datetime import datetime
from typing import Protocol


class MagicLinkNotifier(Protocol):
    """Port for delivering a magic link to its recipient."""

    async def send_magic_link(
        self, email: str, link: str, expires_at: datetime
    ) -> None:
        """Deliver the link.

        Raises:
            NotifierUnavailableError: the link could not be delivered.
        """
        ...

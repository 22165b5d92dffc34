"""Application-level security dependencies.

Defines auth dependencies without importing infrastructure.
The actual implementations are injected via FastAPI dependency_overrides in main.py.
"""

from dataclasses import dataclass
from typing import NoReturn


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


@dataclass(frozen=True)
class AuthContext:
    """Identity asserted by a verified session credential."""

    user_id: int
    email: str


async def get_current_auth() -> AuthContext:
    """Get the auth context; fails when the credential is missing or invalid."""
    _missing_dependency("get_current_auth")


async def get_optional_auth() -> AuthContext | None:
    """Get the auth context if a valid credential is present, else ``None``."""
    _missing_dependency("get_optional_auth")


async def get_current_user_id() -> int:
    """Get the current authenticated user ID."""
    _missing_dependency("get_current_user_id")

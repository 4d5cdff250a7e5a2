"""User aggregate for the identity context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    """User aggregate anchoring a linked music-streaming identity.

    A user exists once its external identity has authenticated at least
    once. Provider tokens and profile fields are replaced on every
    authentication and refresh.
    """

    id: int
    external_id: str
    email: str
    display_name: str | None
    access_token: str | None
    refresh_token: str | None
    token_expires_at: datetime | None
    profile_image_url: str | None
    created_at: datetime
    updated_at: datetime

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.id}, {self.external_id})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)

    @property
    def has_refresh_token(self) -> bool:
        return bool(self.refresh_token)

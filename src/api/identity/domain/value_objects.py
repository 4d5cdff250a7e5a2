"""Value objects for the identity domain.

Value objects are immutable descriptors for the data exchanged with the
external identity provider and for the steps of the authentication workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum


@dataclass(frozen=True)
class TokenPair:
    """Tokens issued by the identity provider.

    ``refresh_token`` is optional: providers may omit it on refresh, in
    which case the previously stored refresh token remains valid.
    """

    access_token: str
    token_type: str
    scope: str
    expires_in: int
    refresh_token: str | None = None

    def expires_at(self, now: datetime) -> datetime:
        """Absolute expiry of the access token relative to ``now``."""
        return now + timedelta(seconds=self.expires_in)


@dataclass(frozen=True)
class ProfileImage:
    """A profile picture published by the identity provider."""

    url: str
    height: int | None = None
    width: int | None = None


@dataclass(frozen=True)
class Profile:
    """The provider's profile record for an external identity."""

    external_id: str
    email: str | None = None
    display_name: str | None = None
    images: tuple[ProfileImage, ...] = field(default_factory=tuple)

    @property
    def canonical_image_url(self) -> str | None:
        """URL of the first image, which the provider treats as canonical."""
        if not self.images:
            return None
        return self.images[0].url


class AuthenticationStep(StrEnum):
    """Steps of the authenticate and refresh workflows.

    Used to tag failures with the step that produced them.
    """

    EXCHANGE_CODE = "exchange_code"
    FETCH_PROFILE = "fetch_profile"
    RESOLVE_IDENTITY = "resolve_identity"
    LOAD_USER = "load_user"
    REQUIRE_REFRESH_TOKEN = "require_refresh_token"
    REFRESH_TOKEN = "refresh_token"
    UPDATE_TOKENS = "update_tokens"
    ISSUE_SESSION = "issue_session"

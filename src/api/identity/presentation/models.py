"""Pydantic models for authentication requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from identity.application.value_objects import AuthenticationResult
from identity.domain.aggregates import User


class AuthRequest(BaseModel):
    """Request model for completing the authorization code flow."""

    code: str = Field(..., description="Authorization code", min_length=1)
    code_verifier: str = Field(
        ...,
        description="PKCE code verifier matching the code challenge",
        min_length=43,
        max_length=128,
    )


class UserResponse(BaseModel):
    """Response model for a user.

    Provider tokens are never included.
    """

    id: int = Field(..., description="Internal user ID")
    external_id: str = Field(..., description="Spotify account ID")
    email: str = Field(..., description="Email address (may be empty)")
    display_name: str | None = Field(None, description="Display name")
    profile_image_url: str | None = Field(None, description="Profile picture URL")
    created_at: datetime = Field(..., description="When the user first authenticated")
    updated_at: datetime = Field(..., description="When the user was last updated")

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response.

        Args:
            user: User domain aggregate

        Returns:
            UserResponse without provider tokens
        """
        return cls(
            id=user.id,
            external_id=user.external_id,
            email=user.email,
            display_name=user.display_name,
            profile_image_url=user.profile_image_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(BaseModel):
    """Response model for a successful authentication or refresh."""

    user: UserResponse
    access_token: str = Field(..., description="Session token for this API")
    token_type: str = Field("bearer", description="Token type")
    expires_at: datetime = Field(..., description="When the session expires")

    @classmethod
    def from_domain(cls, result: AuthenticationResult) -> AuthResponse:
        """Convert an authentication result to API response."""
        return cls(
            user=UserResponse.from_domain(result.user),
            access_token=result.session.token,
            expires_at=result.session.expires_at,
        )

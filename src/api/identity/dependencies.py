"""FastAPI dependency wiring for the identity bounded context."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    AuthenticationServiceProbe,
    DefaultAuthenticationServiceProbe,
)
from identity.application.services import AuthenticationService, UserService
from identity.infrastructure.spotify_client import SpotifyIdentityClient
from identity.infrastructure.user_repository import UserRepository
from infrastructure.authentication_dependencies import get_session_issuer
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_spotify_settings
from shared_kernel.auth import JWTSessionIssuer


@lru_cache
def get_spotify_client() -> SpotifyIdentityClient:
    """Get the application-scoped identity provider client.

    The client holds a pooled httpx connection set shared by all requests.

    Raises:
        ConfigurationError: If the provider credentials are not configured
    """
    settings = get_spotify_settings()
    client_id, client_secret = settings.require_credentials()
    return SpotifyIdentityClient(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=settings.redirect_uri,
        token_url=settings.token_url,
        api_base_url=settings.api_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )


async def close_spotify_client() -> None:
    """Close the identity provider client if one was created."""
    if get_spotify_client.cache_info().currsize:
        await get_spotify_client().aclose()
    get_spotify_client.cache_clear()


def get_authentication_service_probe() -> AuthenticationServiceProbe:
    """Get AuthenticationServiceProbe instance."""
    return DefaultAuthenticationServiceProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository instance bound to the request session."""
    return UserRepository(session=session)


def get_authentication_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    provider: Annotated[SpotifyIdentityClient, Depends(get_spotify_client)],
    session_issuer: Annotated[JWTSessionIssuer, Depends(get_session_issuer)],
    probe: Annotated[
        AuthenticationServiceProbe, Depends(get_authentication_service_probe)
    ],
) -> AuthenticationService:
    """Get AuthenticationService instance.

    Args:
        session: Async database session owning the transactions
        user_repository: User repository bound to the same session
        provider: Identity provider client
        session_issuer: Session credential issuer
        probe: Authentication service probe for observability

    Returns:
        AuthenticationService instance
    """
    return AuthenticationService(
        provider=provider,
        user_repository=user_repository,
        session=session,
        session_issuer=session_issuer,
        probe=probe,
    )


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserService:
    """Get UserService instance.

    Does not construct the identity provider client, so user lookups work
    without provider credentials.
    """
    return UserService(user_repository=user_repository, session=session)

"""HTTP routes for authentication and the current user."""

from __future__ import annotations

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from identity.application.services import AuthenticationService, UserService
from identity.dependencies import get_authentication_service, get_user_service
from identity.domain.value_objects import AuthenticationStep
from identity.ports.exceptions import (
    AuthenticationFailedError,
    IdentityProviderError,
    NoRefreshTokenError,
    ProviderError,
    UserNotFoundError,
)
from identity.presentation.models import AuthRequest, AuthResponse, UserResponse
from infrastructure.authentication_dependencies import get_current_user_id
from infrastructure.database.exceptions import DatabaseConnectionError

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)

_CREDENTIAL_STEPS = (AuthenticationStep.EXCHANGE_CODE, AuthenticationStep.REFRESH_TOKEN)


def _raise_for_failure(error: AuthenticationFailedError) -> NoReturn:
    """Translate a workflow failure into an HTTP error."""
    cause = error.cause

    if isinstance(error, NoRefreshTokenError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No refresh token on record; sign in again",
        ) from error
    if isinstance(cause, DatabaseConnectionError):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        ) from error
    if isinstance(cause, UserNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        ) from error
    if (
        error.step in _CREDENTIAL_STEPS
        and isinstance(cause, ProviderError)
        and cause.is_client_error
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Identity provider rejected the credentials",
        ) from error
    if isinstance(cause, IdentityProviderError):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Identity provider request failed at {error.step.value}",
        ) from error
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Authentication failed at {error.step.value}",
    ) from error


@router.post("/spotify", status_code=status.HTTP_200_OK)
async def authenticate_with_spotify(
    request: AuthRequest,
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
) -> AuthResponse:
    """Complete the Spotify authorization code flow.

    Creates the user on first sign-in and returns a session token.

    Raises:
        HTTPException: 401 if Spotify rejected the code
        HTTPException: 502 if Spotify failed or was unreachable
        HTTPException: 503 if the database is unavailable
    """
    try:
        result = await service.authenticate(request.code, request.code_verifier)
    except AuthenticationFailedError as e:
        _raise_for_failure(e)
    return AuthResponse.from_domain(result)


@router.post("/refresh", status_code=status.HTTP_200_OK)
async def refresh_session(
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
) -> AuthResponse:
    """Refresh the caller's Spotify tokens and issue a new session.

    Raises:
        HTTPException: 401 if Spotify rejected the refresh token
        HTTPException: 404 if the user no longer exists
        HTTPException: 409 if no refresh token is on record
    """
    try:
        result = await service.refresh_session(user_id)
    except AuthenticationFailedError as e:
        _raise_for_failure(e)
    return AuthResponse.from_domain(result)


@router.get("/me", status_code=status.HTTP_200_OK)
async def get_me(
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Return the authenticated user."""
    try:
        user = await service.get_user(user_id)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    except DatabaseConnectionError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    return UserResponse.from_domain(user)

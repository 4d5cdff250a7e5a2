"""Session credential dependency injection.

Provides the session issuer and the authenticated-caller dependency shared
by every bounded context. Does NOT import from bounded contexts.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.settings import get_session_settings
from shared_kernel.auth import (
    DefaultSessionTokenProbe,
    InvalidSessionError,
    JWTSessionIssuer,
)

# auto_error=False so a missing header produces our 401 instead of a 403
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_session_issuer() -> JWTSessionIssuer:
    """Get cached session issuer.

    Returns:
        JWTSessionIssuer configured from session settings.
    """
    settings = get_session_settings()
    return JWTSessionIssuer(
        signing_key=settings.signing_key.get_secret_value(),
        verification_key=settings.effective_verification_key,
        probe=DefaultSessionTokenProbe(),
        algorithm=settings.algorithm,
        issuer=settings.issuer,
        ttl=timedelta(seconds=settings.ttl_seconds),
    )


async def get_current_user_id(
    issuer: Annotated[JWTSessionIssuer, Depends(get_session_issuer)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> int:
    """Resolve the authenticated caller from the session Bearer token.

    Returns:
        The caller's internal user id

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = issuer.verify(credentials.credentials)
    except InvalidSessionError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return claims.user_id

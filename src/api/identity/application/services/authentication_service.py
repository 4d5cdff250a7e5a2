"""Authentication application service for the identity bounded context.

Runs the authenticate and refresh workflows against the identity provider,
persists the resulting identity and issues the session credential.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    AuthenticationServiceProbe,
    DefaultAuthenticationServiceProbe,
)
from identity.application.value_objects import AuthenticationResult
from identity.domain.aggregates import User
from identity.domain.value_objects import AuthenticationStep, Profile, TokenPair
from identity.ports.exceptions import (
    AuthenticationFailedError,
    NoRefreshTokenError,
    UserNotFoundError,
)
from identity.ports.provider import IIdentityProviderClient
from identity.ports.repositories import IUserRepository
from identity.ports.session import ISessionIssuer
from infrastructure.database.connection import translate_connection_errors
from shared_kernel.auth.session_tokens import SessionToken

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class AuthenticationService:
    """Application service for linking identities and issuing sessions.

    Each workflow is strictly linear. A failure at any step is raised as
    AuthenticationFailedError naming that step, with the original error
    chained. No user row is written before the profile fetch succeeds,
    and no session is issued unless the write committed.
    """

    def __init__(
        self,
        provider: IIdentityProviderClient,
        user_repository: IUserRepository,
        session: AsyncSession,
        session_issuer: ISessionIssuer,
        probe: AuthenticationServiceProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize AuthenticationService with dependencies.

        Args:
            provider: Client for the external identity provider
            user_repository: Repository for user persistence
            session: Database session for transaction management
            session_issuer: Issues the session credential
            probe: Optional domain probe for observability
            clock: Optional source of the current time (tests)
        """
        self._provider = provider
        self._user_repository = user_repository
        self._session = session
        self._session_issuer = session_issuer
        self._probe = probe or DefaultAuthenticationServiceProbe()
        self._clock = clock or _utc_now

    async def authenticate(self, code: str, code_verifier: str) -> AuthenticationResult:
        """Exchange an authorization code and sign the identity in.

        Creates the user on first authentication and refreshes its profile
        and tokens on every later one.

        Args:
            code: Authorization code returned to the client
            code_verifier: PKCE verifier matching the code challenge

        Returns:
            The stored user and a fresh session

        Raises:
            AuthenticationFailedError: If any step fails
        """
        tokens = await self._run_step(
            AuthenticationStep.EXCHANGE_CODE,
            self._provider.exchange_code(code, code_verifier),
        )
        profile = await self._run_step(
            AuthenticationStep.FETCH_PROFILE,
            self._provider.fetch_profile(tokens.access_token),
        )
        user = await self._run_step(
            AuthenticationStep.RESOLVE_IDENTITY,
            self._resolve_identity(profile, tokens),
        )
        session = self._issue_session(user)

        self._probe.user_authenticated(user.id, user.external_id)
        return AuthenticationResult(user=user, session=session)

    async def refresh_session(self, user_id: int) -> AuthenticationResult:
        """Refresh a user's provider tokens and issue a new session.

        Args:
            user_id: Internal id of the authenticated caller

        Returns:
            The updated user and a fresh session

        Raises:
            NoRefreshTokenError: If the user has no stored refresh token
            AuthenticationFailedError: If any other step fails
        """
        user = await self._run_step(
            AuthenticationStep.LOAD_USER,
            self._load_user(user_id),
        )
        if not user.has_refresh_token:
            self._probe.refresh_token_missing(user_id)
            raise NoRefreshTokenError(user_id)

        tokens = await self._run_step(
            AuthenticationStep.REFRESH_TOKEN,
            self._provider.refresh_token(user.refresh_token),
        )
        updated = await self._run_step(
            AuthenticationStep.UPDATE_TOKENS,
            self._update_tokens(user_id, tokens),
        )
        session = self._issue_session(updated)

        self._probe.session_refreshed(user_id)
        return AuthenticationResult(user=updated, session=session)

    async def _load_user(self, user_id: int) -> User:
        async with translate_connection_errors(), self._session.begin():
            user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def _resolve_identity(self, profile: Profile, tokens: TokenPair) -> User:
        expires_at = tokens.expires_at(self._clock())
        async with translate_connection_errors(), self._session.begin():
            return await self._user_repository.upsert_from_authentication(
                profile, tokens, expires_at
            )

    async def _update_tokens(self, user_id: int, tokens: TokenPair) -> User:
        expires_at = tokens.expires_at(self._clock())
        async with translate_connection_errors(), self._session.begin():
            user = await self._user_repository.update_tokens(
                user_id, tokens, expires_at
            )
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _issue_session(self, user: User) -> SessionToken:
        try:
            return self._session_issuer.issue(user.id)
        except Exception as e:
            self._probe.step_failed(AuthenticationStep.ISSUE_SESSION, str(e))
            raise AuthenticationFailedError(AuthenticationStep.ISSUE_SESSION, e) from e

    async def _run_step(self, step: AuthenticationStep, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except Exception as e:
            self._probe.step_failed(step, str(e))
            raise AuthenticationFailedError(step, e) from e

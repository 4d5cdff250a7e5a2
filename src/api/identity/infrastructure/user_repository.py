"""PostgreSQL implementation of IUserRepository.

Authentication writes are single statements so concurrent requests for the
same external identity cannot create duplicate users: the insert and the
update race is resolved by ``INSERT ... ON CONFLICT (external_id) DO UPDATE``.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Text, func, literal, select, update
from sqlalchemy.dialects.postgresql import Insert, insert
from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.aggregates import User
from identity.domain.value_objects import Profile, TokenPair
from identity.infrastructure.models import UserModel
from identity.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from identity.ports.repositories import IUserRepository
from infrastructure.database.models import utc_now


def build_upsert_statement(
    profile: Profile,
    tokens: TokenPair,
    token_expires_at: datetime,
    now: datetime,
) -> Insert:
    """Build the atomic create-or-update statement for an authentication.

    On conflict the existing row keeps its id and created_at. A missing
    refresh token in ``tokens`` leaves the stored one in place.
    """
    stmt = insert(UserModel).values(
        external_id=profile.external_id,
        email=profile.email or "",
        display_name=profile.display_name,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_expires_at=token_expires_at,
        profile_image_url=profile.canonical_image_url,
        created_at=now,
        updated_at=now,
    )
    excluded = stmt.excluded
    return stmt.on_conflict_do_update(
        index_elements=[UserModel.external_id],
        set_={
            "email": excluded.email,
            "display_name": excluded.display_name,
            "access_token": excluded.access_token,
            "refresh_token": func.coalesce(
                excluded.refresh_token, UserModel.refresh_token
            ),
            "token_expires_at": excluded.token_expires_at,
            "profile_image_url": excluded.profile_image_url,
            "updated_at": excluded.updated_at,
        },
    ).returning(UserModel)


def _to_domain(model: UserModel) -> User:
    return User(
        id=model.id,
        external_id=model.external_id,
        email=model.email,
        display_name=model.display_name,
        access_token=model.access_token,
        refresh_token=model.refresh_token,
        token_expires_at=model.token_expires_at,
        profile_image_url=model.profile_image_url,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Methods never open or commit transactions; the calling service owns
    the transaction boundary.
    """

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def get_by_id(self, user_id: int) -> User | None:
        """Retrieve a user by internal id.

        Args:
            user_id: The internal identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(user_id)
            return None

        self._probe.user_retrieved(user_id)
        return _to_domain(model)

    async def get_by_external_id(self, external_id: str) -> User | None:
        """Retrieve a user by the provider's identifier.

        Args:
            external_id: The provider account id

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.external_id == external_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.external_id_not_found(external_id)
            return None

        self._probe.user_retrieved(model.id)
        return _to_domain(model)

    async def upsert_from_authentication(
        self,
        profile: Profile,
        tokens: TokenPair,
        token_expires_at: datetime,
    ) -> User:
        """Create or update the user for an external identity atomically."""
        stmt = build_upsert_statement(profile, tokens, token_expires_at, utc_now())
        result = await self._session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        model = result.one()

        self._probe.user_upserted(model.id, model.external_id)
        return _to_domain(model)

    async def update_tokens(
        self,
        user_id: int,
        tokens: TokenPair,
        token_expires_at: datetime,
    ) -> User | None:
        """Replace the provider tokens of an existing user.

        Returns:
            The updated User aggregate, or None if the user does not exist
        """
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                access_token=tokens.access_token,
                refresh_token=func.coalesce(
                    literal(tokens.refresh_token, Text), UserModel.refresh_token
                ),
                token_expires_at=token_expires_at,
                updated_at=utc_now(),
            )
            .returning(UserModel)
        )
        result = await self._session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        model = result.one_or_none()

        if model is None:
            self._probe.user_not_found(user_id)
            return None

        self._probe.tokens_updated(user_id, bool(tokens.refresh_token))
        return _to_domain(model)

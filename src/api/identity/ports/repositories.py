"""Repository protocols (ports) for the identity bounded context."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from identity.domain.aggregates import User
from identity.domain.value_objects import Profile, TokenPair


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence.

    Write methods run inside the caller's transaction; they never commit.
    """

    async def get_by_id(self, user_id: int) -> User | None:
        """Retrieve a user by internal id.

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def get_by_external_id(self, external_id: str) -> User | None:
        """Retrieve a user by the provider's identifier.

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def upsert_from_authentication(
        self,
        profile: Profile,
        tokens: TokenPair,
        token_expires_at: datetime,
    ) -> User:
        """Create or update the user for an external identity atomically.

        At most one user exists per external id, even under concurrent
        calls. An existing user keeps its internal id and created_at.
        Profile fields and the access token are replaced. The refresh
        token is replaced only when ``tokens`` carries a new one.

        Returns:
            The stored User aggregate after the write
        """
        ...

    async def update_tokens(
        self,
        user_id: int,
        tokens: TokenPair,
        token_expires_at: datetime,
    ) -> User | None:
        """Replace the provider tokens of an existing user.

        The stored refresh token is kept when ``tokens`` carries none.

        Returns:
            The updated User aggregate, or None if the user does not exist
        """
        ...

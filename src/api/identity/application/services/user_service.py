"""User application service for the identity bounded context.

Serves lookups of already-linked users. Unlike AuthenticationService it
never talks to the identity provider.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.aggregates import User
from identity.ports.exceptions import UserNotFoundError
from identity.ports.repositories import IUserRepository
from infrastructure.database.connection import translate_connection_errors


class UserService:
    """Application service for reading users."""

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
        """
        self._user_repository = user_repository
        self._session = session

    async def get_user(self, user_id: int) -> User:
        """Load a user by internal id.

        Raises:
            UserNotFoundError: If the user does not exist
            DatabaseConnectionError: If the store is unavailable
        """
        async with translate_connection_errors(), self._session.begin():
            user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

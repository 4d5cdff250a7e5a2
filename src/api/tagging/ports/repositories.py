"""Repository protocols (ports) for the tagging bounded context.

Every method is scoped to the owning user. None of them commit; the
calling service owns the transaction.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tagging.domain.aggregates import SongTag, Tag


@runtime_checkable
class ITagRepository(Protocol):
    """Repository for Tag aggregates."""

    async def list_for_user(self, user_id: int) -> list[Tag]:
        """List a user's tags ordered by name (byte order, case-sensitive)."""
        ...

    async def get(self, user_id: int, tag_id: int) -> Tag | None:
        """Retrieve a tag only if it is owned by ``user_id``."""
        ...

    async def create(self, user_id: int, name: str, color: str | None) -> Tag:
        """Create a tag.

        Raises:
            DuplicateTagNameError: If the user already has a tag with this name
        """
        ...

    async def delete(self, user_id: int, tag_id: int) -> bool:
        """Delete a tag owned by ``user_id`` together with its associations.

        Returns:
            True if a tag was deleted, False if none matched
        """
        ...


@runtime_checkable
class ISongTagRepository(Protocol):
    """Repository for SongTag associations."""

    async def list_tags_for_track(self, user_id: int, track_id: str) -> list[Tag]:
        """List the user's tags applied to a track, ordered by name."""
        ...

    async def create(self, user_id: int, track_id: str, tag_id: int) -> SongTag:
        """Tag a track. Returns the existing association if already present.

        Raises:
            TagNotFoundError: If the tag does not exist or is owned by another user
        """
        ...

    async def delete(self, user_id: int, track_id: str, tag_id: int) -> bool:
        """Remove an association.

        Returns:
            True if an association was deleted, False if none matched
        """
        ...

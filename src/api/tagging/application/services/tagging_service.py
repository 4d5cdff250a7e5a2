"""Tagging application service.

Every use case takes the owning user id from the authenticated caller and
runs in its own transaction.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.connection import translate_connection_errors
from tagging.application.observability import (
    DefaultTaggingServiceProbe,
    TaggingServiceProbe,
)
from tagging.domain.aggregates import (
    SongTag,
    Tag,
    normalize_tag_name,
    validate_track_id,
)
from tagging.ports.exceptions import (
    DuplicateTagNameError,
    SongTagNotFoundError,
    TagNotFoundError,
)
from tagging.ports.repositories import ISongTagRepository, ITagRepository

_EXPECTED_ERRORS = (
    DuplicateTagNameError,
    SongTagNotFoundError,
    TagNotFoundError,
    ValueError,
)


class TaggingService:
    """Application service for tags and track associations."""

    def __init__(
        self,
        tag_repository: ITagRepository,
        song_tag_repository: ISongTagRepository,
        session: AsyncSession,
        probe: TaggingServiceProbe | None = None,
    ):
        """Initialize TaggingService with dependencies.

        Args:
            tag_repository: Repository for tags
            song_tag_repository: Repository for track associations
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._tags = tag_repository
        self._song_tags = song_tag_repository
        self._session = session
        self._probe = probe or DefaultTaggingServiceProbe()

    async def list_tags(self, user_id: int) -> list[Tag]:
        """List the caller's tags ordered by name."""
        async with self._transaction("list_tags", user_id):
            return await self._tags.list_for_user(user_id)

    async def create_tag(self, user_id: int, name: str, color: str | None = None) -> Tag:
        """Create a tag for the caller.

        Raises:
            ValueError: If the name is blank or too long
            DuplicateTagNameError: If the caller already has a tag with this name
        """
        name = normalize_tag_name(name)
        async with self._transaction("create_tag", user_id):
            return await self._tags.create(user_id, name, color)

    async def delete_tag(self, user_id: int, tag_id: int) -> None:
        """Delete one of the caller's tags and all its associations.

        Raises:
            TagNotFoundError: If the tag does not exist or is not the caller's
        """
        async with self._transaction("delete_tag", user_id):
            deleted = await self._tags.delete(user_id, tag_id)
        if not deleted:
            raise TagNotFoundError(tag_id)

    async def list_track_tags(self, user_id: int, track_id: str) -> list[Tag]:
        """List the caller's tags applied to a track."""
        track_id = validate_track_id(track_id)
        async with self._transaction("list_track_tags", user_id):
            return await self._song_tags.list_tags_for_track(user_id, track_id)

    async def tag_track(self, user_id: int, track_id: str, tag_id: int) -> SongTag:
        """Apply one of the caller's tags to a track.

        Idempotent: tagging twice returns the existing association.

        Raises:
            TagNotFoundError: If the tag does not exist or is not the caller's
        """
        track_id = validate_track_id(track_id)
        async with self._transaction("tag_track", user_id):
            return await self._song_tags.create(user_id, track_id, tag_id)

    async def untag_track(self, user_id: int, track_id: str, tag_id: int) -> None:
        """Remove one of the caller's tags from a track.

        Raises:
            SongTagNotFoundError: If the track is not tagged with that tag
        """
        async with self._transaction("untag_track", user_id):
            deleted = await self._song_tags.delete(user_id, track_id, tag_id)
        if not deleted:
            raise SongTagNotFoundError(track_id, tag_id)

    @asynccontextmanager
    async def _transaction(self, operation: str, user_id: int) -> AsyncIterator[None]:
        try:
            async with translate_connection_errors(), self._session.begin():
                yield
        except _EXPECTED_ERRORS:
            raise
        except Exception as e:
            self._probe.operation_failed(operation, user_id, str(e))
            raise

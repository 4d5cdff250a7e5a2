"""PostgreSQL implementation of ISongTagRepository.

Creating an association first takes a shared lock on the caller's tag.
That lookup enforces ownership and keeps a concurrent tag delete from
slipping in between the check and the insert.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import utc_now
from tagging.domain.aggregates import SongTag, Tag
from tagging.infrastructure.models import SongTagModel, TagModel
from tagging.infrastructure.observability import (
    DefaultSongTagRepositoryProbe,
    SongTagRepositoryProbe,
)
from tagging.infrastructure.tag_repository import TAG_NAME_ORDER
from tagging.infrastructure.tag_repository import to_domain as tag_to_domain
from tagging.ports.exceptions import TagNotFoundError
from tagging.ports.repositories import ISongTagRepository


def to_domain(model: SongTagModel) -> SongTag:
    return SongTag(
        id=model.id,
        user_id=model.user_id,
        track_id=model.track_id,
        tag_id=model.tag_id,
        created_at=model.created_at,
    )


class SongTagRepository(ISongTagRepository):
    """PostgreSQL-backed repository for track associations."""

    def __init__(
        self, session: AsyncSession, probe: SongTagRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultSongTagRepositoryProbe()

    async def list_tags_for_track(self, user_id: int, track_id: str) -> list[Tag]:
        """List the user's tags applied to a track, ordered by name."""
        stmt = (
            select(TagModel)
            .join(SongTagModel, SongTagModel.tag_id == TagModel.id)
            .where(
                SongTagModel.user_id == user_id,
                SongTagModel.track_id == track_id,
                TagModel.user_id == SongTagModel.user_id,
            )
            .order_by(*TAG_NAME_ORDER)
        )
        result = await self._session.scalars(stmt)
        return [tag_to_domain(model) for model in result.all()]

    async def create(self, user_id: int, track_id: str, tag_id: int) -> SongTag:
        """Tag a track, returning the existing association if present.

        Raises:
            TagNotFoundError: If the tag does not exist or is owned by another user
        """
        owned_tag = select(TagModel.id).where(
            TagModel.id == tag_id,
            TagModel.user_id == user_id,
        )
        if await self._session.scalar(owned_tag.with_for_update(read=True)) is None:
            self._probe.tag_not_owned(user_id, tag_id)
            raise TagNotFoundError(tag_id)

        stmt = (
            insert(SongTagModel)
            .values(
                user_id=user_id,
                track_id=track_id,
                tag_id=tag_id,
                created_at=utc_now(),
            )
            .on_conflict_do_nothing(
                index_elements=[
                    SongTagModel.user_id,
                    SongTagModel.track_id,
                    SongTagModel.tag_id,
                ]
            )
            .returning(SongTagModel)
        )
        try:
            result = await self._session.scalars(stmt)
            model = result.one_or_none()
        except IntegrityError as e:
            if "fk_song_tags_tag_id_tags" in str(e):
                self._probe.tag_not_owned(user_id, tag_id)
                raise TagNotFoundError(tag_id) from e
            raise

        if model is not None:
            self._probe.song_tag_created(user_id, track_id, tag_id)
            return to_domain(model)

        existing = await self._session.scalars(
            select(SongTagModel).where(
                SongTagModel.user_id == user_id,
                SongTagModel.track_id == track_id,
                SongTagModel.tag_id == tag_id,
            )
        )
        self._probe.song_tag_already_exists(user_id, track_id, tag_id)
        return to_domain(existing.one())

    async def delete(self, user_id: int, track_id: str, tag_id: int) -> bool:
        """Remove an association owned by ``user_id``."""
        stmt = delete(SongTagModel).where(
            SongTagModel.user_id == user_id,
            SongTagModel.track_id == track_id,
            SongTagModel.tag_id == tag_id,
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            self._probe.song_tag_not_found(user_id, track_id, tag_id)
            return False

        self._probe.song_tag_deleted(user_id, track_id, tag_id)
        return True

"""PostgreSQL implementation of ITagRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tagging.domain.aggregates import Tag
from tagging.infrastructure.models import TagModel
from tagging.infrastructure.observability import (
    DefaultTagRepositoryProbe,
    TagRepositoryProbe,
)
from tagging.ports.exceptions import DuplicateTagNameError
from tagging.ports.repositories import ITagRepository

# Byte-order comparison so listings are case-sensitive and locale independent.
TAG_NAME_ORDER = (TagModel.name.collate("C"), TagModel.id)


def to_domain(model: TagModel) -> Tag:
    return Tag(
        id=model.id,
        user_id=model.user_id,
        name=model.name,
        color=model.color,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class TagRepository(ITagRepository):
    """PostgreSQL-backed repository for Tag aggregates.

    Every query filters on the owning user, so a tag id alone never
    grants access.
    """

    def __init__(
        self, session: AsyncSession, probe: TagRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTagRepositoryProbe()

    async def list_for_user(self, user_id: int) -> list[Tag]:
        """List a user's tags ordered by name."""
        stmt = (
            select(TagModel)
            .where(TagModel.user_id == user_id)
            .order_by(*TAG_NAME_ORDER)
        )
        result = await self._session.scalars(stmt)
        tags = [to_domain(model) for model in result.all()]

        self._probe.tags_listed(user_id, len(tags))
        return tags

    async def get(self, user_id: int, tag_id: int) -> Tag | None:
        """Retrieve a tag only if it is owned by ``user_id``."""
        stmt = select(TagModel).where(
            TagModel.id == tag_id,
            TagModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.tag_not_found(tag_id, user_id)
            return None
        return to_domain(model)

    async def create(self, user_id: int, name: str, color: str | None) -> Tag:
        """Create a tag.

        Raises:
            DuplicateTagNameError: If the user already has a tag with this name
        """
        model = TagModel(user_id=user_id, name=name, color=color)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if "uq_tags_user_id_name" in str(e):
                self._probe.duplicate_tag_name(name, user_id)
                raise DuplicateTagNameError(f"Tag '{name}' already exists") from e
            raise

        self._probe.tag_created(model.id, user_id)
        return to_domain(model)

    async def delete(self, user_id: int, tag_id: int) -> bool:
        """Delete a tag owned by ``user_id``.

        Associations are removed by the song_tags.tag_id cascade.
        """
        stmt = delete(TagModel).where(
            TagModel.id == tag_id,
            TagModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            self._probe.tag_not_found(tag_id, user_id)
            return False

        self._probe.tag_deleted(tag_id, user_id)
        return True

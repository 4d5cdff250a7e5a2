"""FastAPI dependency wiring for the tagging bounded context."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from tagging.application.observability import (
    DefaultTaggingServiceProbe,
    TaggingServiceProbe,
)
from tagging.application.services import TaggingService
from tagging.infrastructure.song_tag_repository import SongTagRepository
from tagging.infrastructure.tag_repository import TagRepository


def get_tagging_service_probe() -> TaggingServiceProbe:
    """Get TaggingServiceProbe instance."""
    return DefaultTaggingServiceProbe()


def get_tagging_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[TaggingServiceProbe, Depends(get_tagging_service_probe)],
) -> TaggingService:
    """Get TaggingService instance.

    Both repositories share the request session so each use case runs in
    a single transaction.

    Args:
        session: Async database session
        probe: Tagging service probe for observability

    Returns:
        TaggingService instance
    """
    return TaggingService(
        tag_repository=TagRepository(session=session),
        song_tag_repository=SongTagRepository(session=session),
        session=session,
        probe=probe,
    )

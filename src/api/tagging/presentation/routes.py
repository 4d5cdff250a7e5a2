"""HTTP routes for tags and track associations.

The owning user always comes from the session token; request bodies
never carry a user id.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from infrastructure.authentication_dependencies import get_current_user_id
from infrastructure.database.exceptions import DatabaseConnectionError
from tagging.application.services import TaggingService
from tagging.dependencies import get_tagging_service
from tagging.domain.aggregates import TRACK_ID_MAX_LENGTH
from tagging.ports.exceptions import (
    DuplicateTagNameError,
    SongTagNotFoundError,
    TagNotFoundError,
)
from tagging.presentation.models import (
    CreateTagRequest,
    SongTagResponse,
    TagResponse,
    TagTrackRequest,
)

TrackId = Annotated[
    str,
    Path(description="Spotify track ID", min_length=1, max_length=TRACK_ID_MAX_LENGTH),
]
CurrentUserId = Annotated[int, Depends(get_current_user_id)]
Service = Annotated[TaggingService, Depends(get_tagging_service)]

tags_router = APIRouter(
    prefix="/tags",
    tags=["tags"],
)

tracks_router = APIRouter(
    prefix="/tracks",
    tags=["tracks"],
)


def _database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Database unavailable",
    )


@tags_router.get("", status_code=status.HTTP_200_OK)
async def list_tags(user_id: CurrentUserId, service: Service) -> list[TagResponse]:
    """List the caller's tags ordered by name."""
    try:
        tags = await service.list_tags(user_id)
    except DatabaseConnectionError:
        raise _database_unavailable()
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list tags",
        )
    return [TagResponse.from_domain(tag) for tag in tags]


@tags_router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag(
    request: CreateTagRequest,
    user_id: CurrentUserId,
    service: Service,
) -> TagResponse:
    """Create a tag owned by the caller.

    Raises:
        HTTPException: 409 if the caller already has a tag with this name
        HTTPException: 422 if the name is blank
    """
    try:
        tag = await service.create_tag(user_id, request.name, request.color)
    except DuplicateTagNameError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A tag with this name already exists",
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(e),
        )
    except DatabaseConnectionError:
        raise _database_unavailable()
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create tag",
        )
    return TagResponse.from_domain(tag)


@tags_router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: int, user_id: CurrentUserId, service: Service) -> None:
    """Delete one of the caller's tags and remove it from every track.

    Raises:
        HTTPException: 404 if the tag does not exist or belongs to someone else
    """
    try:
        await service.delete_tag(user_id, tag_id)
    except TagNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag not found",
        )
    except DatabaseConnectionError:
        raise _database_unavailable()
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete tag",
        )


@tracks_router.get("/{track_id}/tags", status_code=status.HTTP_200_OK)
async def list_track_tags(
    track_id: TrackId, user_id: CurrentUserId, service: Service
) -> list[TagResponse]:
    """List the caller's tags applied to a track."""
    try:
        tags = await service.list_track_tags(user_id, track_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(e),
        )
    except DatabaseConnectionError:
        raise _database_unavailable()
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list track tags",
        )
    return [TagResponse.from_domain(tag) for tag in tags]


@tracks_router.post("/{track_id}/tags", status_code=status.HTTP_201_CREATED)
async def tag_track(
    track_id: TrackId,
    request: TagTrackRequest,
    user_id: CurrentUserId,
    service: Service,
) -> SongTagResponse:
    """Apply one of the caller's tags to a track.

    Tagging a track twice with the same tag returns the existing association.

    Raises:
        HTTPException: 404 if the tag does not exist or belongs to someone else
    """
    try:
        song_tag = await service.tag_track(user_id, track_id, request.tag_id)
    except TagNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag not found",
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(e),
        )
    except DatabaseConnectionError:
        raise _database_unavailable()
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to tag track",
        )
    return SongTagResponse.from_domain(song_tag)


@tracks_router.delete(
    "/{track_id}/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def untag_track(
    track_id: TrackId, tag_id: int, user_id: CurrentUserId, service: Service
) -> None:
    """Remove one of the caller's tags from a track.

    Raises:
        HTTPException: 404 if the track is not tagged with that tag
    """
    try:
        await service.untag_track(user_id, track_id, tag_id)
    except SongTagNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Track is not tagged with this tag",
        )
    except DatabaseConnectionError:
        raise _database_unavailable()
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to untag track",
        )


router = APIRouter()
router.include_router(tags_router)
router.include_router(tracks_router)

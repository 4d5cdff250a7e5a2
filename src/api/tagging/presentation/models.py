"""Pydantic models for tag and track association requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from tagging.domain.aggregates import TAG_NAME_MAX_LENGTH, SongTag, Tag


class CreateTagRequest(BaseModel):
    """Request model for creating a tag.

    The owner is always the authenticated caller.
    """

    name: str = Field(
        ...,
        description="Tag name (unique per user)",
        min_length=1,
        max_length=TAG_NAME_MAX_LENGTH,
    )
    color: str | None = Field(
        None,
        description="Display color, e.g. #1DB954",
        max_length=64,
    )


class TagTrackRequest(BaseModel):
    """Request model for applying a tag to a track."""

    tag_id: int = Field(..., description="ID of one of the caller's tags", gt=0)


class TagResponse(BaseModel):
    """Response model for a tag."""

    id: int = Field(..., description="Tag ID")
    name: str = Field(..., description="Tag name")
    color: str | None = Field(None, description="Display color")
    created_at: datetime = Field(..., description="When the tag was created")
    updated_at: datetime = Field(..., description="When the tag was last updated")

    @classmethod
    def from_domain(cls, tag: Tag) -> TagResponse:
        """Convert domain Tag aggregate to API response."""
        return cls(
            id=tag.id,
            name=tag.name,
            color=tag.color,
            created_at=tag.created_at,
            updated_at=tag.updated_at,
        )


class SongTagResponse(BaseModel):
    """Response model for a track association."""

    id: int = Field(..., description="Association ID")
    track_id: str = Field(..., description="Spotify track ID")
    tag_id: int = Field(..., description="Tag ID")
    created_at: datetime = Field(..., description="When the track was tagged")

    @classmethod
    def from_domain(cls, song_tag: SongTag) -> SongTagResponse:
        """Convert domain SongTag to API response."""
        return cls(
            id=song_tag.id,
            track_id=song_tag.track_id,
            tag_id=song_tag.tag_id,
            created_at=song_tag.created_at,
        )

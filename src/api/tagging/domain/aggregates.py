"""Aggregates for the tagging bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

TAG_NAME_MAX_LENGTH = 255
TRACK_ID_MAX_LENGTH = 255


def normalize_tag_name(name: str) -> str:
    """Strip surrounding whitespace and validate a tag name.

    Raises:
        ValueError: If the name is blank or longer than the column allows
    """
    normalized = name.strip()
    if not normalized:
        raise ValueError("Tag name cannot be empty")
    if len(normalized) > TAG_NAME_MAX_LENGTH:
        raise ValueError(f"Tag name cannot exceed {TAG_NAME_MAX_LENGTH} characters")
    return normalized


def validate_track_id(track_id: str) -> str:
    """Validate an opaque track identifier.

    Raises:
        ValueError: If the id is blank or too long
    """
    if not track_id or not track_id.strip():
        raise ValueError("Track ID cannot be empty")
    if len(track_id) > TRACK_ID_MAX_LENGTH:
        raise ValueError(f"Track ID cannot exceed {TRACK_ID_MAX_LENGTH} characters")
    return track_id


@dataclass(frozen=True)
class Tag:
    """A user-defined label, owned by exactly one user."""

    id: int
    user_id: int
    name: str
    color: str | None
    created_at: datetime
    updated_at: datetime

    def __eq__(self, other: object) -> bool:
        """Tags are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, Tag):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)


@dataclass(frozen=True)
class SongTag:
    """Association of one of a user's tags with a track.

    The association's user always owns the referenced tag.
    """

    id: int
    user_id: int
    track_id: str
    tag_id: int
    created_at: datetime

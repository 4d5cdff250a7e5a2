"""Domain layer for the tagging bounded context."""

from tagging.domain.aggregates import (
    TAG_NAME_MAX_LENGTH,
    TRACK_ID_MAX_LENGTH,
    SongTag,
    Tag,
    normalize_tag_name,
    validate_track_id,
)

__all__ = [
    "SongTag",
    "TAG_NAME_MAX_LENGTH",
    "TRACK_ID_MAX_LENGTH",
    "Tag",
    "normalize_tag_name",
    "validate_track_id",
]

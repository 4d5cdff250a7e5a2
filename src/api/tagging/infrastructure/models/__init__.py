"""SQLAlchemy ORM models for the tagging bounded context."""

from tagging.infrastructure.models.song_tag import SongTagModel
from tagging.infrastructure.models.tag import TagModel

__all__ = ["SongTagModel", "TagModel"]

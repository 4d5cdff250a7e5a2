"""Ports (interfaces) for the tagging bounded context."""

from tagging.ports.exceptions import (
    DuplicateTagNameError,
    SongTagNotFoundError,
    TagNotFoundError,
)
from tagging.ports.repositories import ISongTagRepository, ITagRepository

__all__ = [
    "DuplicateTagNameError",
    "ISongTagRepository",
    "ITagRepository",
    "SongTagNotFoundError",
    "TagNotFoundError",
]

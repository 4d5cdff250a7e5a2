"""Domain-Oriented Observability for tagging infrastructure."""

from tagging.infrastructure.observability.repository_probe import (
    DefaultSongTagRepositoryProbe,
    DefaultTagRepositoryProbe,
    SongTagRepositoryProbe,
    TagRepositoryProbe,
)

__all__ = [
    "DefaultSongTagRepositoryProbe",
    "DefaultTagRepositoryProbe",
    "SongTagRepositoryProbe",
    "TagRepositoryProbe",
]

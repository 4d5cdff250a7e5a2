"""Domain probes for tagging repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to tag and association persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TagRepositoryProbe(Protocol):
    """Domain probe for tag repository operations."""

    def tag_created(self, tag_id: int, user_id: int) -> None:
        """Record that a tag was created."""
        ...

    def tag_deleted(self, tag_id: int, user_id: int) -> None:
        """Record that a tag was deleted."""
        ...

    def tag_not_found(self, tag_id: int, user_id: int) -> None:
        """Record that a tag was not found for its supposed owner."""
        ...

    def duplicate_tag_name(self, name: str, user_id: int) -> None:
        """Record that a duplicate tag name was rejected."""
        ...

    def tags_listed(self, user_id: int, count: int) -> None:
        """Record that a user's tags were listed."""
        ...

    def with_context(self, context: ObservationContext) -> TagRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class SongTagRepositoryProbe(Protocol):
    """Domain probe for track association operations."""

    def song_tag_created(self, user_id: int, track_id: str, tag_id: int) -> None:
        """Record that a track was tagged."""
        ...

    def song_tag_already_exists(
        self, user_id: int, track_id: str, tag_id: int
    ) -> None:
        """Record that a track was already tagged with the tag."""
        ...

    def song_tag_deleted(self, user_id: int, track_id: str, tag_id: int) -> None:
        """Record that a tag was removed from a track."""
        ...

    def song_tag_not_found(self, user_id: int, track_id: str, tag_id: int) -> None:
        """Record that an association to delete did not exist."""
        ...

    def tag_not_owned(self, user_id: int, tag_id: int) -> None:
        """Record that a tag could not be resolved for the caller."""
        ...

    def with_context(self, context: ObservationContext) -> SongTagRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTagRepositoryProbe:
    """Default implementation of TagRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTagRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTagRepositoryProbe(logger=self._logger, context=context)

    def tag_created(self, tag_id: int, user_id: int) -> None:
        """Record that a tag was created."""
        self._logger.info(
            "tag_created",
            tag_id=tag_id,
            owner_id=user_id,
            **self._get_context_kwargs(),
        )

    def tag_deleted(self, tag_id: int, user_id: int) -> None:
        """Record that a tag was deleted."""
        self._logger.info(
            "tag_deleted",
            tag_id=tag_id,
            owner_id=user_id,
            **self._get_context_kwargs(),
        )

    def tag_not_found(self, tag_id: int, user_id: int) -> None:
        """Record that a tag was not found for its supposed owner."""
        self._logger.debug(
            "tag_not_found",
            tag_id=tag_id,
            owner_id=user_id,
            **self._get_context_kwargs(),
        )

    def duplicate_tag_name(self, name: str, user_id: int) -> None:
        """Record that a duplicate tag name was rejected."""
        self._logger.warning(
            "duplicate_tag_name",
            name=name,
            owner_id=user_id,
            **self._get_context_kwargs(),
        )

    def tags_listed(self, user_id: int, count: int) -> None:
        """Record that a user's tags were listed."""
        self._logger.debug(
            "tags_listed",
            owner_id=user_id,
            count=count,
            **self._get_context_kwargs(),
        )


class DefaultSongTagRepositoryProbe:
    """Default implementation of SongTagRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultSongTagRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultSongTagRepositoryProbe(logger=self._logger, context=context)

    def song_tag_created(self, user_id: int, track_id: str, tag_id: int) -> None:
        self._logger.info(
            "song_tag_created",
            owner_id=user_id,
            track_id=track_id,
            tag_id=tag_id,
            **self._get_context_kwargs(),
        )

    def song_tag_already_exists(
        self, user_id: int, track_id: str, tag_id: int
    ) -> None:
        self._logger.debug(
            "song_tag_already_exists",
            owner_id=user_id,
            track_id=track_id,
            tag_id=tag_id,
            **self._get_context_kwargs(),
        )

    def song_tag_deleted(self, user_id: int, track_id: str, tag_id: int) -> None:
        self._logger.info(
            "song_tag_deleted",
            owner_id=user_id,
            track_id=track_id,
            tag_id=tag_id,
            **self._get_context_kwargs(),
        )

    def song_tag_not_found(self, user_id: int, track_id: str, tag_id: int) -> None:
        self._logger.debug(
            "song_tag_not_found",
            owner_id=user_id,
            track_id=track_id,
            tag_id=tag_id,
            **self._get_context_kwargs(),
        )

    def tag_not_owned(self, user_id: int, tag_id: int) -> None:
        self._logger.warning(
            "song_tag_tag_not_owned",
            owner_id=user_id,
            tag_id=tag_id,
            **self._get_context_kwargs(),
        )

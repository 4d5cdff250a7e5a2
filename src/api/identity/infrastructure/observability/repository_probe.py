"""Domain probe for user repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_upserted(self, user_id: int, external_id: str) -> None:
        """Record that a user was created or updated from an authentication."""
        ...

    def tokens_updated(self, user_id: int, refresh_token_rotated: bool) -> None:
        """Record that a user's provider tokens were replaced."""
        ...

    def user_retrieved(self, user_id: int) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, user_id: int) -> None:
        """Record that a user was not found."""
        ...

    def external_id_not_found(self, external_id: str) -> None:
        """Record that no user is linked to an external id."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_upserted(self, user_id: int, external_id: str) -> None:
        """Record that a user was created or updated from an authentication."""
        self._logger.info(
            "user_upserted",
            user_id=user_id,
            external_id=external_id,
            **self._get_context_kwargs(),
        )

    def tokens_updated(self, user_id: int, refresh_token_rotated: bool) -> None:
        """Record that a user's provider tokens were replaced."""
        self._logger.info(
            "user_tokens_updated",
            user_id=user_id,
            refresh_token_rotated=refresh_token_rotated,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: int) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: int) -> None:
        """Record that a user was not found."""
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def external_id_not_found(self, external_id: str) -> None:
        """Record that no user is linked to an external id."""
        self._logger.debug(
            "external_id_not_found",
            external_id=external_id,
            **self._get_context_kwargs(),
        )
